""" Script to run brownian dynamics simulations of active particles with dry friction."""
import sys
from act_dry.bdsim.dry import simulate
from act_dry.bdsim.params import parse_params

def main(args=None):
    params = parse_params(args)
    params.echo()
    try:
        simulate(params.prefix, **params.sim_kwargs())
    except OSError as e:
        print(f'ERROR: output file I/O failed: {e}', file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
