""" Command line parameters of a dry friction simulation."""
from pathlib import Path
from typing import Optional
from tap import Tap

#read if present in the working directory; command line flags take precedence
CONFIG_FILE = 'sim.cfg'


class SimParams(Tap):
    N: int = 20 #number of realizations
    D: float = 1.0 #diffusion constant
    dt: float = 0.001 #time step of the Euler-Maruyama scheme
    tf: float = 2000.0 #total time of the simulation run (excluding equilibration)
    teq: float = 1000.0 #equilibration time before sampling starts
    tau: float = 1.0 #persistence time of the activity
    f0: float = 0.01 #activity amplitude
    delta: float = 0.0 #strength of the Coulomb friction
    tf_trajectory: float = 1.0 #output interval of trajectories, first interval of MSD output
    prefix: str = 'data/test' #path prefix for output files
    no_trajectories: bool = False #do not write trajectories, velocities and activities
    keep_equilibration_histogram: bool = False #include equilibration velocities in p(v)
    seed: Optional[int] = None #seed of the random number generator

    def sim_kwargs(self):
        """ Keyword arguments of DryFrictionSim."""
        return dict(N=self.N, D=self.D, dt=self.dt, tf=self.tf, teq=self.teq, tau=self.tau,
                    f0=self.f0, delta=self.delta, tf_trajectory=self.tf_trajectory,
                    output_trajectories=not self.no_trajectories,
                    reset_histogram=not self.keep_equilibration_histogram,
                    seed=self.seed)

    def echo(self):
        print('Simulation parameters:')
        print(f'Number of realizations: {self.N}')
        print(f'Path prefix: {self.prefix}')
        for name in ('dt', 'D', 'f0', 'delta', 'tau', 'teq', 'tf', 'tf_trajectory'):
            print(f'{name}: {getattr(self, name)}')


def parse_params(args=None, config_file=CONFIG_FILE):
    """ Parse `args` (the command line if None), with defaults taken from `config_file`
    if that file exists."""
    config_files = [str(config_file)] if Path(config_file).is_file() else None
    return SimParams(config_files=config_files).parse_args(args)
