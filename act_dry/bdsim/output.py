r"""
Output streams
--------------
The simulation writes five comma separated text files, all sharing a path prefix:

    * ``prefix-trajectories.csv``: time followed by the positions of the N realizations
    * ``prefix-velocity.csv``: time followed by the N velocities
    * ``prefix-activity.csv``: time followed by the N activities
    * ``prefix-misc_measurements.csv``: time and mean squared displacement
    * ``prefix-density.csv``: velocity and probability density p(v), written once at the end

Records are appended line by line while the simulation runs. The three per-realization streams
can be switched off, in which case their files are not created.
"""
from contextlib import ExitStack
from pathlib import Path

TRAJECTORY_STREAMS = ('trajectories', 'velocity', 'activity')
STREAMS = TRAJECTORY_STREAMS + ('misc_measurements', 'density')


def output_path(prefix, stream):
    """ File that stream `stream` is written to for a given path prefix."""
    prefix = Path(prefix)
    return prefix.parent / f'{prefix.name}-{stream}.csv'


class OutputStreams:
    """ Context manager owning the open output files of one simulation run.

    All files are opened on entry. If any of them cannot be opened, the ones already opened are
    closed again and the OSError propagates. On exit, every open file is closed.

    Parameters
    ----------
    prefix : str or Path
        path prefix prepended to the names of all output files
    trajectories : bool
        whether to open the trajectory, velocity and activity streams
    """

    def __init__(self, prefix, trajectories=True):
        self.prefix = Path(prefix)
        self.trajectories = trajectories
        self.files = {}
        self._stack = None

    def paths(self):
        streams = STREAMS if self.trajectories else STREAMS[len(TRAJECTORY_STREAMS):]
        return {stream: output_path(self.prefix, stream) for stream in streams}

    def __enter__(self):
        self.prefix.parent.mkdir(parents=True, exist_ok=True)
        with ExitStack() as stack:
            for stream, path in self.paths().items():
                self.files[stream] = stack.enter_context(open(path, 'w'))
            self._stack = stack.pop_all()
        return self

    def __exit__(self, *exc):
        self._stack.close()
        self.files = {}
        return False

    def write_ensemble(self, t, x, v, n):
        """ Write one record of positions, velocities and activities at time t."""
        for stream, values in zip(TRAJECTORY_STREAMS, (x, v, n)):
            fields = [f'{t:f}'] + [f'{value:f}' for value in values]
            self.files[stream].write(', '.join(fields) + '\n')

    def write_msd(self, t, msd):
        self.files['misc_measurements'].write(f'{t:e}, {msd:e}\n')

    def write_density(self, velocities, density):
        """ Write the normalized velocity distribution, one bin per line."""
        f = self.files['density']
        for vel, p in zip(velocities, density):
            f.write(f'{vel:f}, {p:e}\n')
