r"""
Active particles with dry friction
----------------------------------

Brownian dynamics of an ensemble of N independent active particles in one dimension, subject
to dry (Coulomb) friction of strength :math:`\Delta`, a persistent Ornstein-Uhlenbeck activity of
amplitude :math:`f_0` and persistence time :math:`\tau`, and thermal noise of strength :math:`D`
(see :mod:`act_dry.bdsim.langevin` for the equations of motion).

A simulation proceeds in two phases, both driven by the same lock-step integrator:
    1. **equilibrate**: integrate for a time ``teq`` without measuring anything, then take a
       snapshot of the positions which serves as the origin of all displacements.
    2. **run**: integrate for a time ``tf``. Every ``tf_trajectory`` the positions, velocities
       and activities of all realizations are written out. The mean squared displacement is
       written out on a geometric schedule: the first interval is ``tf_trajectory`` and each
       subsequent interval is 1.1 times longer than the last, which samples early (ballistic)
       and late (diffusive) dynamics evenly on a logarithmic time axis.
The velocities of every step are binned into a histogram, which is normalized into the stationary
velocity distribution p(v) at the end of the run.

Notes
-----
The integrator step and the two output cadences are exposed as separate methods, so a host can
drive the loop itself (e.g. to stop between two steps) instead of calling :meth:`run`.
"""
import time
import numpy as np
from .langevin import (BINS, HALF_WIDTH, noise_amplitudes, euler_maruyama_step,
                       mean_squared_displacement, bin_centers, normalize_density)
from .output import OutputStreams

#growth factor of the interval between consecutive MSD measurements
MSD_GROWTH = 1.1


class DryFrictionSim:
    """ Ensemble of N active particles with dry friction.

    Parameters
    ----------
    N : int
        Number of realizations.
    D : float
        Diffusion constant of the thermal noise.
    dt : float
        Time step of the Euler-Maruyama integrator.
    tf : float
        Duration of the measurement run (excluding equilibration).
    teq : float
        Duration of the equilibration run.
    tau : float
        Persistence time of the activity.
    f0 : float
        Activity amplitude.
    delta : float
        Strength of the dry friction.
    tf_trajectory : float
        Interval between trajectory records, and first interval between MSD records.
    output_trajectories : bool
        Write positions, velocities and activities every `tf_trajectory`.
    reset_histogram : bool
        Discard the velocities sampled during equilibration from p(v).
    rng : numpy.random.Generator, optional
        Source of standard normal deviates (anything with a ``standard_normal(size)`` method).
    seed : int, optional
        Seed for the default generator if `rng` is not given.
    """

    def __init__(self, N=20, D=1.0, dt=0.001, tf=2000.0, teq=1000.0, tau=1.0, f0=0.01,
                 delta=0.0, tf_trajectory=1.0, output_trajectories=True, reset_histogram=True,
                 rng=None, seed=None):
        if N <= 0:
            raise ValueError(f'Number of realizations must be positive, got N={N}')
        if dt <= 0:
            raise ValueError(f'Time step must be positive, got dt={dt}')
        if tau <= 0:
            raise ValueError(f'Persistence time must be positive, got tau={tau}')
        if D < 0:
            raise ValueError(f'Diffusion constant must be non-negative, got D={D}')
        if tf_trajectory <= 0:
            raise ValueError(f'Output interval must be positive, got tf_trajectory={tf_trajectory}')
        self.N = int(N)
        self.D = D
        self.dt = dt
        self.tf = tf
        self.teq = teq
        self.tau = tau
        self.f0 = f0
        self.delta = delta
        self.tf_trajectory = tf_trajectory
        self.output_trajectories = output_trajectories
        self.reset_histogram = reset_histogram
        self.rng = np.random.default_rng(seed) if rng is None else rng
        self.bins = BINS
        self.half_width = HALF_WIDTH

        self.x = np.zeros(self.N)
        self.v = np.zeros(self.N)
        self.n = np.zeros(self.N)
        self.xinit = np.zeros(self.N)
        self.rho = np.zeros(2 * self.bins * self.half_width)
        self.init()

    def init(self):
        """ Zero the state and the velocity histogram, and compute the noise amplitudes."""
        self.x[:] = 0.0
        self.v[:] = 0.0
        self.n[:] = 0.0
        self.xinit[:] = 0.0
        self.rho[:] = 0.0
        self.var_noise, self.activity_noise = noise_amplitudes(self.D, self.dt, self.tau)
        self.t = 0.0
        self.t_trajectory = 0.0
        self.t_msd = 0.0
        self.msd_interval = self.tf_trajectory

    def step(self):
        """ Advance every realization by one time step."""
        xi = self.rng.standard_normal((2, self.N))
        euler_maruyama_step(self.x, self.v, self.n, self.rho, xi, self.dt, self.delta, self.f0,
                            self.tau, self.var_noise, self.activity_noise,
                            self.bins, self.half_width)
        self.t += self.dt

    def equilibrate(self, teq=None):
        """ Integrate for a time `teq` without measurements and take the current positions as
        the origin of the mean squared displacement."""
        if teq is None:
            teq = self.teq
        self.t = 0.0
        while self.t < teq:
            self.step()
        self.xinit[:] = self.x

    def msd(self):
        """ Mean squared displacement from the positions at the end of equilibration."""
        return mean_squared_displacement(self.x, self.xinit)

    def density(self):
        """ Velocities of the histogram bins and the normalized probability density p(v)."""
        return bin_centers(self.bins, self.half_width), normalize_density(self.rho, self.bins)

    def check_trajectory_output(self, streams):
        """ Write out x, v and n if `tf_trajectory` has elapsed since the last record."""
        self.t_trajectory += self.dt
        if self.t_trajectory >= self.tf_trajectory:
            self.t_trajectory = 0.0
            if self.output_trajectories:
                streams.write_ensemble(self.t, self.x, self.v, self.n)
            return True
        return False

    def check_msd_output(self, streams):
        """ Write out the MSD if the current sampling interval has elapsed, then lengthen the
        sampling interval by a factor of `MSD_GROWTH`."""
        self.t_msd += self.dt
        if self.t_msd >= self.msd_interval:
            self.t_msd = 0.0
            self.msd_interval *= MSD_GROWTH
            streams.write_msd(self.t, self.msd())
            return True
        return False

    def write_density(self, streams):
        velocities, density = self.density()
        if self.rho.sum() == 0:
            print('WARNING: no velocity fell inside the histogram, p(v) is zero everywhere')
        streams.write_density(velocities, density)

    def run(self, streams, tf=None):
        """ Measurement run of duration `tf`. Writes trajectory and MSD records to `streams`
        while integrating, and p(v) at the end.

        Parameters
        ----------
        streams : OutputStreams
            open output streams
        tf : float, optional
            duration of the run; defaults to the `tf` given at construction
        """
        if tf is None:
            tf = self.tf
        self.t = 0.0
        self.t_trajectory = 0.0
        self.t_msd = 0.0
        self.msd_interval = self.tf_trajectory
        if self.reset_histogram:
            self.rho[:] = 0.0
        while self.t < tf:
            self.step()
            self.check_trajectory_output(streams)
            self.check_msd_output(streams)
        self.write_density(streams)


def simulate(prefix, rng=None, **params):
    """ Run one full simulation (equilibration and measurement) and write all output files
    under `prefix`.

    Parameters
    ----------
    prefix : str or Path
        path prefix of the output files, e.g. ``data/test`` writes ``data/test-density.csv``, ...
    rng : numpy.random.Generator, optional
        source of standard normal deviates
    params :
        keyword arguments of :class:`DryFrictionSim`

    Returns
    -------
    sim : DryFrictionSim
        the simulation in its final state
    """
    sim = DryFrictionSim(rng=rng, **params)
    #open files first so that an unwritable prefix fails before any integration
    with OutputStreams(prefix, trajectories=sim.output_trajectories) as streams:
        print(f'Equilibrating for t={sim.teq}')
        sim.equilibrate()
        print(f'Running simulation for t={sim.tf}')
        tic = time.perf_counter()
        sim.run(streams)
        toc = time.perf_counter()
    print(f'Ran simulation in {(toc - tic):0.4f}s')
    return sim
