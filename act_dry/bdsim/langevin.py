r"""
Langevin kernels for active particles with dry friction
-------------------------------------------------------

Just in time compiled (Numba) routines that advance an ensemble of N independent active
particles by a single Euler-Maruyama step and accumulate the stationary velocity distribution.

The Langevin equations for the ith realization are

    .. math::
        \frac{dx_i}{dt} = v_i

        \frac{dv_i}{dt} = -\Delta\,\mathrm{sign}(v_i) + f_0 n_i(t) + \xi_i(t)

        \frac{dn_i}{dt} = -\frac{n_i}{\tau} + \eta_i(t)

where :math:`\Delta` is the strength of the dry (Coulomb) friction, :math:`n_i` is an
Ornstein-Uhlenbeck activity with persistence time :math:`\tau` and amplitude :math:`f_0`,
and :math:`\xi_i, \eta_i` are independent, delta-correlated Gaussian noises with
:math:`\langle \xi_i(t) \xi_j(t') \rangle = 2D \delta_{ij} \delta(t-t')` and
:math:`\langle \eta_i(t) \eta_j(t') \rangle = (2/\tau) \delta_{ij} \delta(t-t')`.

The standard normal deviates are drawn outside of the kernels and passed in, so that the random
source can be seeded or replaced without recompiling.
"""
import numpy as np
from numba import njit

#number of histogram bins per unit velocity
BINS = 10
#velocities in ]-HALF_WIDTH, HALF_WIDTH[ are binned into the velocity histogram
HALF_WIDTH = 101


def noise_amplitudes(D, dt, tau):
    r""" Standard deviations of the velocity noise, :math:`\sqrt{2 D dt}`, and of the activity
    noise, :math:`\sqrt{2 dt / \tau}`, over one time step."""
    return np.sqrt(2 * D * dt), np.sqrt(2 * dt / tau)


@njit
def sign(a):
    """ Sign of a float: 1.0, -1.0 or 0.0 exactly at zero."""
    if a > 0:
        return 1.0
    elif a < 0:
        return -1.0
    return 0.0


@njit
def bin_index(v, bins, half_width):
    """ Histogram bin of velocity v, or -1 if v cannot be represented."""
    if np.abs(v) >= half_width:
        return -1
    # round half away from zero; v + half_width > 0 here
    k = int(np.floor((v + half_width) * bins + 0.5))
    if k >= 2 * bins * half_width:
        return -1
    return k


@njit
def euler_maruyama_step(x, v, n, rho, xi, dt, delta, f0, tau, var_noise, activity_noise,
                        bins, half_width):
    r""" Advance all N realizations by one time step dt in place and add the new velocities
    to the histogram rho.

    Parameters
    ----------
    x : (N,) array_like of float
        Positions.
    v : (N,) array_like of float
        Velocities.
    n : (N,) array_like of float
        Activities.
    rho : (2 * bins * half_width,) array_like of float
        Velocity histogram (counts).
    xi : (2, N) array_like of float
        Standard normal deviates; row 0 drives the velocities and row 1 the activities.
    dt : float
        Time step.
    delta : float
        Strength of the dry friction.
    f0 : float
        Activity amplitude.
    tau : float
        Persistence time of the activity.
    var_noise : float
        :math:`\sqrt{2 D dt}`
    activity_noise : float
        :math:`\sqrt{2 dt / \tau}`
    bins : int
        Number of bins per unit velocity.
    half_width : int
        Velocities in ]-half_width, half_width[ are binned.

    Notes
    -----
    The friction impulse over one step is capped by the current speed: on its own, dry
    friction brings a particle to rest but cannot reverse its direction of motion. For
    :math:`|v_i| \geq \Delta dt` this is the plain Euler-Maruyama update.
    """
    N = x.shape[0]
    for i in range(N):
        x[i] += dt * v[i]
        friction = dt * delta * sign(v[i])
        if np.abs(friction) > np.abs(v[i]):
            friction = v[i]
        v[i] += -friction + dt * n[i] * f0 + var_noise * xi[0, i]
        n[i] += dt * (-n[i] / tau) + activity_noise * xi[1, i]
        k = bin_index(v[i], bins, half_width)
        if k >= 0:
            rho[k] += 1.0


@njit
def mean_squared_displacement(x, xinit):
    """ Ensemble average of :math:`(x_i - x_i^{init})^2`."""
    N = x.shape[0]
    msd = 0.0
    for i in range(N):
        diff = x[i] - xinit[i]
        msd += diff * diff
    return msd / N


def bin_centers(bins=BINS, half_width=HALF_WIDTH):
    r""" Velocity associated with each histogram bin, :math:`(i - bins \cdot half\_width)/bins`."""
    return (np.arange(2 * bins * half_width) - bins * half_width) / bins


def normalize_density(rho, bins=BINS):
    r""" Convert histogram counts into a probability density p(v) with
    :math:`\sum_i p(v_i) / bins = 1`. An empty histogram gives zeros."""
    total = rho.sum()
    if total == 0:
        return np.zeros_like(rho)
    return rho * bins / total
