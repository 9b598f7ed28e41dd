"""
Dynamical observables
---------------------

Script to calculate mean squared displacements of active particles with dry friction, either
from the MSD file written to disc during the simulation or from the saved trajectories, and to
plot the stationary velocity distribution. """

import numpy as np
import scipy as sp
import scipy.stats
from numba import njit
from matplotlib import pyplot as plt
from .files import output_files, process_stream, read_msd, read_density

@njit
def time_averaged_msd(X):
    """ Time averaged, ensemble averaged mean squared displacement of a trajectory X (Nt, N)
    as a function of lag time (in units of the output interval).

    Returns
    -------
    ta_msd : (Nt,) array_like of float
        ta_msd[k] is the MSD at lag k; ta_msd[0] = 0
    count : (Nt,) array_like of float
        number of time origins averaged over at each lag
    """
    num_t, N = X.shape
    ta_msd = np.zeros((num_t,))
    count = np.zeros((num_t,))
    for i in range(num_t):
        for j in range(i, num_t):
            diff = X[j] - X[i]
            ta_msd[j - i] += np.mean(diff * diff)
            count[j - i] += 1
    return ta_msd / count, count

def msd_exponent(t, msd, tmin=None, tmax=None):
    """ Exponent alpha of a power law :math:`MSD \\sim t^\\alpha`, fit in log-log space between
    `tmin` and `tmax`. Points with non-positive time or MSD are ignored.

    Returns
    -------
    alpha : float
        slope of the log-log fit
    prefactor : float
        MSD at t = 1 according to the fit
    """
    t = np.asarray(t)
    msd = np.asarray(msd)
    mask = (t > 0) & (msd > 0)
    if tmin is not None:
        mask &= t >= tmin
    if tmax is not None:
        mask &= t <= tmax
    if mask.sum() < 2:
        raise ValueError('Need at least two points with positive time and MSD to fit exponent')
    slope, intercept, r, p, se = sp.stats.linregress(np.log(t[mask]), np.log(msd[mask]))
    return slope, np.exp(intercept)

def plot_msd(prefix, trajectories=False, ax=None):
    """ Plot the MSD recorded during the simulation with path prefix `prefix` on a log-log scale.
    If `trajectories`, also plot the time averaged MSD computed from the saved trajectory."""
    files = output_files(prefix)
    t_msd, msd = read_msd(files['misc_measurements'])
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure
    #a run without displacement (e.g. no noise) has nothing to fit
    if np.sum((t_msd > 0) & (msd > 0)) >= 2:
        alpha, _ = msd_exponent(t_msd, msd)
        print(f'Exponent of MSD: {alpha}')
    ax.plot(t_msd, msd, 'b.-', label='ensemble MSD')
    if trajectories:
        t_save, X = process_stream(files['trajectories'])
        ta_msd, count = time_averaged_msd(X)
        lag = t_save - t_save[0]
        ax.plot(lag[1:], ta_msd[1:], 'r--', label='time averaged MSD')
    ax.set_xlabel('Time')
    ax.set_ylabel('MSD')
    ax.set_xscale('log')
    ax.set_yscale('log')
    ax.legend()
    fig.tight_layout()
    return fig, ax

def plot_density(prefix, ax=None, vmax=None):
    """ Plot the stationary velocity distribution p(v) of the simulation with path prefix
    `prefix`."""
    vel, p = read_density(output_files(prefix)['density'])
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure
    ax.plot(vel, p, 'k-')
    if vmax is None:
        #restrict to the support of the distribution
        support = vel[p > 0]
        if len(support) > 0:
            ax.set_xlim(support.min(), support.max())
    else:
        ax.set_xlim(-vmax, vmax)
    ax.set_xlabel('$v$')
    ax.set_ylabel('$p(v)$')
    fig.tight_layout()
    return fig, ax
