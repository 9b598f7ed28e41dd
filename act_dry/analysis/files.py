r"""
File I/O
--------
Functions to read the files written by a simulation (of the form 'prefix-[stream].csv') back into
numpy arrays for post processing analysis.

"""

import numpy as np
import pandas as pd
from ..bdsim.output import STREAMS, output_path

def output_files(prefix):
    """ Paths of all output files of the simulation with path prefix `prefix`."""
    return {stream: output_path(prefix, stream) for stream in STREAMS}

def _read(file):
    return pd.read_csv(file, header=None, skipinitialspace=True)

def process_stream(file):
    """ Extracts a trajectory, velocity or activity file and creates a numpy.ndarray with the
    entire time series of the ensemble.

    Parameters
    ----------
    file : str or Path to csv file
       each line holds the time followed by one value per realization

    Returns
    -------
    t_save : np.ndarray[float64] (Nt,)
        time points at which the ensemble was saved
    X : np.ndarray[float64] (Nt, N)
        values of all N realizations at each time point

    """
    mat = _read(file).to_numpy(dtype=float)
    return mat[:, 0], mat[:, 1:]

def read_msd(file):
    """ Times and mean squared displacements from a 'misc_measurements' file."""
    df = _read(file)
    return df[0].to_numpy(dtype=float), df[1].to_numpy(dtype=float)

def read_density(file):
    """ Velocities and probability density p(v) from a 'density' file."""
    df = _read(file)
    return df[0].to_numpy(dtype=float), df[1].to_numpy(dtype=float)
