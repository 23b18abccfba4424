"""Common utility functions for `refphase`. Used by more than 2 modules"""
import os
from contextlib import contextmanager
from typing import Union

import dask.array as da
import numpy as np


@contextmanager
def cd(newdir):
    prevdir = os.getcwd()
    os.chdir(os.path.expanduser(newdir))
    try:
        yield
    finally:
        os.chdir(prevdir)


def as_numpy(mat: Union[np.ndarray, da.Array]) -> np.ndarray:
    """Materialize `mat` as a numpy array

    Parameters
    ----------
    mat : Union[np.ndarray, da.Array]
        numpy array, or a dask array that will be computed

    Returns
    -------
    np.ndarray
    """
    if isinstance(mat, da.Array):
        return mat.compute()
    return np.asarray(mat)
