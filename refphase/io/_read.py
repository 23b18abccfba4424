import re
import numpy as np
import pandas as pd

from ..data import MISSING, Mosaic

# digit used for a missing genotype in digit matrix files
MISSING_DIGIT = 9


def read_digit_mat(path: str, filter_non_numeric: bool = False, nrows: int = None):
    """
    Read a matrix of integer with [0-9], and with no delimiter.

    Parameters
    ----------
    path : str
        path to the matrix file
    filter_non_numeric : bool, optional
        whether to filter out non-numeric characters, by default False
    nrows : int, optional
        number of rows to read, by default None

    Returns
    -------
    np.ndarray
        matrix of integer
    """
    if nrows is None:
        with open(path) as f:
            lines = [line.strip() for line in f.readlines()]
    else:
        assert filter_non_numeric is False
        lines = [
            str(line.item())
            for line in pd.read_csv(path, nrows=nrows, header=None, dtype=str).values
        ]
    if filter_non_numeric:
        lines = [re.sub("[^0-9]", "", line) for line in lines]
    lines = [line for line in lines if len(line) > 0]
    mat = np.array([[int(c) for c in line] for line in lines], dtype=np.int8)
    return mat


def read_panel(path: str) -> np.ndarray:
    """Read a reference panel with one haplotype per row

    Returns
    -------
    np.ndarray
        (n_snp, n_hap) haplotypes
    """
    return np.ascontiguousarray(read_digit_mat(path).T)


def read_geno(path: str) -> np.ndarray:
    """Read target genotypes with one individual per row, `9` for missing

    Returns
    -------
    np.ndarray
        (n_typed, n_indiv) genotypes with MISSING for missing entries
    """
    geno = read_digit_mat(path).T.copy()
    geno[geno == MISSING_DIGIT] = MISSING
    return geno


def read_typed_idx(path: str) -> np.ndarray:
    """Read the reference marker index of each typed marker, one per line"""
    df = pd.read_csv(path, header=None, sep=r"\s+", dtype=np.int64)
    assert df.shape[1] == 1, "typed marker file must have a single column"
    return df.iloc[:, 0].values


def read_mosaic(path: str) -> Mosaic:
    """Read a phased mosaic written by `write_mosaic`"""
    return Mosaic.read(path)
