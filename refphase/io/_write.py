import numpy as np
import pandas as pd
from typing import Dict

from ..data import MISSING, Mosaic
from ._read import MISSING_DIGIT


def write_digit_mat(path, mat):
    """
    Write a matrix of integer with [0-9], and with no delimiter.
    """
    np.savetxt(path, mat, fmt="%d", delimiter="")


def write_geno(path: str, geno: np.ndarray) -> None:
    """Write (n_snp, n_indiv) genotypes with one individual per row

    MISSING entries are written as `9`.
    """
    mat = np.where(geno == MISSING, MISSING_DIGIT, geno).T
    write_digit_mat(path, mat)


def write_mosaic(path: str, mosaic: Mosaic) -> None:
    """Write a phased mosaic, see `Mosaic.write`"""
    assert isinstance(mosaic, Mosaic), "mosaic must be refphase.data.Mosaic"
    mosaic.write(path)


def write_summary(path: str, mosaic: Mosaic, failed: Dict[int, str]) -> None:
    """Write the per-sample segment counts and exclusion reasons"""
    df = mosaic.summary()
    df["REASON"] = pd.Series(failed, dtype=object).reindex(df.index)
    df.to_csv(path, sep="\t", na_rep="NA")
