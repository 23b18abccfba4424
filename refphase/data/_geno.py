import numpy as np
import dask.array as da
from typing import Union

from .._errors import AlignmentError, PanelError

# sentinel of a missing genotype
MISSING = -1


def normalize_geno(geno: Union[np.ndarray, da.Array]) -> np.ndarray:
    """Convert a target genotype matrix to int8 with `MISSING` for missing entries

    Parameters
    ----------
    geno : Union[np.ndarray, da.Array]
        (n_typed, n_indiv) genotype matrix. Missing entries are either `np.nan`
        (float input) or any negative value.

    Returns
    -------
    np.ndarray
        (n_typed, n_indiv) int8 matrix with entries in {0, 1, 2, MISSING}
    """
    if isinstance(geno, da.Array):
        geno = geno.compute()
    geno = np.asarray(geno)
    if geno.ndim == 1:
        geno = geno[:, np.newaxis]
    if geno.ndim != 2:
        raise ValueError("`geno` must be a (n_typed, n_indiv) matrix")

    if np.issubdtype(geno.dtype, np.floating):
        nan_mask = np.isnan(geno)
        values = geno[~nan_mask]
        if not np.all(values == np.round(values)):
            raise ValueError("`geno` must contain integer genotypes or NaN")
        missing = nan_mask | (geno < 0)
    else:
        missing = geno < 0

    if np.any(np.where(missing, 0, geno) > 2):
        raise ValueError("genotypes must be in {0, 1, 2} or missing")
    return np.where(missing, MISSING, geno).astype(np.int8)


def check_panel(panel: Union[np.ndarray, da.Array]) -> None:
    """Check shape and allele coding of the reference panel

    Parameters
    ----------
    panel : Union[np.ndarray, da.Array]
        (n_snp, n_hap) reference haplotypes
    """
    if panel.ndim != 2:
        raise PanelError("reference panel must be a (n_snp, n_hap) matrix")
    n_snp, n_hap = panel.shape
    if n_hap < 2:
        raise PanelError(
            f"reference panel has {n_hap} haplotype(s), at least 2 are required"
        )
    if n_snp == 0:
        raise PanelError("reference panel has no markers")
    binary = (panel == 0) | (panel == 1)
    if isinstance(panel, da.Array):
        binary = binary.all().compute()
    if not np.all(binary):
        raise PanelError("reference panel alleles must be coded as 0 or 1")


def check_typed_idx(typed_idx: np.ndarray, n_snp: int) -> np.ndarray:
    """Check the mapping from typed markers to reference markers

    Parameters
    ----------
    typed_idx : np.ndarray
        (n_typed,) reference marker index of each typed marker
    n_snp : int
        number of reference markers

    Returns
    -------
    np.ndarray
        typed_idx as an int64 array
    """
    typed_idx = np.asarray(typed_idx)
    if typed_idx.ndim != 1 or len(typed_idx) == 0:
        raise AlignmentError("`typed_idx` must be a non-empty 1-d array")
    if not np.issubdtype(typed_idx.dtype, np.integer):
        raise AlignmentError("`typed_idx` must contain integer marker indices")
    typed_idx = typed_idx.astype(np.int64)

    out_of_range = np.where((typed_idx < 0) | (typed_idx >= n_snp))[0]
    if len(out_of_range) > 0:
        i = out_of_range[0]
        raise AlignmentError(
            f"typed marker {i} maps to reference marker {typed_idx[i]}, "
            f"outside of [0, {n_snp})"
        )
    uniq, counts = np.unique(typed_idx, return_counts=True)
    if np.any(counts > 1):
        raise AlignmentError(
            f"reference marker {uniq[counts > 1][0]} is mapped by more than one "
            "typed marker"
        )
    if np.any(np.diff(typed_idx) < 0):
        raise AlignmentError("`typed_idx` must be in reference marker order")
    return typed_idx
