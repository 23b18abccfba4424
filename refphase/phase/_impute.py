import numpy as np
import dask.array as da
from tqdm import tqdm
from typing import Union

from .._errors import PanelError
from ..data import MISSING, Mosaic
from ..utils import as_numpy


def impute(
    panel: Union[np.ndarray, da.Array],
    mosaic: Mosaic,
    geno: np.ndarray = None,
    typed_idx: np.ndarray = None,
    keep_typed: bool = False,
    snp_chunk: int = 1024,
    verbose: bool = False,
) -> np.ndarray:
    """Reconstruct genotypes at every reference marker from a phased mosaic

    The genotype of a marker is the sum of the alleles of the representative
    haplotypes (lowest compatible index) of the two chromosome copies.
    The panel is read in chunks of `snp_chunk` markers.

    Parameters
    ----------
    panel : Union[np.ndarray, da.Array]
        (n_snp, n_hap) reference haplotypes
    mosaic : Mosaic
        phased mosaic over the n_snp reference markers
    geno : np.ndarray, optional
        (n_typed, n_indiv) observed genotypes, required with `keep_typed`
    typed_idx : np.ndarray, optional
        (n_typed,) reference marker of each typed marker, required with
        `keep_typed`
    keep_typed : bool
        whether to restore observed typed genotypes after reconstruction,
        by default False
    snp_chunk : int
        number of markers reconstructed at a time
    verbose : bool
        whether to show a progress bar

    Returns
    -------
    np.ndarray
        (n_snp, n_indiv) int8 genotypes; columns of excluded samples are
        filled with MISSING
    """
    n_snp, n_hap = panel.shape
    assert mosaic.n_snp == n_snp, "mosaic and panel must have the same n_snp"
    out = np.full((n_snp, mosaic.n_indiv), MISSING, dtype=np.int8)

    starts = np.arange(0, n_snp, snp_chunk)
    for start in tqdm(starts, desc="refphase.phase.impute", disable=not verbose):
        stop = min(start + snp_chunk, n_snp)
        chunk = as_numpy(panel[start:stop, :])
        if not np.all((chunk == 0) | (chunk == 1)):
            raise PanelError(
                f"reference panel alleles in markers [{start}, {stop}) must be "
                "coded as 0 or 1"
            )
        idx = mosaic.hap_index(start, stop)
        excluded = idx[:, :, 0] < 0
        idx = np.where(idx < 0, 0, idx)
        dosage = np.take_along_axis(chunk, idx[:, :, 0], axis=1) + np.take_along_axis(
            chunk, idx[:, :, 1], axis=1
        )
        out[start:stop, :] = np.where(excluded, MISSING, dosage)

    if keep_typed:
        assert (geno is not None) and (
            typed_idx is not None
        ), "`geno` and `typed_idx` are required with `keep_typed`"
        assert geno.shape == (len(typed_idx), mosaic.n_indiv), "`geno` shape mismatch"
        restore = (geno >= 0) & (out[typed_idx, :] != MISSING)
        typed_out = out[typed_idx, :]
        typed_out[restore] = geno[restore]
        out[typed_idx, :] = typed_out

    return out
