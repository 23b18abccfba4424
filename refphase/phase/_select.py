import numpy as np
from typing import List, NamedTuple, Optional

from .._errors import DegenerateWindowError
from ._compress import HaplotypePool


class PairSelection(NamedTuple):
    """All unordered pairs of unique haplotypes with the minimal error

    `pairs` is (n_pairs, 2) with `pairs[:, 0] <= pairs[:, 1]`.
    """

    error: int
    pairs: np.ndarray

    def candidates(self, pool: HaplotypePool):
        """Expand the tied pairs to the candidate sets of the two copies"""
        return pool.expand(self.pairs[:, 0]), pool.expand(self.pairs[:, 1])


def _pair_error(
    xx: int, a: np.ndarray, c: np.ndarray, gram: np.ndarray
) -> np.ndarray:
    """(n_unique, n_unique) least-squares error of every pair

    err(i, j) = sum(x^2) - 2 (a_i + a_j) + (c_i + c_j) + 2 G_ij
    which holds because haplotype alleles are 0/1.
    """
    return xx - 2 * (a[:, None] + a[None, :]) + (c[:, None] + c[None, :]) + 2 * gram


def _scan_min(err: np.ndarray) -> PairSelection:
    iu, ju = np.triu_indices(err.shape[0])
    upper = err[iu, ju]
    min_err = upper.min()
    tied = np.where(upper == min_err)[0]
    return PairSelection(
        error=int(min_err), pairs=np.stack([iu[tied], ju[tied]], axis=1)
    )


def select_pairs(
    pool: HaplotypePool, geno: np.ndarray
) -> List[Optional[PairSelection]]:
    """Find the best unordered pairs of unique haplotypes for every sample

    The objective of a sample is the squared difference between its genotypes
    and the sum of the two haplotypes, over its observed markers. Shared
    quantities are computed once per window: `U @ x` and `U @ obs` as matrix
    products over all samples, and the Gram matrix `(U * obs) @ U.T` once per
    distinct missingness pattern.

    Parameters
    ----------
    pool : HaplotypePool
        distinct haplotypes of the window
    geno : np.ndarray
        (width, n_indiv) genotypes of the window, negative for missing

    Returns
    -------
    List[Optional[PairSelection]]
        one selection per sample; None when all genotypes of a sample are
        missing in the window
    """
    assert (
        geno.ndim == 2 and geno.shape[0] == pool.width
    ), "geno must be (width, n_indiv)"
    U = pool.unique.astype(np.int64)
    obs = (geno >= 0).astype(np.int64)
    x = np.where(geno >= 0, geno, 0).astype(np.int64)

    # (n_unique, n_indiv)
    a = U @ x
    c = U @ obs
    xx = (x ** 2).sum(axis=0)

    patterns, pattern_idx = np.unique(obs.T, axis=0, return_inverse=True)
    pattern_idx = pattern_idx.reshape(-1)
    grams = [(U * p[None, :]) @ U.T for p in patterns]

    selections: List[Optional[PairSelection]] = []
    for indiv_i in range(geno.shape[1]):
        if obs[:, indiv_i].sum() == 0:
            selections.append(None)
            continue
        err = _pair_error(
            xx[indiv_i], a[:, indiv_i], c[:, indiv_i], grams[pattern_idx[indiv_i]]
        )
        selections.append(_scan_min(err))
    return selections


def select_pairs_single(pool: HaplotypePool, x: np.ndarray) -> PairSelection:
    """Best unordered pairs of unique haplotypes for a single genotype vector

    Parameters
    ----------
    pool : HaplotypePool
        distinct haplotypes of the window
    x : np.ndarray
        (width,) genotypes, negative for missing

    Returns
    -------
    PairSelection
    """
    x = np.asarray(x)
    if np.all(x < 0):
        raise DegenerateWindowError("all genotypes in the window are missing")
    return select_pairs(pool, x[:, np.newaxis])[0]
