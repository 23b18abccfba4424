import numpy as np
from typing import Tuple

from ..data import MISSING


def hap_tracts(n_snp: int, n_source: int, mosaic_size: float) -> np.ndarray:
    """Simulate the source of every marker of one haplotype

    Tract lengths are drawn from an exponential distribution, as in a
    homogeneous Poisson process of cross-overs, and each tract copies a source
    chosen uniformly at random.

    Parameters
    ----------
    n_snp : int
        number of markers
    n_source : int
        number of source haplotypes
    mosaic_size : float
        expected tract length in number of markers

    Returns
    -------
    np.ndarray
        (n_snp,) source index of each marker
    """
    assert mosaic_size > 0, "mosaic_size must be positive"
    breaks = []
    total = 0
    while total < n_snp:
        total += int(np.ceil(np.random.exponential(scale=mosaic_size)))
        breaks.append(min(total, n_snp))
    values = np.random.randint(n_source, size=len(breaks))

    src = np.zeros(n_snp, dtype=np.int64)
    start = 0
    for stop, val in zip(breaks, values):
        src[start:stop] = val
        start = stop
    return src


def ref_panel(
    n_snp: int,
    n_hap: int,
    n_founder: int = 8,
    mosaic_size: float = 100.0,
    mutation_rate: float = 0.0,
) -> np.ndarray:
    """Simulate a reference panel of haplotypes descending from a few founders

    The founders are drawn with allele frequencies uniform in [0.05, 0.95];
    every reference haplotype is a mosaic of founders with mutations applied
    at rate `mutation_rate`. Panels simulated this way compress well within
    windows, like real panels do.

    Parameters
    ----------
    n_snp : int
        number of markers
    n_hap : int
        number of reference haplotypes
    n_founder : int
        number of founder haplotypes
    mosaic_size : float
        expected founder tract length in number of markers
    mutation_rate : float
        probability that an allele is flipped

    Returns
    -------
    np.ndarray
        (n_snp, n_hap) int8 haplotypes
    """
    freq = np.random.uniform(0.05, 0.95, size=n_snp)
    founders = np.random.binomial(1, freq[:, None], size=(n_snp, n_founder))
    panel = np.zeros((n_snp, n_hap), dtype=np.int8)
    for hap_i in range(n_hap):
        src = hap_tracts(n_snp, n_founder, mosaic_size)
        panel[:, hap_i] = founders[np.arange(n_snp), src]
    if mutation_rate > 0:
        flip = np.random.uniform(size=panel.shape) < mutation_rate
        panel[flip] = 1 - panel[flip]
    return panel


def mosaic_geno(
    panel: np.ndarray, n_indiv: int, mosaic_size: float
) -> Tuple[np.ndarray, np.ndarray]:
    """Simulate diploid samples whose chromosome copies are mosaics of the panel

    Parameters
    ----------
    panel : np.ndarray
        (n_snp, n_hap) reference haplotypes
    n_indiv : int
        number of samples
    mosaic_size : float
        expected tract length in number of markers

    Returns
    -------
    geno : np.ndarray
        (n_snp, n_indiv) int8 genotypes
    hap_idx : np.ndarray
        (n_snp, n_indiv, 2) reference haplotype copied at every marker
    """
    n_snp, n_hap = panel.shape
    hap_idx = np.zeros((n_snp, n_indiv, 2), dtype=np.int64)
    for indiv_i in range(n_indiv):
        for copy_i in range(2):
            hap_idx[:, indiv_i, copy_i] = hap_tracts(n_snp, n_hap, mosaic_size)
    rows = np.arange(n_snp)[:, None]
    geno = panel[rows, hap_idx[:, :, 0]] + panel[rows, hap_idx[:, :, 1]]
    return geno.astype(np.int8), hap_idx


def mask_geno(geno: np.ndarray, missing_rate: float) -> np.ndarray:
    """Set each genotype to MISSING with probability `missing_rate`

    Parameters
    ----------
    geno : np.ndarray
        genotype matrix
    missing_rate : float
        probability of an entry being missing

    Returns
    -------
    np.ndarray
        masked copy of `geno`
    """
    assert 0 <= missing_rate <= 1, "missing_rate must be in [0, 1]"
    masked = geno.astype(np.int8)
    masked[np.random.uniform(size=geno.shape) < missing_rate] = MISSING
    return masked
