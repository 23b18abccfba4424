import concurrent.futures
import numpy as np
import dask.array as da
from tqdm import tqdm
from typing import Dict, List, NamedTuple, Optional, Union

import refphase
from .._errors import AlignmentError, ConfigError, PhaseError
from ..data import Mosaic, check_panel, check_typed_idx, normalize_geno
from ..utils import as_numpy
from ._breakpoint import BREAKPOINT_TIES, ORIENTATIONS
from ._compress import CompressedPanel, compress_window
from ._impute import impute
from ._phaser import PhasedSample, phase_sample
from ._select import select_pairs
from ._window import partition_windows


class PhaseResult(NamedTuple):
    """Output of a phasing run

    Attributes
    ----------
    mosaic : Mosaic
        phased haplotype mosaic over the reference markers
    geno : np.ndarray
        (n_snp, n_indiv) imputed genotypes, MISSING for excluded samples
    failed : Dict[int, str]
        reason of every excluded sample (lenient runs only)
    """

    mosaic: Mosaic
    geno: np.ndarray
    failed: Dict[int, str]


class RefPhaser(object):
    """Windowed reference-panel phasing and imputation

    Typed markers are split into windows. Within each window the reference
    haplotypes are compressed into distinct sequences and every sample is
    matched to all pairs of sequences with the minimal least-squares error.
    Candidate haplotypes are then propagated from window to window, and a
    recombination is located within the window when neither orientation lets
    both chromosome copies continue.

    Parameters
    ----------
    n_window : int, optional
        number of windows
    window_size : int, optional
        number of typed markers per window, alternative to `n_window`
    n_threads : int
        number of worker threads, by default 1
    orientation_tie : str
        orientation kept when both orientations keep the same number of
        candidates: "same" (default) or "swap"
    breakpoint_tie : str
        breakpoint offset kept on a tie: "midpoint" (default), "left", "right"
    strict : bool
        if True (default) a sample that cannot be phased aborts the run,
        otherwise the sample is excluded from the outputs
    verbose : bool
        whether to show progress bars

    Attributes
    ----------
    panel_ : Union[np.ndarray, da.Array]
        reference panel given to `fit`
    typed_idx_ : np.ndarray
        reference marker of each typed marker
    compressed_ : CompressedPanel
        windows and distinct haplotypes of each window
    samples_ : List[Optional[PhasedSample]]
        per-sample phasing of the last `phase` call
    failed_ : Dict[int, str]
        excluded samples of the last `phase` call
    """

    def __init__(
        self,
        n_window: int = None,
        window_size: int = None,
        n_threads: int = 1,
        orientation_tie: str = "same",
        breakpoint_tie: str = "midpoint",
        strict: bool = True,
        verbose: bool = False,
    ):
        if (n_window is None) == (window_size is None):
            raise ConfigError(
                "exactly one of `n_window` and `window_size` must be given"
            )
        for name, value in [("n_window", n_window), ("window_size", window_size)]:
            if value is None:
                continue
            if not isinstance(value, (int, np.integer)) or value <= 0:
                raise ConfigError(f"{name}={value} must be a positive integer")
        if not isinstance(n_threads, (int, np.integer)) or n_threads < 1:
            raise ConfigError(f"n_threads={n_threads} must be a positive integer")
        if orientation_tie not in ORIENTATIONS:
            raise ConfigError(
                f"orientation_tie={orientation_tie} must be one of {ORIENTATIONS}"
            )
        if breakpoint_tie not in BREAKPOINT_TIES:
            raise ConfigError(
                f"breakpoint_tie={breakpoint_tie} must be one of {BREAKPOINT_TIES}"
            )

        self.n_window = n_window
        self.window_size = window_size
        self.n_threads = int(n_threads)
        self.orientation_tie = orientation_tie
        self.breakpoint_tie = breakpoint_tie
        self.strict = strict
        self.verbose = verbose

        self.panel_ = None
        self.typed_idx_ = None
        self.compressed_ = None
        self.samples_ = None
        self.failed_ = None

    def __repr__(self) -> str:
        descr = (
            f"refphase.phase.RefPhaser(n_window={self.n_window}, "
            f"window_size={self.window_size}, n_threads={self.n_threads})"
        )
        if self.compressed_ is not None:
            descr += f", fitted on {self.compressed_.n_window} windows"
        return descr

    def _map(self, func, *iterables, desc: str = None, total: int = None) -> List:
        """Apply `func` over `iterables` with the configured number of threads"""
        if self.n_threads == 1:
            results = map(func, *iterables)
            return list(tqdm(results, desc=desc, total=total, disable=not self.verbose))

        executor = concurrent.futures.ThreadPoolExecutor(max_workers=self.n_threads)
        try:
            results = executor.map(func, *iterables)
            return list(tqdm(results, desc=desc, total=total, disable=not self.verbose))
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def fit(
        self, panel: Union[np.ndarray, da.Array], typed_idx: np.ndarray
    ) -> "RefPhaser":
        """Partition the typed markers and compress the panel in every window

        Parameters
        ----------
        panel : Union[np.ndarray, da.Array]
            (n_snp, n_hap) reference haplotypes coded as 0/1
        typed_idx : np.ndarray
            (n_typed,) reference marker of each typed marker, increasing

        Returns
        -------
        self : RefPhaser
        """
        check_panel(panel)
        n_snp, n_hap = panel.shape
        typed_idx = check_typed_idx(typed_idx, n_snp)
        windows = partition_windows(
            len(typed_idx), n_window=self.n_window, window_size=self.window_size
        )

        def compress(window):
            rows = typed_idx[window.start : window.stop]
            hap = as_numpy(panel[rows, :]).T
            return compress_window(hap, window=window)

        pools = self._map(
            compress, windows, desc="refphase.phase.compress", total=len(windows)
        )
        self.panel_ = panel
        self.typed_idx_ = typed_idx
        self.compressed_ = CompressedPanel(windows, pools)
        refphase.logger.info(
            f"Compressed n_hap={n_hap} reference haplotypes over "
            f"{len(windows)} windows of {len(typed_idx)} typed markers, "
            f"median #unique={int(np.median(self.compressed_.n_unique))}"
        )
        return self

    def _check_fitted(self):
        if self.compressed_ is None:
            raise ConfigError("RefPhaser is not fitted, call `fit` first")

    def phase(self, geno: Union[np.ndarray, da.Array]) -> Mosaic:
        """Phase every sample against the fitted panel

        Parameters
        ----------
        geno : Union[np.ndarray, da.Array]
            (n_typed, n_indiv) genotypes in {0, 1, 2}, missing as NaN or
            negative values

        Returns
        -------
        Mosaic
            phased mosaic over the reference markers; in lenient mode samples
            that could not be phased are None and listed in `failed_`
        """
        self._check_fitted()
        geno = normalize_geno(geno)
        n_typed, n_indiv = geno.shape
        if n_typed != len(self.typed_idx_):
            raise AlignmentError(
                f"`geno` has {n_typed} typed markers but `typed_idx` has "
                f"{len(self.typed_idx_)}"
            )
        windows = self.compressed_.windows
        pools = self.compressed_.pools

        selections = self._map(
            lambda w, p: select_pairs(p, geno[w.start : w.stop, :]),
            windows,
            pools,
            desc="refphase.phase.select",
            total=len(windows),
        )

        def phase_one(indiv_i):
            try:
                return phase_sample(
                    geno[:, indiv_i],
                    windows,
                    pools,
                    [s[indiv_i] for s in selections],
                    orientation_tie=self.orientation_tie,
                    breakpoint_tie=self.breakpoint_tie,
                    indiv=indiv_i,
                )
            except PhaseError as err:
                err = err.with_context(indiv=indiv_i)
                if self.strict:
                    raise err
                return err

        results = self._map(
            phase_one, range(n_indiv), desc="refphase.phase.phase", total=n_indiv
        )

        samples: List[Optional[PhasedSample]] = []
        failed: Dict[int, str] = {}
        for indiv_i, res in enumerate(results):
            if isinstance(res, PhaseError):
                refphase.logger.warning(f"Excluding sample {indiv_i}: {res}")
                failed[indiv_i] = str(res)
                samples.append(None)
            else:
                samples.append(res)

        n_snp = self.panel_.shape[0]
        mosaic = Mosaic(
            [
                None if s is None else s.to_reference(self.typed_idx_, n_snp)
                for s in samples
            ],
            n_snp=n_snp,
        )
        n_bp = sum(s.n_breakpoint for s in samples if s is not None)
        refphase.logger.info(
            f"Phased {n_indiv - len(failed)}/{n_indiv} samples, "
            f"{n_bp} breakpoints located"
        )
        self.samples_ = samples
        self.failed_ = failed
        return mosaic

    def impute(
        self,
        mosaic: Mosaic,
        geno: Union[np.ndarray, da.Array] = None,
        keep_typed: bool = False,
        snp_chunk: int = 1024,
    ) -> np.ndarray:
        """Reconstruct genotypes at every reference marker

        See `refphase.phase.impute`.
        """
        self._check_fitted()
        if geno is not None:
            geno = normalize_geno(geno)
        return impute(
            self.panel_,
            mosaic,
            geno=geno,
            typed_idx=self.typed_idx_,
            keep_typed=keep_typed,
            snp_chunk=snp_chunk,
            verbose=self.verbose,
        )

    def predict(
        self, geno: Union[np.ndarray, da.Array], keep_typed: bool = False
    ) -> PhaseResult:
        """Phase and impute every sample

        Parameters
        ----------
        geno : Union[np.ndarray, da.Array]
            (n_typed, n_indiv) genotypes
        keep_typed : bool
            whether to restore observed typed genotypes in the imputed matrix

        Returns
        -------
        PhaseResult
        """
        mosaic = self.phase(geno)
        imputed = self.impute(mosaic, geno=geno, keep_typed=keep_typed)
        return PhaseResult(mosaic=mosaic, geno=imputed, failed=dict(self.failed_))


def phase(
    panel: Union[np.ndarray, da.Array],
    geno: Union[np.ndarray, da.Array],
    typed_idx: np.ndarray,
    n_window: int = None,
    window_size: int = None,
    keep_typed: bool = False,
    **kwargs,
) -> PhaseResult:
    """Phase and impute target genotypes against a reference panel

    Parameters
    ----------
    panel : Union[np.ndarray, da.Array]
        (n_snp, n_hap) reference haplotypes
    geno : Union[np.ndarray, da.Array]
        (n_typed, n_indiv) target genotypes
    typed_idx : np.ndarray
        (n_typed,) reference marker of each typed marker
    n_window : int, optional
        number of windows
    window_size : int, optional
        number of typed markers per window
    keep_typed : bool
        whether to restore observed typed genotypes in the imputed matrix
    **kwargs
        other arguments of `RefPhaser`

    Returns
    -------
    PhaseResult
    """
    model = RefPhaser(n_window=n_window, window_size=window_size, **kwargs)
    model.fit(panel, typed_idx)
    return model.predict(geno, keep_typed=keep_typed)
