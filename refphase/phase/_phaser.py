import numpy as np
from typing import List, NamedTuple, Optional, Tuple

from .._errors import DegenerateWindowError
from ..data import Segment, clean_segments
from ._breakpoint import search_breakpoint
from ._compress import HaplotypePool
from ._select import PairSelection
from ._window import Window


class WindowTrace(NamedTuple):
    """What happened to a sample in one window

    `event` is one of "init", "continue", "breakpoint" or "degenerate";
    `size` holds the number of surviving candidates of the two copies after
    the window (0 before the first informative window).
    """

    window: int
    event: str
    orientation: Optional[str]
    size: Tuple[int, int]


class PhasedSample(object):
    """Segments of the two chromosome copies of one sample, in typed markers"""

    def __init__(
        self, indiv: int, segments: Tuple[List[Segment], List[Segment]], trace
    ):
        self.indiv = indiv
        self.segments = segments
        self.trace = trace

    def __repr__(self) -> str:
        n_seg = [len(s) for s in self.segments]
        return f"refphase.phase.PhasedSample indiv={self.indiv}, n_seg={n_seg}"

    @property
    def n_breakpoint(self) -> int:
        """Number of breakpoints located by the breakpoint search."""
        return sum(t.event == "breakpoint" for t in self.trace)

    def to_reference(
        self, typed_idx: np.ndarray, n_snp: int
    ) -> Tuple[List[Segment], List[Segment]]:
        """Map the segments from typed markers onto reference markers

        An untyped reference marker joins the segment of its nearest typed
        marker (the left one on a tie). The first segment extends to marker 0
        and the last to `n_snp`.
        """
        n_typed = len(typed_idx)
        # boundary[t] is the first reference marker whose nearest typed marker
        # is t or later
        boundary = np.zeros(n_typed + 1, dtype=np.int64)
        boundary[1:n_typed] = (typed_idx[:-1] + typed_idx[1:]) // 2 + 1
        boundary[n_typed] = n_snp

        pair = []
        for segs in self.segments:
            ref_segs = [
                Segment(int(boundary[s.start]), int(boundary[s.stop]), s.haps)
                for s in segs
            ]
            pair.append(clean_segments(ref_segs))
        return pair[0], pair[1]


def _orient(
    prev: List[np.ndarray], new: Tuple[np.ndarray, np.ndarray], orientation_tie: str
):
    """Intersect running sets with the new candidates in both orientations

    Returns the surviving sets and orientation with the most survivors among
    the orientations keeping both copies non-empty, or None if there is none.
    """
    options = {
        "same": [
            np.intersect1d(prev[0], new[0], assume_unique=True),
            np.intersect1d(prev[1], new[1], assume_unique=True),
        ],
        "swap": [
            np.intersect1d(prev[0], new[1], assume_unique=True),
            np.intersect1d(prev[1], new[0], assume_unique=True),
        ],
    }
    order = ["same", "swap"] if orientation_tie == "same" else ["swap", "same"]
    best = None
    for orientation in order:
        survived = options[orientation]
        if len(survived[0]) == 0 or len(survived[1]) == 0:
            continue
        total = len(survived[0]) + len(survived[1])
        if best is None or total > best[0]:
            best = (total, orientation, survived)
    if best is None:
        return None
    return best[1], best[2]


def _span_error(
    x: np.ndarray,
    windows: List[Window],
    pools: List[HaplotypePool],
    start: int,
    stop: int,
    haps0: np.ndarray,
    haps1: np.ndarray,
) -> np.ndarray:
    """Squared error of every pair (haps0[i], haps1[j]) over the observed
    typed markers of [start, stop)"""
    err = np.zeros((len(haps0), len(haps1)), dtype=np.int64)
    for window, pool in zip(windows, pools):
        lo, hi = max(window.start, start), min(window.stop, stop)
        if lo >= hi:
            continue
        x_span = x[lo:hi].astype(np.int64)
        obs = x_span >= 0
        if not obs.any():
            continue
        hap = pool.unique[:, lo - window.start : hi - window.start][:, obs]
        hap = hap.astype(np.int64)
        uid0, inv0 = np.unique(pool.labels[haps0], return_inverse=True)
        uid1, inv1 = np.unique(pool.labels[haps1], return_inverse=True)
        diff = hap[uid0][:, None, :] + hap[uid1][None, :, :] - x_span[obs]
        uerr = (diff**2).sum(axis=2)
        err += uerr[np.ix_(inv0.reshape(-1), inv1.reshape(-1))]
    return err


def _pick_representatives(
    x: np.ndarray,
    windows: List[Window],
    pools: List[HaplotypePool],
    segments: Tuple[List[Segment], List[Segment]],
) -> Tuple[List[Segment], List[Segment]]:
    """Narrow the candidate sets so that the two representatives agree with x

    Both copies are split at the union of their boundaries. Within each span
    the representative pair is the lexicographically lowest pair of minimal
    error over the observed typed markers; each copy keeps the candidates
    reaching that error together with the other copy's representative.
    """
    bounds = sorted({0} | {s.stop for segs in segments for s in segs})
    picked: Tuple[List[Segment], List[Segment]] = ([], [])
    for start, stop in zip(bounds[:-1], bounds[1:]):
        haps = [
            np.asarray(next(s.haps for s in segs if s.start <= start < s.stop))
            for segs in segments
        ]
        err = _span_error(x, windows, pools, start, stop, haps[0], haps[1])
        best = err == err.min()
        i, j = np.argwhere(best)[0]
        picked[0].append(Segment(start, stop, haps[0][best[:, j]]))
        picked[1].append(Segment(start, stop, haps[1][best[i, :]]))
    return clean_segments(picked[0]), clean_segments(picked[1])


def phase_sample(
    x: np.ndarray,
    windows: List[Window],
    pools: List[HaplotypePool],
    selections: List[Optional[PairSelection]],
    orientation_tie: str = "same",
    breakpoint_tie: str = "midpoint",
    indiv: int = None,
) -> PhasedSample:
    """Phase one sample by propagating candidate sets from window to window

    Parameters
    ----------
    x : np.ndarray
        (n_typed,) genotypes of the sample, negative for missing
    windows : List[Window]
        windows in position order
    pools : List[HaplotypePool]
        distinct haplotypes of each window
    selections : List[Optional[PairSelection]]
        minimizing pairs of the sample in each window, None for windows where
        all genotypes are missing
    orientation_tie : str
        orientation kept when both orientations keep the same number of
        candidates, "same" by default
    breakpoint_tie : str
        tie-break policy of the breakpoint search
    indiv : int, optional
        index of the sample, used for error context

    Returns
    -------
    PhasedSample
    """
    n_typed = windows[-1].stop
    running: Optional[List[np.ndarray]] = None
    # start of the open segment and the closed segments of each copy
    open_start = [0, 0]
    closed: List[List[Segment]] = [[], []]
    trace: List[WindowTrace] = []

    def sizes():
        if running is None:
            return (0, 0)
        return (len(running[0]), len(running[1]))

    for window, pool, selection in zip(windows, pools, selections):
        if selection is None:
            # nothing observed, carry the running sets over
            trace.append(WindowTrace(window.index, "degenerate", None, sizes()))
            continue

        new = selection.candidates(pool)
        if running is None:
            running = [new[0], new[1]]
            trace.append(WindowTrace(window.index, "init", "same", sizes()))
            continue

        oriented = _orient(running, new, orientation_tie)
        if oriented is not None:
            orientation, running = oriented
            trace.append(WindowTrace(window.index, "continue", orientation, sizes()))
            continue

        bp = search_breakpoint(
            pool,
            x[window.start : window.stop],
            prev=(running[0], running[1]),
            new=new,
            orientation_tie=orientation_tie,
            breakpoint_tie=breakpoint_tie,
        )
        position = window.start + bp.offset
        for copy in bp.switched:
            closed[copy].append(Segment(open_start[copy], position, bp.prefix[copy]))
            open_start[copy] = position
        running = [bp.suffix[0], bp.suffix[1]]
        trace.append(WindowTrace(window.index, "breakpoint", bp.orientation, sizes()))

    if running is None:
        raise DegenerateWindowError(
            "all genotypes of the sample are missing in every window", indiv=indiv
        )

    segments = tuple(
        closed[copy] + [Segment(open_start[copy], n_typed, running[copy])]
        for copy in range(2)
    )
    segments = _pick_representatives(x, windows, pools, segments)
    return PhasedSample(indiv=indiv, segments=segments, trace=trace)
