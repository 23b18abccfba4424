import numpy as np
from typing import List, NamedTuple, Tuple

from ._compress import HaplotypePool

ORIENTATIONS = ["same", "swap"]
BREAKPOINT_TIES = ["midpoint", "left", "right"]


class Breakpoint(NamedTuple):
    """Recombination located inside a window

    Attributes
    ----------
    offset : int
        first marker (relative to the window start) copied from the new
        haplotypes
    switched : Tuple[int, ...]
        chromosome copies that switch haplotype at `offset`
    orientation : str
        "same" if copy 0 takes the first candidate set, "swap" otherwise
    error : int
        squared mismatch over the observed markers of the window
    prefix : List[np.ndarray]
        per copy, haplotypes used before `offset`
    suffix : List[np.ndarray]
        per copy, haplotypes used from `offset` on
    """

    offset: int
    switched: Tuple[int, ...]
    orientation: str
    error: int
    prefix: List[np.ndarray]
    suffix: List[np.ndarray]


def _prefix_cost(
    U: np.ndarray, x: np.ndarray, obs: np.ndarray, u1: np.ndarray, u2: np.ndarray
) -> np.ndarray:
    """
    Cumulative squared mismatch of every pair of unique haplotypes.

    Returns
    -------
    np.ndarray
        (len(u1), len(u2), width + 1), entry [i, j, k] is the mismatch of
        pair (u1[i], u2[j]) over markers [0, k)
    """
    resid = x[None, None, :] - U[u1][:, None, :] - U[u2][None, :, :]
    cost = resid ** 2 * obs[None, None, :]
    cum = np.zeros(cost.shape[:2] + (cost.shape[2] + 1,), dtype=np.int64)
    np.cumsum(cost, axis=2, out=cum[:, :, 1:])
    return cum


def _suffix_cost(U, x, obs, u1, u2) -> np.ndarray:
    """Same as `_prefix_cost` with entry [i, j, k] over markers [k, width)"""
    cum = _prefix_cost(U, x, obs, u1, u2)
    return cum[:, :, -1:] - cum


class _Mode(object):
    """Cost of one orientation and one set of switching copies"""

    def __init__(self, orientation, switched, error, recover):
        self.orientation = orientation
        self.switched = switched
        self.error = error
        self.recover = recover


def _both_switch(pool, U, x, obs, prev, new):
    u_prev = [pool.uids_of(prev[0]), pool.uids_of(prev[1])]
    u_new = [pool.uids_of(new[0]), pool.uids_of(new[1])]
    pre = _prefix_cost(U, x, obs, u_prev[0], u_prev[1])
    suf = _suffix_cost(U, x, obs, u_new[0], u_new[1])
    width = U.shape[1]
    error = pre.min(axis=(0, 1))[:width] + suf.min(axis=(0, 1))[:width]

    def recover(k):
        pi, pj = np.where(pre[:, :, k] == pre[:, :, k].min())
        si, sj = np.where(suf[:, :, k] == suf[:, :, k].min())
        prefix = [
            np.intersect1d(prev[0], pool.expand(u_prev[0][pi])),
            np.intersect1d(prev[1], pool.expand(u_prev[1][pj])),
        ]
        suffix = [
            np.intersect1d(new[0], pool.expand(u_new[0][si])),
            np.intersect1d(new[1], pool.expand(u_new[1][sj])),
        ]
        return prefix, suffix

    return error, recover


def _one_switch(pool, U, x, obs, prev, new, copy):
    # `copy` switches from prev[copy] to new[copy], the other copy stays
    # inside prev[other] & new[other] for the whole window
    other = 1 - copy
    stay = np.intersect1d(prev[other], new[other], assume_unique=True)
    if len(stay) == 0:
        return None, None
    u_stay = pool.uids_of(stay)
    u_prev = pool.uids_of(prev[copy])
    u_new = pool.uids_of(new[copy])

    # (n_stay, width + 1) after minimizing over the switching copy
    pre = _prefix_cost(U, x, obs, u_prev, u_stay)
    suf = _suffix_cost(U, x, obs, u_new, u_stay)
    pre_best = pre.min(axis=0)
    suf_best = suf.min(axis=0)
    total = pre_best + suf_best
    width = U.shape[1]
    error = total.min(axis=0)[:width]

    def recover(k):
        best_stay = np.where(total[:, k] == total[:, k].min())[0]
        pre_uids = np.where(
            (pre[:, best_stay, k] == pre_best[None, best_stay, k]).any(axis=1)
        )[0]
        suf_uids = np.where(
            (suf[:, best_stay, k] == suf_best[None, best_stay, k]).any(axis=1)
        )[0]
        kept = np.intersect1d(stay, pool.expand(u_stay[best_stay]))
        prefix = [None, None]
        suffix = [None, None]
        prefix[copy] = np.intersect1d(prev[copy], pool.expand(u_prev[pre_uids]))
        suffix[copy] = np.intersect1d(new[copy], pool.expand(u_new[suf_uids]))
        prefix[other] = kept
        suffix[other] = kept
        return prefix, suffix

    return error, recover


def _offset_key(k: int, width: int, breakpoint_tie: str):
    if breakpoint_tie == "midpoint":
        return (abs(2 * k - width), k)
    elif breakpoint_tie == "left":
        return (k,)
    elif breakpoint_tie == "right":
        return (-k,)
    else:
        raise ValueError(f"unknown breakpoint_tie={breakpoint_tie}")


def search_breakpoint(
    pool: HaplotypePool,
    x: np.ndarray,
    prev: Tuple[np.ndarray, np.ndarray],
    new: Tuple[np.ndarray, np.ndarray],
    orientation_tie: str = "same",
    breakpoint_tie: str = "midpoint",
) -> Breakpoint:
    """Locate the recombination inside a window where phasing cannot continue

    Every switch offset k in [0, width) is scored: a switching copy uses its
    previous haplotypes on markers [0, k) and its new haplotypes on
    [k, width); a copy that does not switch stays inside the intersection of
    its previous and new haplotypes. The orientation of the new candidate sets
    and the set of switching copies are searched jointly.

    Parameters
    ----------
    pool : HaplotypePool
        distinct haplotypes of the window
    x : np.ndarray
        (width,) genotypes of the window, negative for missing
    prev : Tuple[np.ndarray, np.ndarray]
        running candidate sets of copy 0 and copy 1 before the window
    new : Tuple[np.ndarray, np.ndarray]
        candidate sets selected in the window
    orientation_tie : str
        orientation preferred on a tie, "same" or "swap"
    breakpoint_tie : str
        offset preferred on a tie: "midpoint" (closest to the middle of the
        window, then leftmost), "left" or "right"

    Returns
    -------
    Breakpoint
    """
    assert orientation_tie in ORIENTATIONS, f"unknown orientation_tie={orientation_tie}"
    assert breakpoint_tie in BREAKPOINT_TIES, f"unknown breakpoint_tie={breakpoint_tie}"

    U = pool.unique.astype(np.int64)
    width = U.shape[1]
    obs = (x >= 0).astype(np.int64)
    x = np.where(x >= 0, x, 0).astype(np.int64)

    orient_order = sorted(ORIENTATIONS, key=lambda o: o != orientation_tie)
    modes: List[_Mode] = []
    for orientation in orient_order:
        oriented = (new[0], new[1]) if orientation == "same" else (new[1], new[0])
        for copy in [0, 1]:
            error, recover = _one_switch(pool, U, x, obs, prev, oriented, copy)
            if error is not None:
                modes.append(_Mode(orientation, (copy,), error, recover))
        error, recover = _both_switch(pool, U, x, obs, prev, oriented)
        modes.append(_Mode(orientation, (0, 1), error, recover))

    min_error = min(int(m.error.min()) for m in modes)
    best = None
    for mode_rank, mode in enumerate(modes):
        for k in np.where(mode.error == min_error)[0]:
            key = _offset_key(int(k), width, breakpoint_tie) + (
                len(mode.switched),
                mode_rank,
            )
            if best is None or key < best[0]:
                best = (key, mode, int(k))

    _, mode, k = best
    prefix, suffix = mode.recover(k)
    return Breakpoint(
        offset=k,
        switched=mode.switched,
        orientation=mode.orientation,
        error=min_error,
        prefix=prefix,
        suffix=suffix,
    )
