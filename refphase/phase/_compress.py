import numpy as np
import pandas as pd
from typing import List

from .._errors import PanelError
from ._window import Window


class HaplotypePool(object):
    """Distinct haplotype sequences of one window

    Parameters
    ----------
    unique : np.ndarray
        (n_unique, width) distinct allele sequences, in lexicographic order
    labels : np.ndarray
        (n_hap,) unique id of every reference haplotype

    Attributes
    ----------
    members : List[np.ndarray]
        sorted reference haplotype indices sharing each unique sequence
    """

    def __init__(self, unique: np.ndarray, labels: np.ndarray):
        self.unique = unique
        self.labels = labels

        counts = np.bincount(labels, minlength=unique.shape[0])
        order = np.argsort(labels, kind="stable")
        self.members = np.split(order, np.cumsum(counts)[:-1])

    def __repr__(self) -> str:
        return (
            f"refphase.phase.HaplotypePool with n_unique x width = "
            f"{self.n_unique} x {self.width}, n_hap = {self.n_hap}"
        )

    @property
    def n_unique(self) -> int:
        return self.unique.shape[0]

    @property
    def width(self) -> int:
        return self.unique.shape[1]

    @property
    def n_hap(self) -> int:
        return len(self.labels)

    def expand(self, uids: np.ndarray) -> np.ndarray:
        """Sorted union of the reference haplotypes of `uids`"""
        uids = np.unique(uids)
        if len(uids) == 0:
            return np.zeros(0, dtype=np.int64)
        return np.sort(np.concatenate([self.members[u] for u in uids]))

    def uids_of(self, haps: np.ndarray) -> np.ndarray:
        """Sorted unique ids covering the reference haplotypes `haps`"""
        return np.unique(self.labels[haps])


def compress_window(hap: np.ndarray, window: Window = None) -> HaplotypePool:
    """Group reference haplotypes by exact sequence equality within a window

    Parameters
    ----------
    hap : np.ndarray
        (n_hap, width) reference haplotypes restricted to the window
    window : Window, optional
        window being compressed, used for error context

    Returns
    -------
    HaplotypePool
    """
    window_i = None if window is None else window.index
    n_hap, width = hap.shape
    if width == 0:
        raise PanelError("window has zero markers", window=window_i)
    if n_hap < 2:
        raise PanelError(
            f"window has {n_hap} reference haplotype(s), cannot form a diploid pair",
            window=window_i,
        )
    if not np.all((hap == 0) | (hap == 1)):
        raise PanelError(
            "reference panel alleles must be coded as 0 or 1", window=window_i
        )

    unique, labels = np.unique(hap.astype(np.int8), axis=0, return_inverse=True)
    return HaplotypePool(unique=unique, labels=labels.reshape(-1))


class CompressedPanel(object):
    """Windows and per-window haplotype pools of one phasing run

    Read-only accessors for inspecting how well the panel compresses.
    """

    def __init__(self, windows: List[Window], pools: List[HaplotypePool]):
        assert len(windows) == len(pools), "one pool per window is required"
        self._windows = windows
        self._pools = pools

    def __repr__(self) -> str:
        return (
            f"refphase.phase.CompressedPanel with {self.n_window} windows, "
            f"n_hap = {self.n_hap}"
        )

    def __len__(self) -> int:
        return self.n_window

    def __getitem__(self, index: int) -> HaplotypePool:
        return self._pools[index]

    @property
    def windows(self) -> List[Window]:
        return list(self._windows)

    @property
    def pools(self) -> List[HaplotypePool]:
        return list(self._pools)

    @property
    def n_window(self) -> int:
        return len(self._windows)

    @property
    def n_hap(self) -> int:
        return self._pools[0].n_hap

    @property
    def window_widths(self) -> np.ndarray:
        """Number of typed markers in each window."""
        return np.array([w.width for w in self._windows])

    @property
    def n_unique(self) -> np.ndarray:
        """Number of distinct haplotypes in each window."""
        return np.array([p.n_unique for p in self._pools])

    @property
    def compression_ratio(self) -> np.ndarray:
        """Reference haplotypes per distinct haplotype in each window."""
        return self.n_hap / self.n_unique

    def summary(self) -> pd.DataFrame:
        """One row per window: typed range, width, and distinct haplotypes"""
        return pd.DataFrame(
            {
                "START": [w.start for w in self._windows],
                "STOP": [w.stop for w in self._windows],
                "WIDTH": self.window_widths,
                "N_UNIQUE": self.n_unique,
                "RATIO": self.compression_ratio,
            },
            index=pd.RangeIndex(self.n_window, name="window"),
        )
