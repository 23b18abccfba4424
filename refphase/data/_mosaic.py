import numpy as np
import pandas as pd
from typing import List, NamedTuple, Optional, Tuple


class Segment(NamedTuple):
    """A stretch of one chromosome copy copied from the reference panel.

    `start` and `stop` are a half-open marker range and `haps` the sorted
    reference haplotypes compatible with the stretch.
    """

    start: int
    stop: int
    haps: np.ndarray

    @property
    def rep(self) -> int:
        """Canonical representative: the lowest compatible haplotype index"""
        return int(self.haps[0])


# segments of the two chromosome copies of one sample
SamplePair = Tuple[List[Segment], List[Segment]]


class Mosaic(object):
    """
    Phased haplotype mosaic of (n_snp, n_indiv, 2) chromosome copies.

    Each chromosome copy is an ordered list of `Segment` covering [0, n_snp).
    A sample excluded from a lenient run is stored as `None`.
    """

    def __init__(self, segments: List[Optional[SamplePair]], n_snp: int):
        check_mosaic_format(segments, n_snp)
        self._segments = list(segments)
        self._n_snp = n_snp

    def __repr__(self) -> str:
        descr = (
            f"refphase.data.Mosaic object with n_snp x n_indiv = "
            f"{self.n_snp} x {self.n_indiv}"
        )
        n_excluded = len(self.excluded)
        if n_excluded > 0:
            descr += f", {n_excluded} excluded"
        return descr

    @property
    def n_indiv(self) -> int:
        """Number of individuals."""
        return len(self._segments)

    @property
    def n_snp(self) -> int:
        """Number of reference markers."""
        return self._n_snp

    @property
    def excluded(self) -> np.ndarray:
        """Indices of the samples without a mosaic."""
        return np.array(
            [i for i, s in enumerate(self._segments) if s is None], dtype=int
        )

    def segments(self, indiv: int, copy: int) -> Optional[List[Segment]]:
        """Segments of chromosome copy `copy` (0 or 1) of sample `indiv`"""
        assert copy in [0, 1], "copy must be 0 or 1"
        pair = self._segments[indiv]
        if pair is None:
            return None
        return pair[copy]

    def n_breakpoints(self) -> np.ndarray:
        """
        Number of segment boundaries on each chromosome copy.

        Returns
        -------
        np.ndarray
            (n_indiv, 2), -1 for excluded samples
        """
        counts = np.full((self.n_indiv, 2), -1, dtype=int)
        for indiv_i, pair in enumerate(self._segments):
            if pair is None:
                continue
            for copy_i in range(2):
                counts[indiv_i, copy_i] = len(pair[copy_i]) - 1
        return counts

    def hap_index(self, start: int = 0, stop: int = None) -> np.ndarray:
        """
        Representative reference haplotype of every marker and copy.

        Parameters
        ----------
        start : int
            first marker, by default 0
        stop : int
            marker after the last one, by default n_snp

        Returns
        -------
        np.ndarray
            (stop - start, n_indiv, 2), -1 for excluded samples
        """
        if stop is None:
            stop = self.n_snp
        assert 0 <= start < stop <= self.n_snp, "invalid marker range"
        mat = np.full((stop - start, self.n_indiv, 2), -1, dtype=np.int64)
        for indiv_i, pair in enumerate(self._segments):
            if pair is None:
                continue
            for copy_i in range(2):
                for seg in pair[copy_i]:
                    lo, hi = max(seg.start, start), min(seg.stop, stop)
                    if lo < hi:
                        mat[lo - start : hi - start, indiv_i, copy_i] = seg.rep
        return mat

    def summary(self) -> pd.DataFrame:
        """Number of segments and exclusion status of each sample"""
        n_bp = self.n_breakpoints()
        df = pd.DataFrame(
            {
                "N_SEG1": np.where(n_bp[:, 0] >= 0, n_bp[:, 0] + 1, 0),
                "N_SEG2": np.where(n_bp[:, 1] >= 0, n_bp[:, 1] + 1, 0),
                "EXCLUDED": n_bp[:, 0] < 0,
            },
            index=pd.RangeIndex(self.n_indiv, name="indiv"),
        )
        return df

    def write(self, path: str):
        """
        Write the mosaic to a text file.

        The first line is `n_snp n_indiv`, followed by two lines per sample
        (one per chromosome copy) of `stop:rep` entries. Excluded samples are
        written as `NA`. Only the representatives are written.
        """
        lines = [f"{self.n_snp} {self.n_indiv}"]
        for pair in self._segments:
            if pair is None:
                lines.extend(["NA", "NA"])
                continue
            for segs in pair:
                lines.append(" ".join(f"{s.stop}:{s.rep}" for s in segs))

        with open(path, "w") as f:
            f.writelines("\n".join(lines))

    @classmethod
    def read(cls, path: str) -> "Mosaic":
        """Read a mosaic written by `Mosaic.write`"""
        with open(path) as f:
            lines = [line.strip() for line in f.readlines()]
        n_snp, n_indiv = [int(i) for i in lines[0].split()]
        data_list = lines[1:]
        assert len(data_list) == 2 * n_indiv, "number of lines does not match n_indiv"

        segments: List[Optional[SamplePair]] = []
        for indiv_i in range(n_indiv):
            copies = data_list[2 * indiv_i : 2 * indiv_i + 2]
            if copies[0] == "NA":
                assert copies[1] == "NA", "both copies of a sample must be NA"
                segments.append(None)
                continue
            pair = []
            for line in copies:
                segs = []
                start = 0
                for entry in line.split():
                    stop, rep = [int(v) for v in entry.split(":")]
                    segs.append(Segment(start, stop, np.array([rep])))
                    start = stop
                pair.append(segs)
            segments.append((pair[0], pair[1]))
        return cls(segments, n_snp=n_snp)


def check_mosaic_format(segments: List[Optional[SamplePair]], n_snp: int):
    """Check that every chromosome copy tiles [0, n_snp) with non-empty segments

    Parameters
    ----------
    segments : List[Optional[SamplePair]]
        segments of each sample
    n_snp : int
        number of markers
    """
    for indiv_i, pair in enumerate(segments):
        if pair is None:
            continue
        assert len(pair) == 2, f"sample {indiv_i} must have 2 chromosome copies"
        for segs in pair:
            assert len(segs) > 0, f"sample {indiv_i} has an empty chromosome copy"
            assert segs[0].start == 0, f"sample {indiv_i} does not start at 0"
            assert segs[-1].stop == n_snp, f"sample {indiv_i} does not end at n_snp"
            for prev, seg in zip(segs[:-1], segs[1:]):
                assert prev.stop == seg.start, f"sample {indiv_i} has a gap"
            for seg in segs:
                assert seg.start < seg.stop, f"sample {indiv_i} has an empty segment"
                assert len(seg.haps) > 0, f"sample {indiv_i} has no haplotype"


def clean_segments(segments: List[Segment]) -> List[Segment]:
    """Merge adjacent segments with the same representative

    For example, [0, 5):{2, 4} [5, 9):{2} -> [0, 9):{2}

    Parameters
    ----------
    segments : List[Segment]
        ordered, contiguous segments of one chromosome copy

    Returns
    -------
    List[Segment]
        merged segments; the set of a merged segment is the intersection of
        the merged sets
    """
    cleaned: List[Segment] = []
    for seg in segments:
        if len(cleaned) > 0 and cleaned[-1].rep == seg.rep:
            last = cleaned[-1]
            haps = np.intersect1d(last.haps, seg.haps, assume_unique=True)
            cleaned[-1] = Segment(last.start, seg.stop, haps)
        else:
            cleaned.append(seg)
    return cleaned
