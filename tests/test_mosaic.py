import os
import tempfile
import pytest
import numpy as np
import refphase
from refphase.data import Mosaic, Segment, clean_segments


def toy_mosaic():
    # two individuals over 6 markers
    # 1st: copy 0 = hap {1, 3} then hap 2, copy 1 = hap 0
    # 2nd: excluded
    # 3rd: copy 0 = hap 4, copy 1 = hap 5 then hap 1 then hap 5
    segments = [
        (
            [Segment(0, 2, np.array([1, 3])), Segment(2, 6, np.array([2]))],
            [Segment(0, 6, np.array([0]))],
        ),
        None,
        (
            [Segment(0, 6, np.array([4]))],
            [
                Segment(0, 1, np.array([5])),
                Segment(1, 4, np.array([1])),
                Segment(4, 6, np.array([5])),
            ],
        ),
    ]
    return Mosaic(segments, n_snp=6)


def test_basic():
    mosaic = toy_mosaic()
    assert mosaic.n_snp == 6
    assert mosaic.n_indiv == 3
    assert np.all(mosaic.excluded == [1])
    assert mosaic.segments(1, 0) is None
    assert mosaic.segments(0, 0)[0].rep == 1

    assert np.all(mosaic.n_breakpoints() == [[1, 0], [-1, -1], [0, 2]])

    dense = mosaic.hap_index()
    assert dense.shape == (6, 3, 2)
    assert np.all(dense[:, 0, 0] == [1, 1, 2, 2, 2, 2])
    assert np.all(dense[:, 0, 1] == 0)
    assert np.all(dense[:, 1, :] == -1)
    assert np.all(dense[:, 2, 1] == [5, 1, 1, 1, 5, 5])
    # marker ranges
    assert np.all(mosaic.hap_index(1, 5) == dense[1:5])

    df = mosaic.summary()
    assert np.all(df["N_SEG1"] == [2, 0, 1])
    assert np.all(df["N_SEG2"] == [1, 0, 3])
    assert np.all(df["EXCLUDED"] == [False, True, False])


def test_read_write():
    mosaic = toy_mosaic()
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = os.path.join(tmp_dir, "toy.mosaic")
        refphase.io.write_mosaic(path, mosaic)
        with open(path) as f:
            lines = f.read().split("\n")
        assert lines[0] == "6 3"
        assert lines[1] == "2:1 6:2"
        assert lines[3] == "NA"
        assert lines[6] == "1:5 4:1 6:5"

        mosaic2 = refphase.io.read_mosaic(path)
    assert mosaic2.n_indiv == mosaic.n_indiv
    assert np.all(mosaic2.excluded == mosaic.excluded)
    assert np.all(mosaic2.hap_index() == mosaic.hap_index())


def test_check_format():
    with pytest.raises(AssertionError):
        # gap between segments
        Mosaic(
            [
                (
                    [Segment(0, 2, np.array([0])), Segment(3, 6, np.array([1]))],
                    [Segment(0, 6, np.array([0]))],
                )
            ],
            n_snp=6,
        )
    with pytest.raises(AssertionError):
        # does not reach n_snp
        Mosaic(
            [([Segment(0, 5, np.array([0]))], [Segment(0, 6, np.array([0]))])],
            n_snp=6,
        )
    with pytest.raises(AssertionError):
        # no compatible haplotype
        Mosaic(
            [
                (
                    [Segment(0, 6, np.array([], dtype=int))],
                    [Segment(0, 6, np.array([0]))],
                )
            ],
            n_snp=6,
        )


def test_clean_segments():
    segments = [
        Segment(0, 5, np.array([2, 4])),
        Segment(5, 9, np.array([2])),
        Segment(9, 12, np.array([3])),
        Segment(12, 15, np.array([1, 3])),
    ]
    cleaned = clean_segments(segments)
    assert [(s.start, s.stop, s.rep) for s in cleaned] == [
        (0, 9, 2),
        (9, 12, 3),
        (12, 15, 1),
    ]
    assert np.all(cleaned[0].haps == [2])
