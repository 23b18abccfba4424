import pytest
import numpy as np
import refphase
from refphase.phase import compress_window


def test_partition_of_haplotypes():
    """
    Members of the unique haplotypes partition all reference haplotypes
    """
    np.random.seed(1234)
    # 50 haplotypes over 6 markers, many duplicated sequences
    hap = np.random.randint(2, size=(50, 6))
    pool = compress_window(hap)

    assert pool.n_hap == 50
    assert pool.width == 6
    assert pool.n_unique == len({tuple(row) for row in hap})
    # distinct sequences
    assert len({tuple(row) for row in pool.unique}) == pool.n_unique

    members = np.concatenate(pool.members)
    assert len(members) == 50
    assert np.all(np.sort(members) == np.arange(50))
    for uid, m in enumerate(pool.members):
        assert len(m) > 0
        assert np.all(np.diff(m) > 0)
        assert np.all(hap[m] == pool.unique[uid])
        assert np.all(pool.labels[m] == uid)


def test_expand():
    hap = np.array([[0, 1], [1, 1], [0, 1], [0, 0]])
    pool = compress_window(hap)
    # lexicographic order: 00, 01, 11
    assert np.all(pool.unique == [[0, 0], [0, 1], [1, 1]])
    assert np.all(pool.labels == [1, 2, 1, 0])
    assert np.all(pool.expand(np.array([1, 2])) == [0, 1, 2])
    assert np.all(pool.uids_of(np.array([0, 2, 3])) == [0, 1])


def test_panel_error():
    with pytest.raises(refphase.PanelError):
        compress_window(np.zeros((1, 5), dtype=int))
    with pytest.raises(refphase.PanelError):
        compress_window(np.zeros((4, 0), dtype=int))
    with pytest.raises(refphase.PanelError):
        compress_window(np.array([[0, 2], [1, 0]]))


def test_compressed_panel():
    np.random.seed(1234)
    panel = refphase.simulate.ref_panel(n_snp=200, n_hap=60, n_founder=4)
    typed_idx = np.arange(0, 200, 2)
    model = refphase.phase.RefPhaser(n_window=10).fit(panel, typed_idx)
    compressed = model.compressed_

    assert compressed.n_window == 10
    assert len(compressed) == 10
    assert compressed.n_hap == 60
    assert np.all(compressed.window_widths == 10)
    assert np.all(compressed.n_unique <= 60)
    assert np.all(compressed.n_unique >= 1)
    assert np.allclose(compressed.compression_ratio, 60 / compressed.n_unique)

    df = compressed.summary()
    assert list(df.columns) == ["START", "STOP", "WIDTH", "N_UNIQUE", "RATIO"]
    assert len(df) == 10
    assert np.all(df["N_UNIQUE"].values == compressed.n_unique)
