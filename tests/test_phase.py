import pytest
import numpy as np
import refphase
from refphase.phase import RefPhaser, compress_window, select_pairs


def exact_recovery_panel():
    # (n_snp, n_hap) with h1=010101, h2=101010, h3=000000, h4=111111
    hap = np.array(
        [
            [0, 1, 0, 1, 0, 1],
            [1, 0, 1, 0, 1, 0],
            [0, 0, 0, 0, 0, 0],
            [1, 1, 1, 1, 1, 1],
        ]
    )
    return hap.T


def breakpoint_panel():
    # copy A follows h0 in the first window and h1 in the second one,
    # copy B follows h2 throughout; no haplotype matches A in both windows
    hap = np.array(
        [
            [1, 0, 1, 0, 1, 0, 1, 0],
            [0, 0, 0, 0, 1, 1, 1, 1],
            [0, 1, 1, 0, 0, 1, 1, 0],
            [1, 1, 1, 1, 0, 0, 0, 0],
        ]
    )
    geno = np.concatenate([hap[0, :4] + hap[2, :4], hap[1, 4:] + hap[2, 4:]])
    return hap.T, geno[:, np.newaxis]


def test_exact_recovery():
    panel = exact_recovery_panel()
    geno = np.ones((6, 1), dtype=int)
    typed_idx = np.arange(6)
    model = RefPhaser(n_window=2).fit(panel, typed_idx)

    # every window has a zero-error pair containing (h1, h2)
    for window, pool in zip(model.compressed_.windows, model.compressed_.pools):
        sel = select_pairs(pool, geno[window.start : window.stop])[0]
        assert sel.error == 0
        h12 = tuple(sorted([pool.labels[0], pool.labels[1]]))
        assert h12 in {(int(i), int(j)) for i, j in sel.pairs}

    res = model.predict(geno)
    sample = model.samples_[0]
    assert [t.event for t in sample.trace] == ["init", "continue"]
    assert all(min(t.size) > 0 for t in sample.trace)
    assert sample.n_breakpoint == 0
    assert np.all(res.mosaic.n_breakpoints() == 0)
    assert np.all(res.geno == 1)
    assert res.failed == {}


def test_orientation_tie():
    panel = exact_recovery_panel()
    geno = np.ones((6, 1), dtype=int)
    typed_idx = np.arange(6)

    # both orientations keep 2 candidates in the second window
    res = refphase.phase.phase(panel, geno, typed_idx, n_window=2)
    reps = {s.rep for c in range(2) for s in res.mosaic.segments(0, c)}
    assert reps == {2, 3}

    res = refphase.phase.phase(
        panel, geno, typed_idx, n_window=2, orientation_tie="swap"
    )
    reps = {s.rep for c in range(2) for s in res.mosaic.segments(0, c)}
    assert reps == {0, 1}
    assert np.all(res.geno == 1)


def test_orientation_swap():
    """
    The copy listed first by the selector changes between windows
    """
    hap = np.array(
        [
            [0, 0, 1, 1, 1, 0],
            [1, 1, 0, 0, 0, 1],
            [0, 0, 0, 0, 0, 0],
            [0, 1, 1, 0, 1, 1],
        ]
    )
    panel = hap.T
    geno = (hap[0] + hap[1])[:, np.newaxis]
    model = RefPhaser(n_window=2)
    res = model.fit(panel, np.arange(6)).predict(geno)

    sample = model.samples_[0]
    assert [t.event for t in sample.trace] == ["init", "continue"]
    assert sample.trace[1].orientation == "swap"
    assert res.mosaic.segments(0, 0)[0].rep == 0
    assert res.mosaic.segments(0, 1)[0].rep == 1
    assert np.all(res.mosaic.n_breakpoints() == 0)
    assert np.all(res.geno[:, 0] == geno[:, 0])


def test_breakpoint_placement():
    panel, geno = breakpoint_panel()
    model = RefPhaser(n_window=2)
    res = model.fit(panel, np.arange(8)).predict(geno)

    sample = model.samples_[0]
    assert [t.event for t in sample.trace] == ["init", "breakpoint"]
    assert sample.n_breakpoint == 1

    # exactly one segment boundary, inside the second window
    n_bp = res.mosaic.n_breakpoints()[0]
    assert sorted(n_bp) == [0, 1]
    switched = int(np.argmax(n_bp))
    segs = res.mosaic.segments(0, switched)
    assert 4 <= segs[0].stop <= 8
    assert segs[0].stop == 5
    assert [s.rep for s in segs] == [0, 1]
    assert res.mosaic.segments(0, 1 - switched)[0].rep == 2

    assert np.all(res.geno == geno)


def test_breakpoint_tie():
    panel, geno = breakpoint_panel()
    # offsets 0 and 1 of the second window explain the genotypes equally well
    for tie, stop in [("midpoint", 5), ("left", 4), ("right", 5)]:
        res = refphase.phase.phase(
            panel, geno, np.arange(8), n_window=2, breakpoint_tie=tie
        )
        n_bp = res.mosaic.n_breakpoints()[0]
        segs = res.mosaic.segments(0, int(np.argmax(n_bp)))
        assert segs[0].stop == stop
        assert np.all(res.geno == geno)


def test_search_breakpoint():
    panel, geno = breakpoint_panel()
    pool = compress_window(panel[4:8].T)
    bp = refphase.phase.search_breakpoint(
        pool,
        geno[4:8, 0],
        prev=(np.array([2]), np.array([0])),
        new=(np.array([2]), np.array([1])),
    )
    assert bp.offset == 1
    assert bp.switched == (1,)
    assert bp.orientation == "same"
    assert bp.error == 0
    assert list(bp.prefix[1]) == [0]
    assert list(bp.suffix[1]) == [1]
    assert list(bp.suffix[0]) == [2]


def test_monotonic_intersection():
    """
    Without a breakpoint the candidate sets never grow
    """
    np.random.seed(1234)
    panel = refphase.simulate.ref_panel(n_snp=400, n_hap=80, n_founder=6)
    geno, _ = refphase.simulate.mosaic_geno(panel, n_indiv=10, mosaic_size=150)
    geno = refphase.simulate.mask_geno(geno, missing_rate=0.05)
    typed_idx = np.arange(0, 400, 2)
    model = RefPhaser(window_size=10)
    model.fit(panel, typed_idx).phase(geno[typed_idx])

    for sample in model.samples_:
        for prev, t in zip(sample.trace[:-1], sample.trace[1:]):
            if t.event in ["continue", "degenerate"]:
                assert t.size[0] <= prev.size[0]
                assert t.size[1] <= prev.size[1]
            assert min(t.size) > 0


def test_degenerate_window():
    panel = exact_recovery_panel()
    typed_idx = np.arange(6)
    geno = np.ones((6, 2), dtype=int)
    # sample 0: second window missing; sample 1: first window missing
    geno[3:6, 0] = refphase.MISSING
    geno[0:3, 1] = refphase.MISSING
    model = RefPhaser(n_window=2)
    res = model.fit(panel, typed_idx).predict(geno)

    assert [t.event for t in model.samples_[0].trace] == ["init", "degenerate"]
    assert model.samples_[0].trace[1].size == model.samples_[0].trace[0].size
    assert [t.event for t in model.samples_[1].trace] == ["degenerate", "init"]
    assert res.failed == {}
    assert np.all(res.mosaic.n_breakpoints() == 0)
    assert np.all(res.geno == 1)


def test_strict_and_lenient():
    panel = exact_recovery_panel()
    typed_idx = np.arange(6)
    geno = np.ones((6, 3), dtype=float)
    geno[:, 1] = np.nan

    with pytest.raises(refphase.DegenerateWindowError) as excinfo:
        refphase.phase.phase(panel, geno, typed_idx, n_window=2)
    assert excinfo.value.indiv == 1

    res = refphase.phase.phase(panel, geno, typed_idx, n_window=2, strict=False)
    assert list(res.failed.keys()) == [1]
    assert res.mosaic.segments(1, 0) is None
    assert list(res.mosaic.excluded) == [1]
    assert np.all(res.geno[:, 1] == refphase.MISSING)
    assert np.all(res.geno[:, [0, 2]] == 1)


def test_representative_pair():
    # h0 + h3 and h1 + h2 both explain the genotypes, h0 + h2 does not
    hap = np.array(
        [
            [0, 0, 1, 1],
            [0, 1, 0, 1],
            [1, 0, 1, 0],
            [1, 1, 0, 0],
        ]
    )
    panel = hap.T
    geno = np.ones((4, 1), dtype=int)
    typed_idx = np.arange(4)
    model = RefPhaser(n_window=1).fit(panel, typed_idx)
    res = model.predict(geno)

    segments = model.samples_[0].segments
    assert np.all(segments[0][0].haps == [0])
    assert np.all(segments[1][0].haps == [3])
    assert np.all(res.mosaic.hap_index()[:, 0, :] == [0, 3])
    assert np.all(res.geno == geno)
