import pytest
import numpy as np
import refphase
from refphase.phase import partition_windows


def test_partition():
    """
    Windows are non-overlapping, ordered and cover all typed markers
    """
    for n_marker in [1, 7, 10, 101]:
        for n_window in range(1, n_marker + 1, 3):
            windows = partition_windows(n_marker, n_window=n_window)
            assert len(windows) == n_window
            assert [w.index for w in windows] == list(range(n_window))
            assert windows[0].start == 0
            assert windows[-1].stop == n_marker
            for prev, w in zip(windows[:-1], windows[1:]):
                assert prev.stop == w.start
            assert all(w.width > 0 for w in windows)
            # all but the last window have the same width
            assert all(w.width == n_marker // n_window for w in windows[:-1])

            covered = np.concatenate([np.arange(w.start, w.stop) for w in windows])
            assert np.all(covered == np.arange(n_marker))


def test_window_size():
    windows = partition_windows(10, window_size=3)
    assert [w.width for w in windows] == [3, 3, 4]

    # a window larger than the marker set gives a single window
    windows = partition_windows(5, window_size=10)
    assert len(windows) == 1
    assert (windows[0].start, windows[0].stop) == (0, 5)


def test_config_error():
    with pytest.raises(refphase.ConfigError):
        partition_windows(10, n_window=0)
    with pytest.raises(refphase.ConfigError):
        partition_windows(10, n_window=-2)
    with pytest.raises(refphase.ConfigError):
        partition_windows(10, window_size=0)
    with pytest.raises(refphase.ConfigError):
        partition_windows(5, n_window=6)
    with pytest.raises(refphase.ConfigError):
        partition_windows(10, n_window=2, window_size=5)
    with pytest.raises(refphase.ConfigError):
        partition_windows(10)
