from typing import List, NamedTuple

from .._errors import ConfigError


class Window(NamedTuple):
    """Half-open range [start, stop) of typed markers"""

    index: int
    start: int
    stop: int

    @property
    def width(self) -> int:
        return self.stop - self.start


def partition_windows(
    n_marker: int, n_window: int = None, window_size: int = None
) -> List[Window]:
    """Split `n_marker` ordered typed markers into contiguous windows

    Windows have near-equal widths and the last window absorbs the remainder.

    Parameters
    ----------
    n_marker : int
        number of typed markers
    n_window : int, optional
        number of windows
    window_size : int, optional
        number of markers per window, the number of windows is then
        `max(1, n_marker // window_size)`

    Returns
    -------
    List[Window]
        windows in position order
    """
    if (n_window is None) == (window_size is None):
        raise ConfigError("exactly one of `n_window` and `window_size` must be given")
    if window_size is not None:
        if window_size <= 0:
            raise ConfigError(f"window_size={window_size} must be positive")
        n_window = max(1, n_marker // window_size)
    if n_window <= 0:
        raise ConfigError(f"n_window={n_window} must be positive")
    if n_marker < n_window:
        raise ConfigError(
            f"cannot split {n_marker} typed markers into {n_window} windows"
        )

    width = n_marker // n_window
    windows = []
    for i in range(n_window):
        stop = n_marker if i == n_window - 1 else (i + 1) * width
        windows.append(Window(i, i * width, stop))
    return windows
