from ._window import Window, partition_windows
from ._compress import HaplotypePool, CompressedPanel, compress_window
from ._select import PairSelection, select_pairs, select_pairs_single
from ._breakpoint import Breakpoint, search_breakpoint
from ._phaser import PhasedSample, WindowTrace, phase_sample
from ._impute import impute
from ._engine import RefPhaser, PhaseResult, phase

__all__ = [
    "Window",
    "partition_windows",
    "HaplotypePool",
    "CompressedPanel",
    "compress_window",
    "PairSelection",
    "select_pairs",
    "select_pairs_single",
    "Breakpoint",
    "search_breakpoint",
    "PhasedSample",
    "WindowTrace",
    "phase_sample",
    "impute",
    "RefPhaser",
    "PhaseResult",
    "phase",
]
