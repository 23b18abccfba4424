from ._logging import logger
from ._errors import (
    PhaseError,
    ConfigError,
    AlignmentError,
    PanelError,
    DegenerateWindowError,
)
from .data import MISSING
from . import data, phase, simulate, io, cli, utils
from .version import __version__

__all__ = [
    "data",
    "phase",
    "simulate",
    "io",
    "cli",
    "utils",
    "MISSING",
    "PhaseError",
    "ConfigError",
    "AlignmentError",
    "PanelError",
    "DegenerateWindowError",
]
