"""
refphase.data holds the data structures shared by the phasing engine:
genotype conventions and the phased haplotype mosaic.

These functions do not run any phasing themselves and can be used on their own.
"""

from ._geno import MISSING, normalize_geno, check_panel, check_typed_idx
from ._mosaic import Mosaic, Segment, clean_segments, check_mosaic_format

__all__ = [
    "MISSING",
    "normalize_geno",
    "check_panel",
    "check_typed_idx",
    "Mosaic",
    "Segment",
    "clean_segments",
    "check_mosaic_format",
]
