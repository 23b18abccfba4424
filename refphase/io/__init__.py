from ._read import (
    read_digit_mat,
    read_panel,
    read_geno,
    read_typed_idx,
    read_mosaic,
)
from ._write import write_digit_mat, write_geno, write_mosaic, write_summary
