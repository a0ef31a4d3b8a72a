
from .check import (
    check_number,
    check_bool,
    check_matrix
)
