from . import numerical
from . import validation

from .validation import (
    check_number,
    check_bool,
    check_matrix
)

from .numerical import (
    truncated_normal,
    bernoulli,
    gamma_draw
)
