
from .truncated_normal import (
    truncated_normal
)

from .bernoulli import (
    bernoulli
)

from .gamma_draw import (
    gamma_draw
)
