
from .config import (
    DEFAULT_CONFIG,
    read_config
)

from .tempering import (
    tempered_variances
)

from .state import (
    ModelPriors,
    ChainState,
    build_priors,
    initialize_state
)

from .conditional_updates import (
    update_baseline,
    update_activation,
    update_signature,
    update_precision
)

from .mixture_indicators import (
    gamma_inclusion_prob,
    delta_inclusion_prob,
    update_gamma,
    update_delta
)

from .results import (
    MCMCResult,
    TrajectoryRecorder
)

from .run_mcmc import (
    run_mcmc
)
