"""
pathassign package initialization.

Exports the sampler entry point and the public helpers of each submodule.
"""

from . import util
from . import mcmc

from .mcmc import (
    run_mcmc,
    read_config,
    MCMCResult
)
