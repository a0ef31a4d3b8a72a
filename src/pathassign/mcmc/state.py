import numpy as np
from dataclasses import dataclass
from typing import Optional

from pathassign.util.numerical import (
    truncated_normal,
    bernoulli
)

# Prior variance of the baseline for every gene
BASELINE_PRIOR_VARIANCE = 10.0**2


@dataclass(frozen=True)
class ModelPriors:
    """
    Fixed prior quantities and mode flags for one chain. Built once before
    sampling and never modified.
    """

    # baseline (n,)
    mu_B_0: np.ndarray
    B_prior_precision: np.ndarray

    # signature prior mean (n,m) and the reference signature the delta
    # mixture compares against (n,m)
    S_0: np.ndarray
    S_reference: np.ndarray
    p_delta: np.ndarray
    sigma_sZero: float
    sigma_sNonZero: float

    # activation
    p_beta: float
    sigma_bZero: float
    sigma_bNonZero: float

    # precision
    alpha_tau: float
    beta_tau: float

    # flags
    adaptive_B: bool
    adaptive_S: bool
    mixture_beta: bool
    Bg_zeroPrior: bool
    ECM: bool

    @property
    def num_genes(self) -> int:
        return self.S_reference.shape[0]

    @property
    def num_pathways(self) -> int:
        return self.S_reference.shape[1]


@dataclass
class ChainState:
    """
    Mutable latent state of one chain. Update functions modify it in place
    in the fixed sweep order.

    Shapes: n genes, k samples, m pathways.
    """

    B: np.ndarray            # (n,)
    S: np.ndarray            # (n,m)
    beta: np.ndarray         # (m,k)
    gamma: np.ndarray        # (m,k) 0/1
    gamma_prob: np.ndarray   # (m,k)
    kappa: np.ndarray        # (m,k)
    delta: np.ndarray        # (n,m) 0/1
    delta_prob: np.ndarray   # (n,m)
    tau: np.ndarray          # (n,)

    # tempered signature variances used by the most recent signature update
    sigma_s1: Optional[float] = None
    sigma_s2: Optional[float] = None


def build_priors(Bg: np.ndarray,
                 X: np.ndarray,
                 Delta_prior_p: np.ndarray,
                 config: dict) -> ModelPriors:
    """
    Assemble the fixed priors from validated inputs and a validated
    configuration dictionary (see `read_config`).

    The baseline prior mean is `Bg` unless the baseline is adaptive and
    `Bg_zeroPrior` is set, in which case it is zero. The signature prior
    mean is `X` unless the signature is adaptive and `S_zeroPrior` is set.
    """

    n = X.shape[0]
    m = X.shape[1]

    if config["adaptive_B"] and config["Bg_zeroPrior"]:
        mu_B_0 = np.zeros(n)
    else:
        mu_B_0 = Bg.copy()

    if config["adaptive_S"] and config["S_zeroPrior"]:
        S_0 = np.zeros((n, m))
    else:
        S_0 = X.copy()

    return ModelPriors(mu_B_0=mu_B_0,
                       B_prior_precision=np.full(n, 1/BASELINE_PRIOR_VARIANCE),
                       S_0=S_0,
                       S_reference=X.copy(),
                       p_delta=Delta_prior_p.copy(),
                       sigma_sZero=config["sigma_sZero"],
                       sigma_sNonZero=config["sigma_sNonZero"],
                       p_beta=config["p_beta"],
                       sigma_bZero=config["sigma_bZero"],
                       sigma_bNonZero=config["sigma_bNonZero"],
                       alpha_tau=config["alpha_tau"],
                       beta_tau=config["beta_tau"],
                       adaptive_B=config["adaptive_B"],
                       adaptive_S=config["adaptive_S"],
                       mixture_beta=config["mixture_beta"],
                       Bg_zeroPrior=config["Bg_zeroPrior"],
                       ECM=config["ECM"])


def initialize_state(priors: ModelPriors,
                     num_samples: int,
                     rng: np.random.Generator) -> ChainState:
    """
    Create the state recorded as the first iteration of the chain.

    Parameters
    ----------
    priors : ModelPriors
        Fixed priors and flags.
    num_samples : int
        Number of samples (columns of Y).
    rng : numpy.random.Generator
        Random number generator. Under ECM no draws are taken; each
        stochastic initial value is replaced by its mode.

    Returns
    -------
    ChainState
    """

    n = priors.num_genes
    m = priors.num_pathways
    k = num_samples

    if priors.adaptive_B:
        B = truncated_normal(np.zeros(n), 1.0, lower=0.0,
                             rng=rng, mode=priors.ECM)
    else:
        B = priors.mu_B_0.copy()

    S = priors.S_reference.copy()
    beta = np.zeros((m, k))

    if priors.mixture_beta:
        gamma_prob = np.full((m, k), priors.p_beta)
        gamma = bernoulli(gamma_prob, rng=rng, mode=priors.ECM)
    else:
        gamma_prob = np.ones((m, k))
        gamma = np.ones((m, k), dtype=int)

    if priors.adaptive_S:
        delta = bernoulli(priors.p_delta, rng=rng, mode=priors.ECM)
    else:
        delta = np.ones((n, m), dtype=int)
    delta_prob = priors.p_delta.copy()

    tau = np.full(n, priors.alpha_tau/priors.beta_tau)

    return ChainState(B=B,
                      S=S,
                      beta=beta,
                      gamma=gamma,
                      gamma_prob=gamma_prob,
                      kappa=beta*gamma,
                      delta=delta,
                      delta_prob=delta_prob,
                      tau=tau)
