import numpy as np
from scipy.stats import norm
from scipy.special import expit

from pathassign.util.numerical import bernoulli
from pathassign.mcmc.state import ChainState, ModelPriors
from pathassign.mcmc._util import check_finite

# Normal mass on [0, 1]; the slab for an active pathway is truncated there
_SLAB_MASS = norm.cdf(1) - norm.cdf(0)


def gamma_inclusion_prob(beta, p_beta, sigma_bZero, sigma_bNonZero):
    """
    Posterior probability that each activation value comes from the slab
    ("active") component.

    The spike-to-slab odds are

        (Phi(1) - Phi(0)) * (1 - p)/p * (s2/s1)
            * exp(-(beta**2/s1**2 - beta**2/s2**2)/2)

    and the probability is 1/(1 + odds), evaluated on the log scale so
    large |beta| does not overflow. Negative activations cannot come from
    the [0, 1] slab and get probability 0.

    Parameters
    ----------
    beta : np.ndarray
        Activation values.
    p_beta : float
        Prior probability that a pathway is active.
    sigma_bZero, sigma_bNonZero : float
        Spike and slab scales.

    Returns
    -------
    np.ndarray
        Probabilities in [0, 1] with the shape of `beta`.
    """

    beta = np.asarray(beta, dtype=float)

    log_odds = (np.log(_SLAB_MASS)
                + np.log((1 - p_beta)/p_beta)
                + np.log(sigma_bNonZero/sigma_bZero)
                - 0.5*(beta**2/sigma_bZero**2 - beta**2/sigma_bNonZero**2))

    prob = expit(-log_odds)

    return np.where(beta < 0, 0.0, prob)


def delta_inclusion_prob(S, S_reference, p_delta, sigma_s1, sigma_s2):
    """
    Posterior probability that each signature entry is "significant"
    (slab centered on the reference signature) rather than spike at zero.

    The spike-to-slab odds are

        (s2/s1) * (1 - p)/p * exp(-(S**2/s1**2 - (S - X)**2/s2**2)/2)

    where X is the reference signature.
    """

    S = np.asarray(S, dtype=float)

    log_odds = (np.log(sigma_s2/sigma_s1)
                + np.log((1 - p_delta)/p_delta)
                - 0.5*(S**2/sigma_s1**2
                       - (S - S_reference)**2/sigma_s2**2))

    return expit(-log_odds)


def update_gamma(state: ChainState,
                 priors: ModelPriors,
                 rng: np.random.Generator) -> None:
    """
    Redraw the activation indicators given the freshly drawn beta. Entries
    with negative beta are set to 0.
    """

    prob = gamma_inclusion_prob(state.beta,
                                priors.p_beta,
                                priors.sigma_bZero,
                                priors.sigma_bNonZero)
    check_finite("activation indicator", probability=prob)

    gamma = bernoulli(prob, rng=rng, mode=priors.ECM)
    gamma[state.beta < 0] = 0

    state.gamma_prob = prob
    state.gamma = gamma


def update_delta(state: ChainState,
                 priors: ModelPriors,
                 rng: np.random.Generator) -> None:
    """
    Redraw the signature indicators given the freshly drawn S, using the
    tempered variances set by the signature update of this iteration.
    """

    if state.sigma_s1 is None or state.sigma_s2 is None:
        err = "update_signature must run before update_delta"
        raise RuntimeError(err)

    prob = delta_inclusion_prob(state.S,
                                priors.S_reference,
                                priors.p_delta,
                                state.sigma_s1,
                                state.sigma_s2)
    check_finite("signature indicator", probability=prob)

    state.delta_prob = prob
    state.delta = bernoulli(prob, rng=rng, mode=priors.ECM)
