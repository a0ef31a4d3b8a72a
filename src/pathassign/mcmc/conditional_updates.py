"""
Closed-form conditional posterior updates for the baseline (B), pathway
activation (beta), signature (S) and precision (tau) blocks.

Each function takes the current ChainState, modifies it in place, and
returns nothing. Under ECM every draw except the precision draw is
replaced by the mode of its conditional posterior.
"""
import numpy as np

from pathassign.util.numerical import (
    truncated_normal,
    gamma_draw
)
from pathassign.mcmc.state import ChainState, ModelPriors
from pathassign.mcmc.tempering import tempered_variances
from pathassign.mcmc._util import check_finite, partial_residual


def update_baseline(state: ChainState,
                    Y: np.ndarray,
                    priors: ModelPriors,
                    rng: np.random.Generator) -> None:
    """
    Redraw the per-gene baseline B given S, beta and tau.

    Genes are conditionally independent, so this is one vectorized draw.
    The posterior is normal with precision k*tau + 1/s_B_0 and mean
    s_B_1*(tau*sum_j(Y - S beta)_gj + mu_B_0/s_B_0). With a zero-mean
    baseline prior (`Bg_zeroPrior`) the draw is truncated at zero.
    """

    k = Y.shape[1]

    post_var = 1/(k*state.tau + priors.B_prior_precision)
    row_sum = np.sum(Y - state.S @ state.beta, axis=1)
    post_mean = post_var*(state.tau*row_sum
                          + priors.B_prior_precision*priors.mu_B_0)
    check_finite("baseline", mean=post_mean, variance=post_var)

    lower = 0.0 if priors.Bg_zeroPrior else -np.inf
    state.B = truncated_normal(post_mean,
                               np.sqrt(post_var),
                               lower=lower,
                               upper=np.inf,
                               rng=rng,
                               mode=priors.ECM)


def update_activation(state: ChainState,
                      Y: np.ndarray,
                      priors: ModelPriors,
                      rng: np.random.Generator) -> None:
    """
    Single-site Gibbs sweep over pathways for the activation matrix beta.

    Pathways are visited in order and each one conditions on the values of
    the others as they stand at that moment, including those already
    redrawn in this sweep. Samples are independent within a pathway.

    With the activation mixture on, samples whose indicator gamma is 1 use
    the slab variance and are truncated to [0, 1]; samples with gamma 0
    use the spike variance and are not truncated. With the mixture off,
    every draw uses the slab variance and is truncated to [0, 1]. kappa is
    refreshed as beta*gamma using the indicator that set the bounds.
    """

    resid = Y - state.B[:, np.newaxis]

    active_prec = 1/priors.sigma_bNonZero**2
    inactive_prec = 1/priors.sigma_bZero**2

    for s in range(priors.num_pathways):

        S_s = state.S[:, s]
        active = state.gamma[s, :] == 1

        prior_prec = np.where(active, active_prec, inactive_prec)
        post_var = 1/(prior_prec + np.sum(S_s**2*state.tau))

        E = partial_residual(resid, state.S, state.beta, s)
        post_mean = post_var*((S_s*state.tau) @ E)
        check_finite(f"activation (pathway {s})",
                     mean=post_mean, variance=post_var)

        if priors.mixture_beta:
            lower = np.where(active, 0.0, -np.inf)
            upper = np.where(active, 1.0, np.inf)
        else:
            lower = 0.0
            upper = 1.0

        state.beta[s, :] = truncated_normal(post_mean,
                                            np.sqrt(post_var),
                                            lower=lower,
                                            upper=upper,
                                            rng=rng,
                                            mode=priors.ECM)
        state.kappa[s, :] = state.beta[s, :]*state.gamma[s, :]


def update_signature(state: ChainState,
                     Y: np.ndarray,
                     priors: ModelPriors,
                     iteration: int,
                     rng: np.random.Generator) -> None:
    """
    Redraw the signature matrix S column by column.

    Parameters
    ----------
    state : ChainState
        Current chain state; S, sigma_s1 and sigma_s2 are updated.
    Y : np.ndarray
        Observed (n,k) matrix.
    priors : ModelPriors
        Fixed priors.
    iteration : int
        1-based iteration number; sets the tempered spike/slab variances.
    rng : numpy.random.Generator
        Random number generator.

    Notes
    -----
    The prior for S[g,j] is N(S_0[g,j], sigma_s2**2) when delta[g,j] is 1
    and N(0, sigma_s1**2) otherwise. Draws are truncated so that S keeps
    the sign of its prior mean: non-negative for a positive prior mean,
    non-positive for a negative one, and unrestricted for a zero one.
    """

    sigma_s1, sigma_s2 = tempered_variances(iteration,
                                            priors.sigma_sZero,
                                            priors.sigma_sNonZero)
    state.sigma_s1 = sigma_s1
    state.sigma_s2 = sigma_s2

    selected = state.delta == 1
    prior_mean = np.where(selected, priors.S_0, 0.0)
    prior_prec = 1/np.where(selected, sigma_s2**2, sigma_s1**2)
    prior_term = prior_prec*prior_mean

    # beta does not change during this sweep, so the posterior variance
    # can be computed for every column at once
    post_var = 1/(np.outer(state.tau, np.sum(state.beta**2, axis=1))
                  + prior_prec)

    resid = Y - state.B[:, np.newaxis]

    for j in range(priors.num_pathways):

        E = partial_residual(resid, state.S, state.beta, j)
        post_mean = post_var[:, j]*(state.tau*(E @ state.beta[j, :])
                                    + prior_term[:, j])
        check_finite(f"signature (pathway {j})",
                     mean=post_mean, variance=post_var[:, j])

        lower = np.where(prior_mean[:, j] > 0, 0.0, -np.inf)
        upper = np.where(prior_mean[:, j] < 0, 0.0, np.inf)

        state.S[:, j] = truncated_normal(post_mean,
                                         np.sqrt(post_var[:, j]),
                                         lower=lower,
                                         upper=upper,
                                         rng=rng,
                                         mode=priors.ECM)


def update_precision(state: ChainState,
                     Y: np.ndarray,
                     priors: ModelPriors,
                     rng: np.random.Generator) -> None:
    """
    Redraw the per-gene precision tau from its gamma posterior,
    Gamma(alpha_tau + k/2, beta_tau + sum(residual**2)/2).

    This draw is taken even under ECM.
    """

    k = Y.shape[1]

    resid = Y - state.B[:, np.newaxis] - state.S @ state.beta
    shape = priors.alpha_tau + k/2
    rate = priors.beta_tau + np.sum(resid**2, axis=1)/2
    check_finite("precision", rate=rate)

    state.tau = gamma_draw(shape, rate, rng=rng)
