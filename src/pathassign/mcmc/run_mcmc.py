import numpy as np
import pandas as pd
from tqdm.auto import tqdm

import warnings
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from pathassign.util.validation import check_matrix
from pathassign.mcmc.config import read_config
from pathassign.mcmc.state import (
    ChainState,
    ModelPriors,
    build_priors,
    initialize_state
)
from pathassign.mcmc.conditional_updates import (
    update_baseline,
    update_activation,
    update_signature,
    update_precision
)
from pathassign.mcmc.mixture_indicators import (
    update_gamma,
    update_delta
)
from pathassign.mcmc.results import (
    MCMCResult,
    TrajectoryRecorder
)


def _labels(obj, axis):
    """
    Row (axis 0) or column (axis 1) labels of a pandas object, else None.
    """

    if isinstance(obj, pd.DataFrame):
        return list(obj.index) if axis == 0 else list(obj.columns)
    if isinstance(obj, pd.Series) and axis == 0:
        return list(obj.index)
    return None


def _agreed_labels(candidates, what):
    """
    Make sure every labelled input agrees on a set of labels and return
    them (or None if no input is labelled).
    """

    found = [(name, labels) for name, labels in candidates if labels is not None]
    if len(found) == 0:
        return None

    ref_name, ref = found[0]
    for name, labels in found[1:]:
        if labels != ref:
            err = (f"{what} labels of '{name}' do not match those of "
                   f"'{ref_name}'. Inputs must be aligned before sampling.")
            raise ValueError(err)

    return ref


def _prepare_inputs(Y, Bg, X, Delta_prior_p):
    """
    Validate the four input matrices against each other and pull out
    gene, sample and pathway labels from any pandas inputs.
    """

    Y_arr = check_matrix(Y, "Y", ndim=2)
    n, k = Y_arr.shape

    Bg_arr = check_matrix(Bg, "Bg", ndim=1, shape=(n,))
    X_arr = check_matrix(X, "X", ndim=2, shape=(n, None))
    m = X_arr.shape[1]

    # prior probabilities must be strictly inside (0, 1) for the odds
    D_arr = check_matrix(Delta_prior_p, "Delta_prior_p", ndim=2,
                         shape=(n, m), min_allowed=0, max_allowed=1,
                         inclusive=False)

    gene_names = _agreed_labels([("Y", _labels(Y, 0)),
                                 ("Bg", _labels(Bg, 0)),
                                 ("X", _labels(X, 0)),
                                 ("Delta_prior_p", _labels(Delta_prior_p, 0))],
                                "gene")
    pathway_names = _agreed_labels([("X", _labels(X, 1)),
                                    ("Delta_prior_p", _labels(Delta_prior_p, 1))],
                                   "pathway")
    sample_names = _labels(Y, 1)

    labels = {"gene_names": gene_names,
              "sample_names": sample_names,
              "pathway_names": pathway_names}

    return Y_arr, Bg_arr, X_arr, D_arr, labels


def _sweep(state: ChainState,
           Y: np.ndarray,
           priors: ModelPriors,
           iteration: int,
           rng: np.random.Generator) -> None:
    """
    One full iteration. The order matters: each block conditions on the
    values produced by the blocks before it.
    """

    if priors.adaptive_B:
        update_baseline(state, Y, priors, rng)

    update_activation(state, Y, priors, rng)

    if priors.mixture_beta:
        update_gamma(state, priors, rng)

    if priors.adaptive_S:
        update_signature(state, Y, priors, iteration, rng)
        update_delta(state, priors, rng)

    update_precision(state, Y, priors, rng)


def _notify(callback, iteration, total) -> bool:
    """
    Call the progress callback. A failing callback is reported once and
    then dropped; it never stops the chain. Returns whether the callback
    should keep being called.
    """

    try:
        callback(iteration, total)
    except Exception as e:
        warnings.warn(f"progress_callback raised {e!r} at iteration "
                      f"{iteration}; no further progress will be reported.",
                      RuntimeWarning)
        return False

    return True


def run_mcmc(Y,
             Bg,
             X,
             Delta_prior_p,
             cf: Union[Dict[str, Any], str, Path, None] = None,
             rng: Optional[np.random.Generator] = None,
             seed: Optional[int] = None,
             progress_callback: Optional[Callable[[int, int], Any]] = None,
             cancel_check: Optional[Callable[[], bool]] = None,
             **kwargs) -> MCMCResult:
    """
    Estimate pathway activation with a Bayesian sparse factor model fit by
    Gibbs sampling (or ECM).

    The model is Y[g,j] ~ N(B[g] + sum_s S[g,s]*beta[s,j], 1/tau[g]), with
    an adaptive baseline B, an adaptive signature S under a spike-and-slab
    prior centred on X, pathway activation beta under a spike-and-slab
    prior, and per-gene precision tau.

    Three flags select the mode:

    - A: adaptive_B=False, adaptive_S=False, mixture_beta=False. Plain
      regression on the fixed signature and baseline.
    - B: adaptive_B=True, adaptive_S=False, mixture_beta=False. Adapts the
      baseline.
    - C: adaptive_B=True, adaptive_S=False, mixture_beta=True. Adapts the
      baseline and shrinks inactive pathway activation.
    - D: adaptive_B=True, adaptive_S=True, mixture_beta=True. Full factor
      analysis: adapts baseline and signature, shrinks activation.

    Parameters
    ----------
    Y : array_like or pandas.DataFrame
        (n genes, k samples) matrix of measurements for the test samples.
    Bg : array_like or pandas.Series
        (n,) baseline/background level of each gene.
    X : array_like or pandas.DataFrame
        (n genes, m pathways) signature matrix.
    Delta_prior_p : array_like or pandas.DataFrame
        (n genes, m pathways) prior probability that a gene is significant
        in a pathway. Every value must lie strictly between 0 and 1.
    cf : dict or str or pathlib.Path, optional
        Sampler configuration, or a path to a YAML file holding it. See
        `read_config` for the keys and their defaults (iter=2000,
        adaptive_B=True, adaptive_S=False, mixture_beta=True, ...).
    rng : numpy.random.Generator, optional
        Random number generator. Two runs with identically seeded
        generators and identical inputs return identical results.
    seed : int, optional
        Seed for a new generator. Cannot be combined with `rng`.
    progress_callback : callable, optional
        Called as ``progress_callback(iteration, total)`` after each
        iteration is recorded. Its return value is ignored and exceptions
        it raises do not stop sampling.
    cancel_check : callable, optional
        Called with no arguments before each iteration. If it returns True
        sampling stops with a RuntimeError and no result is returned.
    **kwargs
        Sampler settings that override `cf`.

    Returns
    -------
    MCMCResult
        Trajectories with `iter` rows. Row 0 is the initial state.

    Raises
    ------
    ValueError
        Bad configuration or inconsistent input dimensions. Raised before
        any sampling.
    FloatingPointError
        A conditional posterior parameter became NaN or infinite.
    RuntimeError
        Sampling was cancelled through `cancel_check`.
    """

    # -------------------------------------------------------------------------
    # Validate everything before sampling

    config = read_config(cf, override_keys=kwargs)
    Y, Bg, X, Delta_prior_p, labels = _prepare_inputs(Y, Bg, X, Delta_prior_p)

    if rng is not None and seed is not None:
        raise ValueError("specify rng or seed, not both")
    if rng is None:
        rng = np.random.default_rng(seed)

    num_iter = config["iter"]
    priors = build_priors(Bg, X, Delta_prior_p, config)

    # -------------------------------------------------------------------------
    # Initialize and record the first iteration

    state = initialize_state(priors, Y.shape[1], rng)
    recorder = TrajectoryRecorder(num_iter,
                                  state,
                                  adaptive_B=priors.adaptive_B,
                                  adaptive_S=priors.adaptive_S,
                                  mixture_beta=priors.mixture_beta)
    recorder.record(0, state)

    report = progress_callback is not None
    if report:
        report = _notify(progress_callback, 1, num_iter)

    # -------------------------------------------------------------------------
    # Run chain

    method = "ECM" if priors.ECM else "Gibbs sampling"
    print(f"Start {method}...", flush=True)

    iterations = range(1, num_iter)
    if config["progress_bar"]:
        iterations = tqdm(iterations, desc=method)

    for i in iterations:

        if cancel_check is not None and cancel_check():
            err = f"sampling cancelled before iteration {i + 1} of {num_iter}"
            raise RuntimeError(err)

        _sweep(state, Y, priors, i + 1, rng)
        recorder.record(i, state)

        if report:
            report = _notify(progress_callback, i + 1, num_iter)

    print(f"{method} complete.", flush=True)

    return recorder.to_result(ECM=priors.ECM, **labels)
