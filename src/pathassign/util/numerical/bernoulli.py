import numpy as np
from typing import Optional

# Probabilities are clamped into [PROB_EPS, 1 - PROB_EPS] before sampling
PROB_EPS = 1e-10

def bernoulli(
    prob,
    rng: Optional[np.random.Generator] = None,
    mode: bool = False
) -> np.ndarray:
    """
    Draw binary indicators with per-element success probabilities.

    Parameters
    ----------
    prob : array_like
        Success probabilities in [0, 1]. Any shape.
    rng : numpy.random.Generator, optional
        A pre-initialized NumPy random number generator. If None, a new
        generator is created.
    mode : bool, default: False
        If True, return the most probable outcome (1 where prob > 0.5)
        instead of drawing.

    Returns
    -------
    np.ndarray
        Integer array of 0/1 with the same shape as `prob`.
    """

    prob = np.asarray(prob, dtype=float)
    if not np.all(np.isfinite(prob)) or np.any(prob < 0) or np.any(prob > 1):
        raise ValueError("prob must be finite and between 0 and 1")

    if mode:
        return (prob > 0.5).astype(int)

    if rng is None:
        rng = np.random.default_rng()

    prob = np.clip(prob, PROB_EPS, 1 - PROB_EPS)

    return (rng.random(prob.shape) < prob).astype(int)
