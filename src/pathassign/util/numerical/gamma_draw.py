import numpy as np
from typing import Optional

def gamma_draw(
    shape: float,
    rate,
    rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Sample gamma variates with a shared shape and per-element rates.

    Parameters
    ----------
    shape : float
        Shape parameter. Must be a scalar > 0.
    rate : array_like
        Rate (inverse scale) parameters. Must be > 0. The mean of each
        draw is shape/rate.
    rng : numpy.random.Generator, optional
        A pre-initialized NumPy random number generator. If None, a new
        generator is created.

    Returns
    -------
    np.ndarray
        Positive draws with the same shape as `rate`.
    """

    try:
        if not np.isscalar(shape):
            raise ValueError
        shape = float(shape)
        if not np.isfinite(shape) or shape <= 0:
            raise ValueError
    except (TypeError, ValueError):
        raise ValueError("shape must be a scalar > 0")

    rate = np.asarray(rate, dtype=float)
    if not np.all(np.isfinite(rate)) or np.any(rate <= 0):
        raise ValueError("rate must be finite and > 0")

    if rng is None:
        rng = np.random.default_rng()

    # numpy parameterizes by scale
    return rng.gamma(shape, 1.0/rate)
