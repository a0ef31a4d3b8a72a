import numpy as np

def check_finite(block, **params):
    """
    Raise FloatingPointError if any posterior parameter for `block` has a
    NaN or infinite entry. There is no recovery: a chain built on a bad
    draw does not target the posterior.
    """

    for name, value in params.items():
        bad = ~np.isfinite(np.asarray(value, dtype=float))
        if np.any(bad):
            err = (f"non-finite posterior {name} in the {block} update "
                   f"({int(np.sum(bad))} bad entries). Aborting chain.")
            raise FloatingPointError(err)


def partial_residual(resid, S, beta, skip):
    """
    Return resid - S @ beta with the contribution of pathway `skip` left
    out. `resid` is Y minus the baseline.
    """

    keep = np.arange(S.shape[1]) != skip
    return resid - S[:, keep] @ beta[keep, :]
