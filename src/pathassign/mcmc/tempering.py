
# Length of the tempering cycle, in iterations
TEMPERING_PERIOD = 500

def tempered_variances(iteration: int,
                       sigma_sZero: float,
                       sigma_sNonZero: float,
                       period: int = TEMPERING_PERIOD) -> tuple:
    """
    Spike and slab signature variances for a given iteration.

    Both variances are inflated by (c**2 + 1/sigma_sNonZero)/c**2, where
    c = ((iteration - 1) mod period) + 1 counts iterations within the
    current cycle. The inflation is largest at the start of each cycle and
    decays towards the nominal values by its end, loosening the sampler
    every `period` iterations so it can leave a local mode.

    Parameters
    ----------
    iteration : int
        1-based iteration number. The nominal variances (to within a
        relative 1/(sigma_sNonZero*period**2)) are reached at iterations
        period, 2*period, ...
    sigma_sZero : float
        Nominal spike variance.
    sigma_sNonZero : float
        Nominal slab variance.
    period : int, default: 500
        Number of iterations per tempering cycle.

    Returns
    -------
    sigma_s1 : float
        Tempered spike variance.
    sigma_s2 : float
        Tempered slab variance.
    """

    if iteration < 1:
        raise ValueError("iteration must be >= 1")

    c = ((iteration - 1) % period) + 1
    factor = (c**2 + 1/sigma_sNonZero)/c**2

    return factor*sigma_sZero, factor*sigma_sNonZero
