import pytest
import numpy as np

@pytest.fixture(scope="session")
def simulated_data():
    """
    20 genes, 5 samples and one pathway. The pathway is active in the last
    three samples.
    """

    gen = np.random.default_rng(20)

    n, k = 20, 5
    X = np.abs(gen.normal(0, 1, size=(n, 1)))
    X[:5] *= -1
    beta = np.array([[0.0, 0.0, 0.6, 0.8, 0.9]])
    Bg = gen.uniform(2, 4, size=n)
    Y = Bg[:, None] + X @ beta + gen.normal(0, 0.05, size=(n, k))
    Delta_prior_p = np.full((n, 1), 0.95)

    return Y, Bg, X, Delta_prior_p
