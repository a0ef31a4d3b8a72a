import pytest
import numpy as np
from pathassign.util.numerical.truncated_normal import truncated_normal

@pytest.fixture
def rng():
    """Provides a consistent, seeded random number generator for tests."""
    return np.random.default_rng(seed=42)

def test_happy_path(rng):
    """Draws respect [0, 1] bounds and have the broadcast shape."""
    mean = np.linspace(-2, 3, 1000)
    result = truncated_normal(mean, 1.0, lower=0.0, upper=1.0, rng=rng)

    assert isinstance(result, np.ndarray)
    assert result.shape == (1000,)
    assert np.all(result >= 0)
    assert np.all(result <= 1)

def test_per_element_bounds(rng):
    """Each element gets its own interval."""
    lower = np.array([0.0, -np.inf, -np.inf, 2.0])
    upper = np.array([1.0, 0.0, np.inf, np.inf])
    for _ in range(50):
        result = truncated_normal(np.zeros(4), 1.0, lower, upper, rng=rng)
        assert 0 <= result[0] <= 1
        assert result[1] <= 0
        assert np.isfinite(result[2])
        assert result[3] >= 2

def test_matrix_input(rng):
    result = truncated_normal(np.zeros((3, 4)), np.ones((3, 4)), lower=0,
                              rng=rng)
    assert result.shape == (3, 4)
    assert np.all(result >= 0)

def test_scalar_input(rng):
    result = truncated_normal(0.0, 1.0, rng=rng)
    assert result.shape == (1,)

def test_reproducibility():
    """Identically seeded generators give identical draws."""
    mean = np.linspace(-1, 1, 20)
    r1 = truncated_normal(mean, 0.5, lower=0, rng=np.random.default_rng(123))
    r2 = truncated_normal(mean, 0.5, lower=0, rng=np.random.default_rng(123))
    assert np.array_equal(r1, r2)

def test_default_rng_creation():
    result = truncated_normal(np.zeros(10), 1.0, lower=0)
    assert result.shape == (10,)
    assert np.all(result >= 0)

def test_statistical_properties(rng):
    """Half-normal mean is sqrt(2/pi)."""
    result = truncated_normal(np.zeros(100_000), 1.0, lower=0.0, rng=rng)
    assert np.isclose(np.mean(result), np.sqrt(2/np.pi), rtol=0.02)

def test_unrestricted_matches_normal(rng):
    result = truncated_normal(np.full(100_000, 3.0), 2.0, rng=rng)
    assert np.isclose(np.mean(result), 3.0, atol=0.05)
    assert np.isclose(np.std(result), 2.0, rtol=0.02)

def test_zero_sd_gives_clipped_mean(rng):
    """Degenerate variance gives no NaN, just the mean pushed into bounds."""
    mean = np.array([0.5, -3.0, 4.0])
    result = truncated_normal(mean, 0.0, lower=0.0, upper=1.0, rng=rng)
    assert np.array_equal(result, [0.5, 0.0, 1.0])

def test_far_tail(rng):
    """Mean far outside the interval still gives valid, finite draws."""
    result = truncated_normal(np.full(100, -40.0), 1.0, lower=0.0, rng=rng)
    assert np.all(np.isfinite(result))
    assert np.all(result >= 0)

def test_point_interval(rng):
    result = truncated_normal(np.zeros(3), 1.0, lower=0.25, upper=0.25,
                              rng=rng)
    assert np.array_equal(result, [0.25, 0.25, 0.25])

def test_mode_is_clipped_mean():
    mean = np.array([-1.0, 0.3, 2.0])
    result = truncated_normal(mean, 1.0, lower=0.0, upper=1.0, mode=True)
    assert np.array_equal(result, [0.0, 0.3, 1.0])

def test_mode_does_not_use_rng():
    rng = np.random.default_rng(7)
    truncated_normal(np.zeros(5), 1.0, lower=0, rng=rng, mode=True)
    assert rng.random() == np.random.default_rng(7).random()

@pytest.mark.parametrize("kwargs, match", [
    ({"mean": np.nan, "sd": 1.0}, "mean must be finite"),
    ({"mean": 0.0, "sd": -1.0}, "sd must be finite"),
    ({"mean": 0.0, "sd": np.inf}, "sd must be finite"),
    ({"mean": 0.0, "sd": 1.0, "lower": 1.0, "upper": 0.0}, "lower must be <= upper"),
    ({"mean": 0.0, "sd": 1.0, "lower": np.nan}, "cannot be NaN"),
])
def test_invalid_arguments(kwargs, match):
    with pytest.raises(ValueError, match=match):
        truncated_normal(**kwargs)

def test_incompatible_shapes():
    with pytest.raises(ValueError):
        truncated_normal(np.zeros(3), np.ones(4))
