import pytest
import numpy as np
from pathassign.mcmc.tempering import tempered_variances, TEMPERING_PERIOD

@pytest.mark.parametrize("iteration", [500, 1000, 1500])
def test_nominal_at_end_of_cycle(iteration):
    spike, slab = tempered_variances(iteration, 0.01, 1.0)
    assert np.isclose(slab, 1.0, rtol=1e-5)
    assert np.isclose(spike, 0.01, rtol=1e-5)

@pytest.mark.parametrize("iteration", [1, 2, 10, 501, 1001])
def test_inflated_within_cycle(iteration):
    spike, slab = tempered_variances(iteration, 0.01, 1.0)
    assert slab > 1.0
    assert not np.isclose(slab, 1.0, rtol=1e-4)

def test_cycle_start_values():
    # c = 1, factor = 1 + 1/sigma_sNonZero
    spike, slab = tempered_variances(501, 0.01, 2.0)
    assert np.isclose(slab, 1.5*2.0)
    assert np.isclose(spike, 1.5*0.01)

def test_resets_every_period():
    for i in range(1, 20):
        assert tempered_variances(i, 0.01, 1.0) == \
            tempered_variances(i + TEMPERING_PERIOD, 0.01, 1.0)

def test_decreases_within_cycle():
    slabs = [tempered_variances(i, 0.01, 1.0)[1] for i in range(1, 501)]
    assert np.all(np.diff(slabs) < 0)

def test_spike_slab_ratio_constant():
    for i in [1, 37, 499, 500, 777]:
        spike, slab = tempered_variances(i, 0.05, 1.0)
        assert np.isclose(slab/spike, 20.0)

def test_custom_period():
    spike, slab = tempered_variances(10, 0.01, 1.0, period=10)
    assert np.isclose(slab, 1.01)

def test_bad_iteration():
    with pytest.raises(ValueError, match="iteration must be >= 1"):
        tempered_variances(0, 0.01, 1.0)
