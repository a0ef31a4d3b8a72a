import pytest
import numpy as np
import pandas as pd
from pathassign.mcmc.config import read_config
from pathassign.mcmc.state import build_priors, initialize_state
from pathassign.mcmc.results import (
    MCMCResult,
    TrajectoryRecorder,
    enabled_fields
)

@pytest.mark.parametrize("flags, expected", [
    ((False, False, False), ("beta", "tau")),
    ((True, False, False), ("beta", "tau", "B")),
    ((True, False, True), ("beta", "tau", "B", "gamma", "kappa", "gamma_prob")),
    ((True, True, True), ("beta", "tau", "B", "gamma", "kappa", "gamma_prob",
                          "S", "delta", "delta_prob")),
    ((False, True, False), ("beta", "tau", "S", "delta", "delta_prob")),
])
def test_enabled_fields(flags, expected):
    assert enabled_fields(*flags) == expected

def _recorder(iterations=3, **kwargs):
    n, k, m = 4, 3, 2
    X = np.arange(n*m, dtype=float).reshape(n, m) + 1
    config = read_config(override_keys=kwargs)
    priors = build_priors(np.ones(n), X, np.full((n, m), 0.5), config)
    state = initialize_state(priors, k, np.random.default_rng(0))
    rec = TrajectoryRecorder(iterations, state,
                             adaptive_B=config["adaptive_B"],
                             adaptive_S=config["adaptive_S"],
                             mixture_beta=config["mixture_beta"])
    return rec, state

def test_recorder_shapes_and_copies():
    rec, state = _recorder(adaptive_B=True, adaptive_S=True, mixture_beta=True)
    for i in range(3):
        state.beta[:] = i
        rec.record(i, state)
    result = rec.to_result()

    assert result.beta.shape == (3, 2, 3)
    assert result.tau.shape == (3, 4)
    assert result.B.shape == (3, 4)
    assert result.S.shape == (3, 4, 2)
    assert result.delta.shape == (3, 4, 2)
    assert result.gamma.shape == (3, 2, 3)

    # rows are snapshots, not views of the state
    assert np.all(result.beta[0] == 0)
    assert np.all(result.beta[2] == 2)

def test_recorder_write_once():
    rec, state = _recorder()
    rec.record(0, state)
    with pytest.raises(RuntimeError, match="already recorded"):
        rec.record(0, state)

def test_recorder_incomplete():
    rec, state = _recorder()
    rec.record(0, state)
    with pytest.raises(RuntimeError, match="2 iterations were never recorded"):
        rec.to_result()

def test_recorder_skips_disabled_fields():
    rec, state = _recorder(iterations=1, adaptive_B=False, adaptive_S=False,
                           mixture_beta=False)
    rec.record(0, state)
    result = rec.to_result()
    assert result.B is None
    assert result.gamma is None
    assert result.kappa is None
    assert result.S is None
    assert result.delta is None

@pytest.mark.parametrize("flags, mode", [
    ((False, False, False), "A"),
    ((True, False, False), "B"),
    ((True, False, True), "C"),
    ((True, True, True), "D"),
    ((False, True, True), None),
])
def test_mode(flags, mode):
    result = MCMCResult(adaptive_B=flags[0],
                        adaptive_S=flags[1],
                        mixture_beta=flags[2],
                        ECM=False,
                        beta=np.zeros((2, 1, 1)),
                        tau=np.zeros((2, 1)))
    assert result.mode == mode
    assert result.iterations == 2
    assert f"mode={mode}" in repr(result)

def test_effective_activation():
    beta = np.random.default_rng(0).uniform(size=(2, 1, 3))
    kappa = beta*np.array([[[1, 0, 1]]])

    without = MCMCResult(False, False, False, False, beta=beta,
                         tau=np.ones((2, 1)))
    assert without.effective_activation() is beta

    with_mix = MCMCResult(True, False, True, False, beta=beta,
                          tau=np.ones((2, 1)), B=np.ones((2, 1)),
                          gamma=np.ones((2, 1, 3)), kappa=kappa,
                          gamma_prob=np.ones((2, 1, 3)))
    assert with_mix.effective_activation() is kappa

def test_as_dict_keys():
    rec, state = _recorder(iterations=1, adaptive_B=True, adaptive_S=True,
                           mixture_beta=True)
    rec.record(0, state)
    out = rec.to_result().as_dict()
    assert set(out) == {"beta_mcmc", "tau2_mcmc", "B_mcmc", "gamma_mcmc",
                        "kappa_mcmc", "gamma_pr_mcmc", "S_mcmc",
                        "Delta_mcmc", "Delta_pr_mcmc"}

    rec, state = _recorder(iterations=1, adaptive_B=False, adaptive_S=False,
                           mixture_beta=False)
    rec.record(0, state)
    assert set(rec.to_result().as_dict()) == {"beta_mcmc", "tau2_mcmc"}

def test_to_dataframe_labels():
    rec, state = _recorder(iterations=2, adaptive_B=True, adaptive_S=True,
                           mixture_beta=True)
    rec.record(0, state)
    rec.record(1, state)
    result = rec.to_result(gene_names=["g1", "g2", "g3", "g4"],
                           sample_names=["s1", "s2", "s3"],
                           pathway_names=["p1", "p2"])

    beta = result.to_dataframe("beta")
    assert isinstance(beta, pd.DataFrame)
    assert list(beta.index) == ["p1", "p2"]
    assert list(beta.columns) == ["s1", "s2", "s3"]

    S = result.to_dataframe("S", iteration=0)
    assert list(S.index) == ["g1", "g2", "g3", "g4"]
    assert list(S.columns) == ["p1", "p2"]
    assert np.array_equal(S.to_numpy(), result.S[0])

    tau = result.to_dataframe("tau")
    assert isinstance(tau, pd.Series)
    assert list(tau.index) == ["g1", "g2", "g3", "g4"]

def test_to_dataframe_unlabelled():
    rec, state = _recorder(iterations=1)
    rec.record(0, state)
    beta = rec.to_result().to_dataframe("beta")
    assert list(beta.index) == [0, 1]

def test_to_dataframe_bad_names():
    rec, state = _recorder(iterations=1, adaptive_S=False)
    rec.record(0, state)
    result = rec.to_result()
    with pytest.raises(ValueError, match="not a trajectory"):
        result.to_dataframe("not_a_field")
    with pytest.raises(ValueError, match="was not recorded"):
        result.to_dataframe("S")
