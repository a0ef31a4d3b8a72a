import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Optional

from pathassign.mcmc.state import ChainState

# trajectory name -> (flag that enables it, or None if always recorded;
#                     key used by as_dict; axes after the iteration axis)
TRAJECTORY_FIELDS = {
    "beta": (None, "beta_mcmc", ("pathway", "sample")),
    "tau": (None, "tau2_mcmc", ("gene",)),
    "B": ("adaptive_B", "B_mcmc", ("gene",)),
    "gamma": ("mixture_beta", "gamma_mcmc", ("pathway", "sample")),
    "kappa": ("mixture_beta", "kappa_mcmc", ("pathway", "sample")),
    "gamma_prob": ("mixture_beta", "gamma_pr_mcmc", ("pathway", "sample")),
    "S": ("adaptive_S", "S_mcmc", ("gene", "pathway")),
    "delta": ("adaptive_S", "Delta_mcmc", ("gene", "pathway")),
    "delta_prob": ("adaptive_S", "Delta_pr_mcmc", ("gene", "pathway")),
}

# flag combinations with a name
_MODES = {
    (False, False, False): "A",
    (True, False, False): "B",
    (True, False, True): "C",
    (True, True, True): "D",
}


def enabled_fields(adaptive_B, adaptive_S, mixture_beta):
    """
    Names of the trajectories recorded for a combination of mode flags.
    """

    flags = {"adaptive_B": adaptive_B,
             "adaptive_S": adaptive_S,
             "mixture_beta": mixture_beta}

    return tuple(name for name, (flag, _, _) in TRAJECTORY_FIELDS.items()
                 if flag is None or flags[flag])


@dataclass(frozen=True)
class MCMCResult:
    """
    Full trajectories of a finished chain. Every array has the iteration
    as its leading axis, with the initial state in row 0.

    Which optional trajectories are populated follows from the flags:
    `B` when adaptive_B; `gamma`, `kappa` and `gamma_prob` when
    mixture_beta; `S`, `delta` and `delta_prob` when adaptive_S.
    """

    adaptive_B: bool
    adaptive_S: bool
    mixture_beta: bool
    ECM: bool

    beta: np.ndarray
    tau: np.ndarray
    B: Optional[np.ndarray] = None
    gamma: Optional[np.ndarray] = None
    kappa: Optional[np.ndarray] = None
    gamma_prob: Optional[np.ndarray] = None
    S: Optional[np.ndarray] = None
    delta: Optional[np.ndarray] = None
    delta_prob: Optional[np.ndarray] = None

    gene_names: Optional[list] = None
    sample_names: Optional[list] = None
    pathway_names: Optional[list] = None

    def __repr__(self) -> str:
        return (f"<MCMCResult(mode={self.mode}, iterations={self.iterations}, "
                f"fields={','.join(self.available)})>")

    @property
    def iterations(self) -> int:
        return self.beta.shape[0]

    @property
    def mode(self) -> Optional[str]:
        """
        "A", "B", "C" or "D" for the named flag combinations, None for
        any other combination.
        """
        return _MODES.get((self.adaptive_B, self.adaptive_S, self.mixture_beta))

    @property
    def available(self) -> tuple:
        return enabled_fields(self.adaptive_B,
                              self.adaptive_S,
                              self.mixture_beta)

    def effective_activation(self) -> np.ndarray:
        """
        Activation trajectory as reported: kappa (beta*gamma) when the
        activation mixture is on, otherwise beta itself.
        """
        if self.kappa is not None:
            return self.kappa
        return self.beta

    def as_dict(self) -> dict:
        """
        Populated trajectories keyed as beta_mcmc, tau2_mcmc, B_mcmc,
        gamma_mcmc, kappa_mcmc, gamma_pr_mcmc, S_mcmc, Delta_mcmc and
        Delta_pr_mcmc.
        """
        return {TRAJECTORY_FIELDS[name][1]: getattr(self, name)
                for name in self.available}

    def to_dataframe(self, name: str, iteration: int = -1):
        """
        Return one iteration of one trajectory with gene, sample and
        pathway labels.

        Parameters
        ----------
        name : str
            Trajectory name (e.g. "beta", "tau", "S").
        iteration : int, default: -1
            Row of the trajectory to return (0 is the initial state).

        Returns
        -------
        pandas.Series or pandas.DataFrame
            A Series indexed by gene for per-gene trajectories, otherwise a
            DataFrame (pathways x samples or genes x pathways).
        """

        if name not in TRAJECTORY_FIELDS:
            raise ValueError(f"'{name}' is not a trajectory name.")
        if name not in self.available:
            raise ValueError(f"'{name}' was not recorded in mode "
                             f"{self.mode}.")

        labels = {"gene": self.gene_names,
                  "sample": self.sample_names,
                  "pathway": self.pathway_names}
        axes = TRAJECTORY_FIELDS[name][2]
        values = getattr(self, name)[iteration]

        if len(axes) == 1:
            return pd.Series(values, index=labels[axes[0]], name=name)

        return pd.DataFrame(values,
                            index=labels[axes[0]],
                            columns=labels[axes[1]])


class TrajectoryRecorder:
    """
    Preallocated trajectory buffers for the enabled fields. Each row is
    written once.
    """

    def __init__(self, iterations, state: ChainState,
                 adaptive_B, adaptive_S, mixture_beta):

        self._fields = enabled_fields(adaptive_B, adaptive_S, mixture_beta)
        self._flags = dict(adaptive_B=adaptive_B,
                           adaptive_S=adaptive_S,
                           mixture_beta=mixture_beta)

        self._buffers = {}
        for name in self._fields:
            value = np.asarray(getattr(state, name))
            self._buffers[name] = np.empty((iterations,) + value.shape,
                                           dtype=value.dtype)
        self._written = np.zeros(iterations, dtype=bool)

    def record(self, i: int, state: ChainState) -> None:
        """
        Copy the current state into row i.
        """
        if self._written[i]:
            raise RuntimeError(f"iteration {i} was already recorded")

        for name in self._fields:
            self._buffers[name][i] = getattr(state, name)
        self._written[i] = True

    def to_result(self, ECM=False, gene_names=None, sample_names=None,
                  pathway_names=None) -> MCMCResult:

        if not np.all(self._written):
            missing = int(np.sum(~self._written))
            raise RuntimeError(f"{missing} iterations were never recorded")

        return MCMCResult(ECM=ECM,
                          gene_names=gene_names,
                          sample_names=sample_names,
                          pathway_names=pathway_names,
                          **self._flags,
                          **self._buffers)
