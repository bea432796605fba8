"""
Viterbi (delta) decoding.

Tie-breaking is intentionally asymmetric and must stay that way:

- while propagating, predecessors are compared with ``>=`` so the
  highest-indexed predecessor among equal candidates wins;
- at termination, final states are compared with ``>`` against a running
  maximum that starts at 0, so the lowest-indexed maximum wins.

Backpointers lag one step behind the value they explain: the predecessor
chosen for delta[i, t] is stored in backpointers[i, t-1]. The last column
holds the terminal state for every row.
"""

from dataclasses import dataclass

import numpy as np

from ..exceptions import DecodingError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ViterbiResult:
    """
    Output of the delta pass.

    Attributes:
        path: Most probable state sequence [T]
        delta: Best-path probabilities [n_states, T]
        backpointers: Predecessor indices [n_states, T], offset by one step
    """
    path: np.ndarray
    delta: np.ndarray
    backpointers: np.ndarray

    @property
    def probability(self) -> float:
        """Joint probability of the decoded path and the observations."""
        return float(self.delta[self.path[-1], -1])


def _last_argmax(scores: np.ndarray) -> np.ndarray:
    """Column-wise argmax that returns the last index among ties."""
    n_rows = scores.shape[0]
    return n_rows - 1 - np.argmax(scores[::-1, :], axis=0)


def viterbi_decode(model, observations) -> ViterbiResult:
    """
    Find the single most probable state path for the observations.

    Args:
        model: DiscreteHMM
        observations: Sequence of observation indices [T]

    Returns:
        ViterbiResult with the path, delta matrix and backpointers

    Raises:
        DimensionMismatchError: If the observations are invalid for the model
        DecodingError: If every path has probability zero
    """
    obs = model.check_observations(observations)
    T = len(obs)
    N = model.n_states

    delta = np.zeros((N, T))
    backpointers = np.zeros((N, T), dtype=np.int64)

    delta[:, 0] = model.B[:, obs[0]] * model.pi

    for t in range(1, T):
        # scores[j, i]: reach state i at t from predecessor j
        scores = (model.A * delta[:, t - 1][:, np.newaxis]) * model.B[:, obs[t]][np.newaxis, :]
        best = _last_argmax(scores)
        delta[:, t] = scores[best, np.arange(N)]
        backpointers[:, t - 1] = best

    final = delta[:, T - 1]
    terminal = int(np.argmax(final))
    if not final[terminal] > 0:
        raise DecodingError(
            f"All state paths have zero probability for the {T}-step observation sequence"
        )

    backpointers[:, T - 1] = terminal

    path = np.zeros(T, dtype=np.int64)
    path[T - 1] = backpointers[0, T - 1]
    for t in range(T - 2, -1, -1):
        path[t] = backpointers[path[t + 1], t]

    logger.debug(f"Viterbi decoding completed: T={T}, terminal_state={terminal}")
    return ViterbiResult(path=path, delta=delta, backpointers=backpointers)
