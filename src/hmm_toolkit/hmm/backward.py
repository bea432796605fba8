"""
Scaled backward (beta) pass.
"""

import numpy as np

from ..logger import get_logger
from .forward import ScaledForwardResult

logger = get_logger(__name__)


def scaled_backward_pass(model, observations, forward: ScaledForwardResult) -> np.ndarray:
    """
    Compute the backward matrix scaled with the forward pass factors.

    beta[i, T-1] = c[T-1]
    beta[i, t]   = c[t] * sum_j A[i, j] * B[j, obs[t+1]] * beta[j, t+1]

    Step t is scaled with c[t], the factor the forward pass produced at the
    same step, not c[t+1]. The occupancy statistics depend on this pairing.

    Args:
        model: DiscreteHMM
        observations: Sequence of observation indices [T]
        forward: Result of scaled_forward_pass over the same observations

    Returns:
        beta: Scaled backward probabilities [n_states, T]

    Raises:
        DimensionMismatchError: If the observations are invalid for the model
        ValueError: If forward was computed over a sequence of different length
    """
    obs = model.check_observations(observations)
    T = len(obs)

    if forward.n_steps != T or forward.alpha.shape[0] != model.n_states:
        raise ValueError(
            f"Forward result covers {forward.n_steps} steps and {forward.alpha.shape[0]} states, "
            f"expected {T} steps and {model.n_states} states"
        )

    c = forward.scaling_factors
    beta = np.zeros((model.n_states, T))
    beta[:, T - 1] = c[T - 1]

    for t in range(T - 2, -1, -1):
        beta[:, t] = c[t] * (model.A @ (model.B[:, obs[t + 1]] * beta[:, t + 1]))

    logger.debug(f"Scaled backward pass completed: T={T}")
    return beta
