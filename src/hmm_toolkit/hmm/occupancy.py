"""
State and transition occupancy statistics (gamma and di-gamma).
"""

from dataclasses import dataclass

import numpy as np

from ..exceptions import DegenerateDistributionError
from ..logger import get_logger
from .forward import ScaledForwardResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class OccupancyStatistics:
    """
    Posterior occupancy given the full observation sequence.

    Attributes:
        gamma: P(q_t = i | O) as [n_states, T]
        digamma: P(q_t = i, q_t+1 = j | O) as [n_states, n_states, T];
            the slot t = T-1 is undefined and left at zero
    """
    gamma: np.ndarray
    digamma: np.ndarray


def compute_occupancy(model, observations, forward: ScaledForwardResult,
                      beta: np.ndarray) -> OccupancyStatistics:
    """
    Derive gamma and di-gamma from the scaled forward and backward matrices.

    Args:
        model: DiscreteHMM the passes were computed with
        observations: Sequence of observation indices [T]
        forward: Result of scaled_forward_pass
        beta: Result of scaled_backward_pass

    Returns:
        OccupancyStatistics

    Raises:
        DegenerateDistributionError: If a normalizing denominator is zero
    """
    obs = model.check_observations(observations)
    T = len(obs)
    N = model.n_states
    alpha = forward.alpha

    if alpha.shape != (N, T) or beta.shape != (N, T):
        raise ValueError(
            f"alpha {alpha.shape} and beta {beta.shape} must both have shape ({N}, {T})"
        )

    gamma = np.zeros((N, T))
    digamma = np.zeros((N, N, T))

    for t in range(T - 1):
        # alpha[i, t] * A[i, j] * B[j, obs[t+1]] * beta[j, t+1]
        joint = (alpha[:, t][:, np.newaxis] * model.A) * (model.B[:, obs[t + 1]] * beta[:, t + 1])[np.newaxis, :]
        denom = joint.sum()
        if denom == 0:
            raise DegenerateDistributionError(
                f"Di-gamma denominator is zero at time {t}", step=t
            )

        digamma[:, :, t] = joint / denom
        gamma[:, t] = digamma[:, :, t].sum(axis=1)

    denom = alpha[:, T - 1].sum()
    if denom == 0:
        raise DegenerateDistributionError(
            f"Gamma denominator is zero at final time {T - 1}", step=T - 1
        )
    gamma[:, T - 1] = alpha[:, T - 1] / denom

    logger.debug(f"Occupancy statistics computed: T={T}")
    return OccupancyStatistics(gamma=gamma, digamma=digamma)
