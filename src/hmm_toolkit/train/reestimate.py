"""
Baum-Welch M-step: re-estimate A, B and pi from occupancy statistics.
"""

import numpy as np

from ..exceptions import DegenerateDistributionError
from ..hmm.occupancy import OccupancyStatistics
from ..logger import get_logger

logger = get_logger(__name__)


def reestimate(model, occupancy: OccupancyStatistics, observations) -> None:
    """
    Update the model parameters in place.

    pi[i]   = gamma[i, 0]
    A[i, j] = sum_{t<T-1} digamma[i, j, t] / sum_{t<T-1} gamma[i, t]
    B[i, k] = sum_{t: obs[t]=k} gamma[i, t] / sum_t gamma[i, t]

    All new values are computed before anything is written, so a failure
    leaves the model unchanged.

    Args:
        model: DiscreteHMM to update
        occupancy: Statistics computed with this model and observations
        observations: Sequence of observation indices [T]

    Raises:
        DegenerateDistributionError: If a state is never occupied over the
            window a denominator sums over (always the case for T = 1)
    """
    obs = model.check_observations(observations)
    T = len(obs)
    gamma = occupancy.gamma
    digamma = occupancy.digamma

    transition_denom = gamma[:, :T - 1].sum(axis=1)
    empty = np.flatnonzero(transition_denom == 0)
    if empty.size:
        raise DegenerateDistributionError(
            f"State {empty[0]} is never occupied before the final step; "
            f"cannot re-estimate its transitions",
            state=int(empty[0])
        )

    # emission_denom >= transition_denom > 0
    emission_denom = gamma.sum(axis=1)

    new_pi = gamma[:, 0].copy()
    new_A = digamma[:, :, :T - 1].sum(axis=2) / transition_denom[:, np.newaxis]

    new_B = np.zeros_like(model.B)
    for k in range(model.n_observations):
        new_B[:, k] = gamma[:, obs == k].sum(axis=1)
    new_B /= emission_denom[:, np.newaxis]

    model.pi[:] = new_pi
    model.A[:] = new_A
    model.B[:] = new_B

    logger.debug("Parameters re-estimated")
