"""
Forward (alpha) pass, unscaled and scaled.

Matrices are laid out [n_states, T]: alpha[i, t] is the joint probability
of being in state i at time t and having observed the prefix up to t.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import get_config
from ..exceptions import DegenerateDistributionError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScaledForwardResult:
    """
    Output of the scaled forward pass.

    Attributes:
        alpha: Scaled forward probabilities [n_states, T]; every column sums to 1
        scaling_factors: c[t] = 1 / (unscaled column sum at t), length T
    """
    alpha: np.ndarray
    scaling_factors: np.ndarray

    @property
    def n_steps(self) -> int:
        return self.alpha.shape[1]


def forward_matrix(model, observations) -> np.ndarray:
    """
    Compute the unscaled forward matrix.

    Args:
        model: DiscreteHMM
        observations: Sequence of observation indices [T]

    Returns:
        alpha: Unscaled forward probabilities [n_states, T]
    """
    obs = model.check_observations(observations)
    T = len(obs)

    alpha = np.zeros((model.n_states, T))
    alpha[:, 0] = model.B[:, obs[0]] * model.pi

    for t in range(1, T):
        # sum_j A[j, i] * alpha[j, t-1]
        alpha[:, t] = model.B[:, obs[t]] * (model.A.T @ alpha[:, t - 1])

    return alpha


def forward_pass(model, observations) -> float:
    """
    Probability of the observation sequence under the model.

    No scaling is applied, so long sequences can underflow to 0.0.
    Use the scaled pass and log_likelihood() for those.
    """
    alpha = forward_matrix(model, observations)
    probability = float(alpha[:, -1].sum())

    logger.debug(f"Forward pass completed: T={alpha.shape[1]}, probability={probability:.6e}")
    return probability


def scaled_forward_pass(model, observations) -> ScaledForwardResult:
    """
    Compute the forward matrix normalizing each column as it is produced.

    Args:
        model: DiscreteHMM
        observations: Sequence of observation indices [T]

    Returns:
        ScaledForwardResult with the scaled alpha matrix and its scaling factors

    Raises:
        DegenerateDistributionError: If a column sums to zero before scaling
    """
    obs = model.check_observations(observations)
    T = len(obs)

    alpha = np.zeros((model.n_states, T))
    scaling_factors = np.zeros(T)

    for t in range(T):
        if t == 0:
            alpha[:, 0] = model.B[:, obs[0]] * model.pi
        else:
            alpha[:, t] = model.B[:, obs[t]] * (model.A.T @ alpha[:, t - 1])

        column_sum = alpha[:, t].sum()
        if column_sum == 0:
            raise DegenerateDistributionError(
                f"Forward probabilities sum to zero at time {t} (symbol {obs[t]})",
                step=t
            )

        scaling_factors[t] = 1.0 / column_sum
        alpha[:, t] *= scaling_factors[t]

    logger.debug(f"Scaled forward pass completed: T={T}")
    return ScaledForwardResult(alpha=alpha, scaling_factors=scaling_factors)


def log_likelihood(scaling_factors: np.ndarray, log_base: Optional[float] = None) -> float:
    """
    Log-probability of the sequence recovered from forward scaling factors.

    log P(O | model) = -sum_t log(c_t)

    Args:
        scaling_factors: Factors from scaled_forward_pass
        log_base: Logarithm base, must be > 1 (default: config value training.log_base)

    Raises:
        ValueError: If log_base is not greater than 1
    """
    if log_base is None:
        log_base = get_config('training', 'log_base')

    if not log_base > 1:
        raise ValueError(f"log_base must be greater than 1, got {log_base}")

    log_prob = -float(np.sum(np.log(scaling_factors)))
    if log_base != math.e:
        log_prob /= math.log(log_base)

    return log_prob
