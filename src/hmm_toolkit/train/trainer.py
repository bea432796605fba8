"""
Baum-Welch trainer for a single observation sequence.

The trainer copies the caller's model into a parameter buffer it owns and
re-estimates that buffer in place on every iteration. Callers only ever
see copies of it.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import get_config
from ..hmm.backward import scaled_backward_pass
from ..hmm.forward import scaled_forward_pass, log_likelihood
from ..hmm.model import DiscreteHMM
from ..hmm.occupancy import compute_occupancy
from ..logger import get_logger
from .reestimate import reestimate

logger = get_logger(__name__)


@dataclass
class TrainingResult:
    """
    Outcome of a training run.

    Attributes:
        model: Copy of the parameters after the last re-estimation pass
        iterations: Number of re-estimation passes performed
        log_likelihood_history: Log-likelihood measured at each iteration,
            from the forward pass that preceded that iteration's re-estimation
        converged: True if the stopping rule fired, False if the iteration
            cap was reached first
        training_time: Wall-clock seconds spent in the loop
    """
    model: DiscreteHMM
    iterations: int
    log_likelihood_history: List[float] = field(default_factory=list)
    converged: bool = False
    training_time: float = 0.0

    @property
    def final_log_likelihood(self) -> float:
        return self.log_likelihood_history[-1]

    @property
    def improvement_history(self) -> List[float]:
        history = self.log_likelihood_history
        return [current - previous for previous, current in zip(history, history[1:])]

    def as_dict(self) -> Dict[str, Any]:
        """Training statistics without the model."""
        return {
            'converged': self.converged,
            'iterations': self.iterations,
            'final_log_likelihood': self.final_log_likelihood,
            'log_likelihood_history': list(self.log_likelihood_history),
            'improvement_history': self.improvement_history,
            'training_time': self.training_time
        }


class BaumWelchTrainer:
    """
    Iterative Expectation-Maximization over one observation sequence.

    Each iteration runs the scaled forward pass, the scaled backward pass,
    the occupancy statistics and the re-estimation, then compares the
    log-likelihood with the previous iteration. Training stops as soon as
    it fails to improve strictly, or when max_iterations is reached. The
    parameters from the last re-estimation are kept even when that
    iteration is the one that stopped the loop.
    """

    def __init__(self, max_iterations: Optional[int] = None, log_base: Optional[float] = None):
        """
        Initialize BaumWelchTrainer.

        Args:
            max_iterations: Iteration cap (default: config value training.max_iterations)
            log_base: Base of the log-likelihood, must be > 1
                (default: config value training.log_base)
        """
        if max_iterations is None:
            max_iterations = get_config('training', 'max_iterations')
        if log_base is None:
            log_base = get_config('training', 'log_base')

        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        if not log_base > 1:
            raise ValueError(f"log_base must be greater than 1, got {log_base}")

        self.max_iterations = max_iterations
        self.log_base = log_base
        self._model: Optional[DiscreteHMM] = None

        logger.debug(f"BaumWelchTrainer initialized: max_iterations={max_iterations}, log_base={log_base}")

    @property
    def model(self) -> Optional[DiscreteHMM]:
        """Copy of the current parameter buffer, or None before fit()."""
        if self._model is None:
            return None
        return self._model.copy()

    def fit(self, model: DiscreteHMM, observations) -> TrainingResult:
        """
        Train a copy of model on the observation sequence.

        Args:
            model: Initial parameter estimate; left untouched
            observations: Sequence of observation indices [T]

        Returns:
            TrainingResult holding the re-estimated model

        Raises:
            DimensionMismatchError: If the observations are invalid for the model
            DegenerateDistributionError: If the data has zero probability under
                the current estimate at any iteration
        """
        obs = model.check_observations(observations)
        self._model = model.copy()

        history = []
        previous_log_prob = -np.inf
        converged = False
        iteration = 0

        logger.info(f"Starting Baum-Welch training: {model.n_states} states, "
                    f"{model.n_observations} symbols, T={len(obs)}")
        start_time = time.time()

        while iteration < self.max_iterations:
            iteration += 1

            forward = scaled_forward_pass(self._model, obs)
            beta = scaled_backward_pass(self._model, obs, forward)
            occupancy = compute_occupancy(self._model, obs, forward, beta)
            reestimate(self._model, occupancy, obs)

            log_prob = log_likelihood(forward.scaling_factors, self.log_base)
            history.append(log_prob)

            logger.debug(f"Iteration {iteration}: log_likelihood={log_prob:.6f}")

            if log_prob <= previous_log_prob:
                converged = True
                logger.info(f"Converged after {iteration} iterations "
                            f"(log_likelihood {log_prob:.6f} <= previous {previous_log_prob:.6f})")
                break

            previous_log_prob = log_prob

        if not converged:
            logger.info(f"Training stopped after {self.max_iterations} iterations without convergence")

        return TrainingResult(
            model=self._model.copy(),
            iterations=iteration,
            log_likelihood_history=history,
            converged=converged,
            training_time=time.time() - start_time
        )
