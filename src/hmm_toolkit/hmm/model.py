"""
Discrete Hidden Markov Model implementation.

This module holds the model parameters (transition matrix A, emission
matrix B and initial distribution pi) together with the dimension and
stochasticity checks every pass relies on.
"""

import numpy as np
from typing import Tuple, Optional
import logging

from ..config import get_config
from ..exceptions import DimensionMismatchError, InvalidDistributionError
from .forward import forward_pass, scaled_forward_pass, log_likelihood
from .viterbi import viterbi_decode

logger = logging.getLogger(__name__)


def validate_dimensions(A: np.ndarray, B: np.ndarray, pi: np.ndarray) -> None:
    """
    Check that A is N x N, B has N rows and pi has length N.

    Raises:
        DimensionMismatchError: If any shape disagrees
    """
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape[0] == 0:
        raise DimensionMismatchError(f"A must be a non-empty square matrix, got shape {A.shape}")

    n_states = A.shape[0]

    if B.ndim != 2 or B.shape[0] != n_states or B.shape[1] == 0:
        raise DimensionMismatchError(
            f"B shape {B.shape} doesn't match expected ({n_states}, M) with M > 0"
        )

    if pi.shape != (n_states,):
        raise DimensionMismatchError(f"pi shape {pi.shape} doesn't match expected ({n_states},)")


class DiscreteHMM:
    """
    Discrete Hidden Markov Model over N hidden states and M observation symbols.

    - A[i, j] = P(q_t+1 = j | q_t = i)
    - B[i, k] = P(o_t = k | q_t = i)
    - pi[i] = P(q_0 = i)
    """

    def __init__(self, A, B, pi, validate: bool = True):
        """
        Initialize DiscreteHMM from explicit parameters.

        Args:
            A: Transition matrix [n_states, n_states]
            B: Emission matrix [n_states, n_observations]
            pi: Initial state probabilities [n_states]
            validate: Check stochastic properties (default: True)

        Raises:
            DimensionMismatchError: If parameter shapes disagree
            InvalidDistributionError: If validate is set and a distribution is invalid
        """
        self.A = np.array(A, dtype=np.float64)
        self.B = np.array(B, dtype=np.float64)
        self.pi = np.array(pi, dtype=np.float64)

        validate_dimensions(self.A, self.B, self.pi)

        if validate:
            self.validate_stochastic_matrices()

        logger.debug(f"Initialized DiscreteHMM with {self.n_states} states and {self.n_observations} observations")

    @classmethod
    def random(cls, n_states: int, n_observations: int,
               random_state: Optional[int] = None) -> "DiscreteHMM":
        """
        Create a model with uniform pi and random row-stochastic A and B.

        Args:
            n_states: Number of hidden states
            n_observations: Number of observation symbols
            random_state: Random seed for reproducible initialization
        """
        if random_state is None:
            random_state = get_config('hmm', 'random_seed')
        rng = np.random.default_rng(random_state)

        pi = np.ones(n_states) / n_states

        A = rng.random((n_states, n_states))
        A = A / A.sum(axis=1, keepdims=True)

        B = rng.random((n_states, n_observations))
        B = B / B.sum(axis=1, keepdims=True)

        return cls(A, B, pi)

    @property
    def n_states(self) -> int:
        return self.A.shape[0]

    @property
    def n_observations(self) -> int:
        return self.B.shape[1]

    def validate_stochastic_matrices(self, tolerance: Optional[float] = None) -> bool:
        """
        Validate that all probability matrices satisfy stochastic properties.

        Args:
            tolerance: Allowed deviation of each row sum from 1.0
                (default: config value hmm.stochastic_tolerance)

        Returns:
            bool: True if all matrices are valid stochastic matrices

        Raises:
            InvalidDistributionError: If any matrix violates stochastic properties
        """
        if tolerance is None:
            tolerance = get_config('hmm', 'stochastic_tolerance')

        if np.any(self.pi < 0):
            raise InvalidDistributionError("Initial probabilities contain negative values")

        if not np.isclose(self.pi.sum(), 1.0, rtol=0.0, atol=tolerance):
            raise InvalidDistributionError(f"Initial probabilities sum to {self.pi.sum()}, expected 1.0")

        if np.any(self.A < 0):
            raise InvalidDistributionError("Transition matrix contains negative values")

        row_sums_A = self.A.sum(axis=1)
        if not np.allclose(row_sums_A, 1.0, rtol=0.0, atol=tolerance):
            raise InvalidDistributionError(f"Transition matrix rows don't sum to 1.0: {row_sums_A}")

        if np.any(self.B < 0):
            raise InvalidDistributionError("Emission matrix contains negative values")

        row_sums_B = self.B.sum(axis=1)
        if not np.allclose(row_sums_B, 1.0, rtol=0.0, atol=tolerance):
            raise InvalidDistributionError(f"Emission matrix rows don't sum to 1.0: {row_sums_B}")

        return True

    def check_observations(self, observations) -> np.ndarray:
        """
        Validate an observation sequence against this model.

        Returns:
            The observations as a 1-D integer array

        Raises:
            DimensionMismatchError: If the sequence is empty, not 1-D, not
                integer-valued, or has a symbol outside [0, n_observations)
        """
        obs = np.asarray(observations)

        if obs.ndim != 1 or obs.size == 0:
            raise DimensionMismatchError("Observations must be a non-empty 1-D sequence")

        if not np.issubdtype(obs.dtype, np.integer):
            raise DimensionMismatchError(f"Observations must be integer symbols, got dtype {obs.dtype}")

        if np.any(obs < 0) or np.any(obs >= self.n_observations):
            raise DimensionMismatchError(f"Observations must be in range [0, {self.n_observations - 1}]")

        return obs

    def get_parameters(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Get current model parameters.

        Returns:
            Tuple of (pi, A, B) copies
        """
        return self.pi.copy(), self.A.copy(), self.B.copy()

    def set_parameters(self, pi: np.ndarray, A: np.ndarray, B: np.ndarray) -> None:
        """
        Set model parameters and validate them.

        The number of states and symbols must stay the same.

        Raises:
            DimensionMismatchError: If parameter dimensions don't match model configuration
            InvalidDistributionError: If a distribution is invalid
        """
        pi = np.array(pi, dtype=np.float64)
        A = np.array(A, dtype=np.float64)
        B = np.array(B, dtype=np.float64)

        validate_dimensions(A, B, pi)
        if B.shape != self.B.shape:
            raise DimensionMismatchError(f"B shape {B.shape} doesn't match expected {self.B.shape}")

        previous = (self.pi, self.A, self.B)
        self.pi, self.A, self.B = pi, A, B
        try:
            self.validate_stochastic_matrices()
        except InvalidDistributionError:
            self.pi, self.A, self.B = previous
            raise

        logger.debug("Model parameters updated and validated")

    def copy(self) -> "DiscreteHMM":
        """Return an independent copy of this model."""
        return DiscreteHMM(self.A, self.B, self.pi, validate=False)

    def emission_distribution(self) -> np.ndarray:
        """
        Distribution of the symbol emitted after one transition from pi.

        Returns:
            Row vector pi . A . B with shape [1, n_observations]
        """
        return (self.pi @ self.A @ self.B).reshape(1, -1)

    def probability(self, observations) -> float:
        """Probability of the observation sequence (unscaled forward pass)."""
        return forward_pass(self, observations)

    def score(self, observations, log_base: Optional[float] = None) -> float:
        """
        Compute log-likelihood of observation sequence using the scaled forward pass.

        Args:
            observations: Sequence of observation indices [T]
            log_base: Logarithm base (default: config value training.log_base)
        """
        forward = scaled_forward_pass(self, observations)
        return log_likelihood(forward.scaling_factors, log_base)

    def decode(self, observations) -> np.ndarray:
        """Most probable state path for the observation sequence."""
        return viterbi_decode(self, observations).path

    def fit(self, observations, max_iterations: Optional[int] = None,
            log_base: Optional[float] = None):
        """
        Re-estimate this model's parameters from one observation sequence.

        The trainer works on a private copy; the trained parameters are
        written back here once training finishes.

        Returns:
            TrainingResult describing the run
        """
        from ..train.trainer import BaumWelchTrainer

        trainer = BaumWelchTrainer(max_iterations=max_iterations, log_base=log_base)
        result = trainer.fit(self, observations)

        self.pi, self.A, self.B = result.model.get_parameters()
        return result

    def __repr__(self) -> str:
        """String representation of the HMM."""
        return f"DiscreteHMM(n_states={self.n_states}, n_observations={self.n_observations})"
