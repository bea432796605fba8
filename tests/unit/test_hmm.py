"""
Unit tests for the HMM module.

Tests for the DiscreteHMM class and its methods.
"""

import numpy as np
import pytest

from hmm_toolkit.exceptions import DimensionMismatchError, InvalidDistributionError
from hmm_toolkit.hmm.model import DiscreteHMM


class TestDiscreteHMM:
    """Test cases for the DiscreteHMM class."""

    def test_initialization(self, two_state_model):
        """Test HMM initialization from explicit parameters."""
        assert two_state_model.n_states == 2
        assert two_state_model.n_observations == 2
        assert two_state_model.pi.shape == (2,)
        assert two_state_model.A.shape == (2, 2)
        assert two_state_model.B.shape == (2, 2)

    def test_random_initialization(self):
        """Random models are row-stochastic within 1e-9."""
        hmm = DiscreteHMM.random(n_states=5, n_observations=10, random_state=0)

        assert hmm.A.shape == (5, 5)
        assert hmm.B.shape == (5, 10)
        assert abs(hmm.pi.sum() - 1.0) < 1e-9
        assert np.all(np.abs(hmm.A.sum(axis=1) - 1.0) < 1e-9)
        assert np.all(np.abs(hmm.B.sum(axis=1) - 1.0) < 1e-9)

    def test_initialization_with_random_state(self):
        """Test HMM initialization with reproducible random state."""
        hmm1 = DiscreteHMM.random(n_states=3, n_observations=4, random_state=42)
        hmm2 = DiscreteHMM.random(n_states=3, n_observations=4, random_state=42)

        pi1, A1, B1 = hmm1.get_parameters()
        pi2, A2, B2 = hmm2.get_parameters()

        np.testing.assert_array_equal(pi1, pi2)
        np.testing.assert_array_equal(A1, A2)
        np.testing.assert_array_equal(B1, B2)

    @pytest.mark.parametrize("A, B, pi", [
        ([[0.5, 0.5]], [[1.0], [1.0]], [0.5, 0.5]),
        ([[0.5, 0.5], [0.5, 0.5]], [[1.0]], [0.5, 0.5]),
        ([[0.5, 0.5], [0.5, 0.5]], [[1.0], [1.0]], [1.0]),
        ([[0.5, 0.5], [0.5, 0.5]], [[1.0], [1.0]], [[0.5, 0.5]]),
    ])
    def test_dimension_mismatch(self, A, B, pi):
        with pytest.raises(DimensionMismatchError):
            DiscreteHMM(A, B, pi)

    def test_validate_stochastic_matrices(self, two_state_model):
        """Test stochastic matrix validation."""
        assert two_state_model.validate_stochastic_matrices() is True

        two_state_model.pi[0] = -0.1
        with pytest.raises(InvalidDistributionError):
            two_state_model.validate_stochastic_matrices()

    def test_rows_must_sum_to_one(self):
        with pytest.raises(InvalidDistributionError):
            DiscreteHMM([[0.5, 0.4], [0.5, 0.5]], [[1.0], [1.0]], [0.5, 0.5])

        with pytest.raises(InvalidDistributionError):
            DiscreteHMM([[0.5, 0.5], [0.5, 0.5]], [[0.9, 0.0], [0.5, 0.5]], [0.5, 0.5])

        # Validation can be skipped
        hmm = DiscreteHMM([[0.5, 0.4], [0.5, 0.5]], [[1.0], [1.0]], [0.5, 0.5], validate=False)
        assert hmm.n_states == 2

    def test_validation_tolerance(self):
        hmm = DiscreteHMM([[0.5, 0.5 + 1e-8], [0.5, 0.5]], [[1.0], [1.0]], [0.5, 0.5])
        with pytest.raises(InvalidDistributionError):
            hmm.validate_stochastic_matrices(tolerance=1e-10)

    def test_four_decimal_rounding_is_accepted(self):
        third = [0.3333, 0.3333, 0.3333]
        hmm = DiscreteHMM([third, third, third], [[0.5, 0.5]] * 3, third)
        assert hmm.n_states == 3

        with pytest.raises(InvalidDistributionError):
            DiscreteHMM([third, third, third], [[0.5, 0.5]] * 3, [0.33, 0.33, 0.33])

    def test_get_parameters_returns_copies(self, two_state_model):
        pi, A, B = two_state_model.get_parameters()
        A[0, 0] = 0.0
        pi[0] = 0.0
        assert two_state_model.A[0, 0] == 0.6
        assert two_state_model.pi[0] == 0.6

    def test_get_set_parameters(self):
        """Test parameter getting and setting."""
        hmm = DiscreteHMM.random(n_states=3, n_observations=4, random_state=42)

        new_pi = np.array([0.5, 0.3, 0.2])
        new_A = np.array([[0.7, 0.2, 0.1],
                          [0.1, 0.8, 0.1],
                          [0.2, 0.3, 0.5]])
        new_B = np.array([[0.8, 0.1, 0.05, 0.05],
                          [0.1, 0.8, 0.05, 0.05],
                          [0.05, 0.05, 0.8, 0.1]])

        hmm.set_parameters(new_pi, new_A, new_B)
        current_pi, current_A, current_B = hmm.get_parameters()

        np.testing.assert_array_almost_equal(current_pi, new_pi)
        np.testing.assert_array_almost_equal(current_A, new_A)
        np.testing.assert_array_almost_equal(current_B, new_B)

    def test_set_parameters_rejects_invalid(self, two_state_model):
        original = two_state_model.get_parameters()

        with pytest.raises(DimensionMismatchError):
            two_state_model.set_parameters([1.0], [[1.0]], [[1.0]])

        with pytest.raises(InvalidDistributionError):
            two_state_model.set_parameters([0.9, 0.9], two_state_model.A, two_state_model.B)

        for before, after in zip(original, two_state_model.get_parameters()):
            np.testing.assert_array_equal(before, after)

    def test_check_observations(self, two_state_model):
        obs = two_state_model.check_observations([0, 1, 1])
        assert obs.dtype.kind == 'i'

        for invalid in ([], [0, 2], [-1], [0.0, 1.0], [[0, 1]]):
            with pytest.raises(DimensionMismatchError):
                two_state_model.check_observations(invalid)

    def test_emission_distribution(self, two_state_model):
        expected = two_state_model.pi @ two_state_model.A @ two_state_model.B
        dist = two_state_model.emission_distribution()

        assert dist.shape == (1, 2)
        np.testing.assert_allclose(dist[0], expected)
        assert abs(dist.sum() - 1.0) < 1e-12

    def test_copy_is_independent(self, two_state_model):
        clone = two_state_model.copy()
        clone.A[0, 0] = 0.0
        assert two_state_model.A[0, 0] == 0.6

    def test_score_and_probability(self, two_state_model, observations):
        """log of probability() equals score()."""
        assert two_state_model.score(observations) == pytest.approx(
            np.log(two_state_model.probability(observations))
        )

    def test_invalid_observations(self):
        """Test handling of invalid observations."""
        hmm = DiscreteHMM.random(n_states=3, n_observations=4, random_state=42)
        invalid_obs = np.array([0, 1, 5, 1])

        with pytest.raises(DimensionMismatchError):
            hmm.score(invalid_obs)

        with pytest.raises(DimensionMismatchError):
            hmm.probability(invalid_obs)

        with pytest.raises(ValueError):
            hmm.decode(invalid_obs)

    def test_fit_updates_model_in_place(self):
        hmm = DiscreteHMM.random(n_states=2, n_observations=3, random_state=1)
        before = hmm.get_parameters()

        result = hmm.fit([0, 1, 2, 1, 0, 0, 2], max_iterations=5)

        assert 1 <= result.iterations <= 5
        np.testing.assert_array_equal(hmm.A, result.model.A)
        np.testing.assert_array_equal(hmm.B, result.model.B)
        assert not np.array_equal(hmm.B, before[2])

    def test_repr(self, two_state_model):
        assert repr(two_state_model) == "DiscreteHMM(n_states=2, n_observations=2)"
