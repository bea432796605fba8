"""
Test configuration and fixtures for HMM Toolkit.

This file contains pytest configuration and shared fixtures
for testing the HMM Toolkit package.
"""

import itertools
import tempfile
from pathlib import Path

import numpy as np
import pytest

from hmm_toolkit.config import reset_config
from hmm_toolkit.hmm.model import DiscreteHMM


@pytest.fixture(autouse=True)
def restore_config():
    """Reset global configuration after every test."""
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def two_state_model():
    """Two states, two symbols."""
    A = np.array([[0.6, 0.4],
                  [0.3, 0.7]])
    B = np.array([[0.7, 0.3],
                  [0.2, 0.8]])
    pi = np.array([0.6, 0.4])
    return DiscreteHMM(A, B, pi)


@pytest.fixture
def observations():
    return np.array([0, 1, 0])


@pytest.fixture
def random_model():
    """Factory for seeded random models."""
    def _make(n_states, n_observations, seed):
        return DiscreteHMM.random(n_states, n_observations, random_state=seed)
    return _make


def _path_probability(model, path, observations):
    prob = model.pi[path[0]] * model.B[path[0], observations[0]]
    for t in range(1, len(observations)):
        prob *= model.A[path[t - 1], path[t]] * model.B[path[t], observations[t]]
    return prob


def _enumerate_paths(model, observations):
    """All N^T state paths with their joint probability."""
    T = len(observations)
    return [
        (path, _path_probability(model, path, observations))
        for path in itertools.product(range(model.n_states), repeat=T)
    ]


@pytest.fixture
def path_oracle():
    """Brute-force reference computations over every state path."""
    class Oracle:
        enumerate_paths = staticmethod(_enumerate_paths)
        path_probability = staticmethod(_path_probability)

        @staticmethod
        def sequence_probability(model, observations):
            return sum(prob for _, prob in _enumerate_paths(model, observations))

        @staticmethod
        def best_path(model, observations):
            return max(_enumerate_paths(model, observations), key=lambda item: item[1])

        @staticmethod
        def state_posterior(model, observations):
            T = len(observations)
            posterior = np.zeros((model.n_states, T))
            total = 0.0
            for path, prob in _enumerate_paths(model, observations):
                total += prob
                for t, state in enumerate(path):
                    posterior[state, t] += prob
            return posterior / total

    return Oracle()


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
