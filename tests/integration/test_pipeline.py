"""
End-to-end test: encode a model, train on sampled data, decode and evaluate.
"""

import numpy as np
import pytest

from hmm_toolkit.hmm.model import DiscreteHMM
from hmm_toolkit.io.codec import format_matrix, format_sequence, parse_model_lines


def sample_sequence(model, length, seed):
    rng = np.random.default_rng(seed)
    state = rng.choice(model.n_states, p=model.pi)
    symbols = []
    for _ in range(length):
        symbols.append(rng.choice(model.n_observations, p=model.B[state]))
        state = rng.choice(model.n_states, p=model.A[state])
    return np.array(symbols)


@pytest.mark.integration
def test_train_decode_evaluate():
    truth = DiscreteHMM(
        [[0.9, 0.1], [0.2, 0.8]],
        [[0.8, 0.1, 0.1], [0.1, 0.2, 0.7]],
        [0.5, 0.5]
    )
    obs = sample_sequence(truth, 500, seed=11)

    initial = DiscreteHMM(
        [[0.6, 0.4], [0.45, 0.55]],
        [[0.4, 0.3, 0.3], [0.3, 0.3, 0.4]],
        [0.55, 0.45]
    )
    lines = [format_matrix(initial.A), format_matrix(initial.B),
             format_matrix(initial.pi), format_sequence(obs)]
    model, parsed_obs = parse_model_lines(lines)
    np.testing.assert_array_equal(parsed_obs, obs)

    initial_score = model.score(obs)
    result = model.fit(obs)

    assert result.iterations <= 100
    assert model.score(obs) > initial_score
    assert model.validate_stochastic_matrices(tolerance=1e-9)

    assert np.isfinite(model.score(obs))

    path = model.decode(obs)
    assert path.shape == obs.shape
    assert set(np.unique(path)) <= {0, 1}
