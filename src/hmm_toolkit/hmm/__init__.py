"""
Hidden Markov Model module.

Discrete HMM with forward, scaled forward/backward, Viterbi and occupancy passes.
"""

from .forward import ScaledForwardResult, forward_matrix, forward_pass, scaled_forward_pass, log_likelihood
from .backward import scaled_backward_pass
from .viterbi import ViterbiResult, viterbi_decode
from .occupancy import OccupancyStatistics, compute_occupancy
from .model import DiscreteHMM

__all__ = [
    "DiscreteHMM",
    "ScaledForwardResult",
    "forward_matrix",
    "forward_pass",
    "scaled_forward_pass",
    "log_likelihood",
    "scaled_backward_pass",
    "ViterbiResult",
    "viterbi_decode",
    "OccupancyStatistics",
    "compute_occupancy"
]
