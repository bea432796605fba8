"""
HMM Toolkit: discrete Hidden Markov Models

Evaluation (forward pass), decoding (Viterbi) and learning (Baum-Welch)
for HMMs over discrete observation symbols.
"""

__version__ = "0.1.0"
__author__ = "HMM Toolkit Development Team"

from .config import get_config, set_config
from .logger import get_logger
from .exceptions import (
    HMMError,
    DimensionMismatchError,
    InvalidDistributionError,
    DegenerateDistributionError,
    DecodingError,
    ParseError
)
from .hmm import DiscreteHMM
from .train import BaumWelchTrainer, TrainingResult

__all__ = [
    "get_config",
    "set_config",
    "get_logger",
    "HMMError",
    "DimensionMismatchError",
    "InvalidDistributionError",
    "DegenerateDistributionError",
    "DecodingError",
    "ParseError",
    "DiscreteHMM",
    "BaumWelchTrainer",
    "TrainingResult",
    "__version__"
]
