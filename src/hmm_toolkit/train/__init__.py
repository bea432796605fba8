"""
Training module.

Baum-Welch re-estimation of discrete HMM parameters.
"""

from .reestimate import reestimate
from .trainer import BaumWelchTrainer, TrainingResult

__all__ = [
    "BaumWelchTrainer",
    "TrainingResult",
    "reestimate"
]
