"""
Input/output module.

Text encoding of matrices, sequences and decoded state paths.
"""

from .codec import (
    parse_matrix,
    format_matrix,
    parse_sequence,
    format_sequence,
    format_state_path,
    format_probability,
    parse_model_lines
)

__all__ = [
    "parse_matrix",
    "format_matrix",
    "parse_sequence",
    "format_sequence",
    "format_state_path",
    "format_probability",
    "parse_model_lines"
]
