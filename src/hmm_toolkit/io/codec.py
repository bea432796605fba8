"""
Line-oriented text encoding of matrices and integer sequences.

- matrix:   ``rows cols v_1 ... v_{rows*cols}`` (row-major)
- sequence: ``T v_1 ... v_T``
- state path output: each value followed by a single space

Floats are written with ``repr`` by default so that parsing the output
gives back exactly the same values.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import ParseError
from ..hmm.model import DiscreteHMM


def _format_float(value: float, precision: Optional[int] = None) -> str:
    value = float(value)
    if precision is not None:
        value = round(value, precision)
    return repr(value)


def parse_matrix(text: str) -> np.ndarray:
    """
    Parse a matrix line.

    Args:
        text: ``rows cols v_1 ... v_{rows*cols}``

    Returns:
        Matrix as a float array of shape (rows, cols)

    Raises:
        ParseError: If the header or the number of values is invalid
    """
    tokens = text.split()
    if len(tokens) < 2:
        raise ParseError(f"Matrix line needs 'rows cols' header, got: {text!r}")

    try:
        rows, cols = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise ParseError(f"Matrix dimensions must be integers, got {tokens[0]!r} {tokens[1]!r}")

    if rows < 0 or cols < 0:
        raise ParseError(f"Matrix dimensions must be non-negative, got {rows}x{cols}")

    values = tokens[2:]
    if len(values) != rows * cols:
        raise ParseError(f"Expected {rows * cols} values for a {rows}x{cols} matrix, got {len(values)}")

    try:
        data = np.array([float(v) for v in values], dtype=np.float64)
    except ValueError as e:
        raise ParseError(f"Invalid matrix value: {e}")

    return data.reshape(rows, cols)


def format_matrix(matrix, precision: Optional[int] = None) -> str:
    """
    Encode a matrix as a single line.

    A 1-D array is written as a 1 x N matrix.

    Args:
        matrix: 1-D or 2-D array
        precision: Round values to this many decimals (default: exact repr)
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim == 1:
        matrix = matrix.reshape(1, -1)
    if matrix.ndim != 2:
        raise ValueError(f"Only 1-D or 2-D arrays can be encoded, got {matrix.ndim}-D")

    rows, cols = matrix.shape
    parts = [str(rows), str(cols)]
    parts.extend(_format_float(v, precision) for v in matrix.ravel())
    return " ".join(parts)


def parse_sequence(text: str) -> np.ndarray:
    """
    Parse an integer sequence line ``T v_1 ... v_T``.

    Raises:
        ParseError: If the count or any value is not an integer, or the count
            does not match the number of values
    """
    tokens = text.split()
    if not tokens:
        raise ParseError("Sequence line is empty")

    try:
        values = [int(v) for v in tokens]
    except ValueError as e:
        raise ParseError(f"Invalid sequence value: {e}")

    length, values = values[0], values[1:]
    if length != len(values):
        raise ParseError(f"Sequence declares {length} values but contains {len(values)}")

    return np.array(values, dtype=np.int64)


def format_sequence(sequence: Sequence[int]) -> str:
    """Encode an integer sequence as ``T v_1 ... v_T``."""
    values = [str(int(v)) for v in sequence]
    return " ".join([str(len(values))] + values)


def format_state_path(path: Sequence[int]) -> str:
    """Encode a decoded state path: no count, a space after every value."""
    return "".join(f"{int(state)} " for state in path)


def format_probability(probability: float, precision: Optional[int] = None) -> str:
    """Encode a scalar probability."""
    return _format_float(probability, precision)


def parse_model_lines(lines: Iterable[str],
                      with_observations: bool = True) -> Tuple[DiscreteHMM, Optional[np.ndarray]]:
    """
    Build a model (and optionally an observation sequence) from input lines.

    Blank lines are ignored. The first three lines are A, B and pi (a 1 x N
    matrix); the fourth, when requested, is the observation sequence.

    Args:
        lines: Input text lines
        with_observations: Whether a sequence line must follow pi

    Returns:
        Tuple of (model, observations); observations is None when not requested

    Raises:
        ParseError: If lines are missing or malformed
        DimensionMismatchError: If the matrices disagree in size
        InvalidDistributionError: If a row is not a probability distribution
    """
    content: List[str] = [line.strip() for line in lines if line.strip()]
    expected = 4 if with_observations else 3
    if len(content) < expected:
        raise ParseError(f"Expected {expected} non-empty input lines, got {len(content)}")

    A = parse_matrix(content[0])
    B = parse_matrix(content[1])
    pi = parse_matrix(content[2])
    if pi.shape[0] != 1:
        raise ParseError(f"pi must be encoded as a 1xN matrix, got {pi.shape[0]}x{pi.shape[1]}")

    model = DiscreteHMM(A, B, pi.ravel())

    observations = parse_sequence(content[3]) if with_observations else None
    return model, observations
