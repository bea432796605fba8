"""
Error handling for CLI commands.

Maps library exceptions to exit codes and prints them with Rich formatting.
"""

import traceback
from typing import Optional
import logging

import typer
from rich.console import Console
from rich.markup import escape

from ..exceptions import (
    HMMError,
    ParseError,
    DimensionMismatchError,
    InvalidDistributionError,
    DegenerateDistributionError,
    DecodingError
)

err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


# Exit codes for different error types
EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "invalid_usage": 2,
    "parse_error": 10,
    "dimension_error": 11,
    "distribution_error": 12,
    "degenerate_error": 13,
    "decoding_error": 14,
    "config_error": 20
}


class HMMCLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


class InputError(HMMCLIError):
    """Input could not be read."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["invalid_usage"], suggestions)


class ConfigurationError(HMMCLIError):
    """Configuration errors."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["config_error"], suggestions)


# Checked in order, so subclasses must precede their bases
_LIBRARY_ERRORS = [
    (ParseError, "parse_error", [
        "Matrices are encoded as 'rows cols v_1 ... v_n' on one line",
        "Sequences are encoded as 'T v_1 ... v_T' on one line"
    ]),
    (DimensionMismatchError, "dimension_error", [
        "A must be N x N, B must have N rows and pi must have N entries",
        "Observation symbols must lie in [0, M) where M is the number of columns of B"
    ]),
    (InvalidDistributionError, "distribution_error", [
        "Every row of A and B, and pi, must be non-negative and sum to 1"
    ]),
    (DegenerateDistributionError, "degenerate_error", [
        "The model gives the observations zero probability; check B for zero columns"
    ]),
    (DecodingError, "decoding_error", [
        "No state path can produce the observations under this model"
    ]),
]


def exit_code_for(error: Exception) -> int:
    """Exit code for an exception raised by a command."""
    if isinstance(error, HMMCLIError):
        return error.exit_code

    for error_type, code_name, _ in _LIBRARY_ERRORS:
        if isinstance(error, error_type):
            return EXIT_CODES[code_name]

    return EXIT_CODES["general_error"]


def suggestions_for(error: Exception) -> list:
    if isinstance(error, HMMCLIError):
        return error.suggestions

    for error_type, _, suggestions in _LIBRARY_ERRORS:
        if isinstance(error, error_type):
            return suggestions

    return []


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    error_type = type(error).__name__

    message_parts = [
        f"[red]Error during {operation}:[/red]",
        f"[red]{error_type}: {escape(str(error))}[/red]"
    ]

    suggestions = suggestions_for(error)
    if suggestions:
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in suggestions:
            message_parts.append(f"  • {escape(suggestion)}")

    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{escape(traceback.format_exc())}[/dim]")

    return "\n".join(message_parts)


def handle_cli_error(error: Exception, operation: str, debug: bool = False) -> None:
    """Handle CLI errors with rich formatting and exit with the mapped code."""
    exit_code = exit_code_for(error)

    err_console.print(format_error_message(error, operation, debug))
    err_console.print(f"\n[dim]For more help, run: hmm-toolkit {operation.split()[0]} --help[/dim]")

    if isinstance(error, HMMError):
        logger.debug(f"CLI error in {operation}: {error}", exc_info=debug)
    else:
        logger.error(f"CLI error in {operation}: {error}", exc_info=debug)

    raise typer.Exit(exit_code)
