"""
Main CLI application for HMM Toolkit.

Each command reads the model (and observation sequence) as encoded lines
from a file or stdin and writes its result to stdout:

    distribution  A, B, pi       -> pi . A . B
    evaluate      A, B, pi, obs  -> probability of obs
    decode        A, B, pi, obs  -> most likely state path
    learn         A, B, pi, obs  -> re-estimated A and B
"""

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_config, load_config_file
from ..io.codec import (
    format_matrix,
    format_probability,
    format_state_path,
    parse_model_lines
)
from ..logger import get_logger, set_log_level
from ..train.trainer import BaumWelchTrainer, TrainingResult
from .errors import ConfigurationError, InputError, handle_cli_error

err_console = Console(stderr=True)
logger = get_logger(__name__)

app = typer.Typer(
    name="hmm-toolkit",
    help="Evaluate, decode and train discrete Hidden Markov Models",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

INPUT_HELP = "Input file with one encoded matrix or sequence per line (default: stdin)"


def _read_lines(input_file: Optional[Path]) -> List[str]:
    if input_file is None or str(input_file) == "-":
        return typer.get_text_stream("stdin").read().splitlines()

    try:
        return input_file.read_text().splitlines()
    except OSError as e:
        raise InputError(
            f"Cannot read input file {input_file}: {e}",
            suggestions=[f"Check that {input_file} exists and is readable"]
        )


def _is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("debug"))


def _precision(precision: Optional[int]) -> Optional[int]:
    return precision if precision is not None else get_config('io', 'float_precision')


@app.command("distribution")
def distribution(
    ctx: typer.Context,
    input_file: Optional[Path] = typer.Argument(None, help=INPUT_HELP),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", help="Round output to this many decimals")
):
    """Emission distribution after one transition: pi . A . B."""
    try:
        model, _ = parse_model_lines(_read_lines(input_file), with_observations=False)
        typer.echo(format_matrix(model.emission_distribution(), _precision(precision)))
    except Exception as e:
        handle_cli_error(e, "distribution", _is_debug(ctx))


@app.command("evaluate")
def evaluate(
    ctx: typer.Context,
    input_file: Optional[Path] = typer.Argument(None, help=INPUT_HELP),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", help="Round output to this many decimals")
):
    """Probability of the observation sequence (forward pass)."""
    try:
        model, observations = parse_model_lines(_read_lines(input_file))
        typer.echo(format_probability(model.probability(observations), _precision(precision)))
    except Exception as e:
        handle_cli_error(e, "evaluate", _is_debug(ctx))


@app.command("decode")
def decode(
    ctx: typer.Context,
    input_file: Optional[Path] = typer.Argument(None, help=INPUT_HELP)
):
    """Most likely hidden state sequence (Viterbi)."""
    try:
        model, observations = parse_model_lines(_read_lines(input_file))
        typer.echo(format_state_path(model.decode(observations)))
    except Exception as e:
        handle_cli_error(e, "decode", _is_debug(ctx))


def _history_table(result: TrainingResult) -> Table:
    table = Table(title="Baum-Welch Training")
    table.add_column("Iteration", justify="right")
    table.add_column("Log-likelihood", justify="right")
    table.add_column("Improvement", justify="right")

    previous = None
    for iteration, log_prob in enumerate(result.log_likelihood_history, start=1):
        improvement = "-" if previous is None else f"{log_prob - previous:.6f}"
        table.add_row(str(iteration), f"{log_prob:.6f}", improvement)
        previous = log_prob

    return table


@app.command("learn")
def learn(
    ctx: typer.Context,
    input_file: Optional[Path] = typer.Argument(None, help=INPUT_HELP),
    max_iterations: Optional[int] = typer.Option(
        None, "--max-iter", "-i", help="Maximum Baum-Welch iterations (default: 100)"
    ),
    log_base: Optional[float] = typer.Option(
        None, "--log-base", help="Logarithm base for the log-likelihood (default: e)"
    ),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", help="Round output to this many decimals"),
    show_history: bool = typer.Option(
        False, "--show-history", help="Print the per-iteration log-likelihood to stderr"
    )
):
    """Re-estimate A and B from the observation sequence (Baum-Welch)."""
    try:
        model, observations = parse_model_lines(_read_lines(input_file))

        trainer = BaumWelchTrainer(max_iterations=max_iterations, log_base=log_base)
        result = trainer.fit(model, observations)

        if show_history:
            err_console.print(_history_table(result))
            status = "converged" if result.converged else "reached the iteration cap"
            err_console.print(f"[dim]{result.iterations} iterations, {status}[/dim]")

        digits = _precision(precision)
        typer.echo(format_matrix(result.model.A, digits))
        typer.echo(format_matrix(result.model.B, digits))
    except Exception as e:
        handle_cli_error(e, "learn", _is_debug(ctx))


@app.command("version")
def show_version():
    """Show HMM Toolkit version information."""
    from .. import __version__

    Console().print(Panel.fit(
        f"[bold]HMM Toolkit Version {__version__}[/bold]\n"
        f"Discrete Hidden Markov Model evaluation, decoding and training\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all log output except errors"),
    debug: bool = typer.Option(False, "--debug", help="Show detailed error traces"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to JSON configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False
    )
):
    """
    HMM Toolkit: discrete Hidden Markov Models

    \b
    Input is line oriented: A, B and pi as 'rows cols v_1 ... v_n',
    followed by the observation sequence as 'T v_1 ... v_T'.
    """
    ctx.obj = {"verbose": verbose, "quiet": quiet, "debug": debug}

    if config_file:
        try:
            load_config_file(str(config_file))
        except ValueError as e:
            handle_cli_error(ConfigurationError(str(e)), "configuration", debug)

    if quiet:
        set_log_level('ERROR')
    elif verbose or debug:
        set_log_level('DEBUG')
    else:
        set_log_level(get_config('logging', 'level') or 'WARNING')

    logger.debug(f"CLI options: verbose={verbose}, quiet={quiet}, debug={debug}, config={config_file}")


def cli_main():
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
