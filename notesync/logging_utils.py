"""
logging_utils.py

Console output helpers shared by the CLI and the sync orchestrator.

The project does not use a logging framework. Every line goes through
Typer's echo so that output stays predictable under CliRunner and in CI
logs: per-item events on stdout, per-item failures on stderr, and
progress chatter only when --verbose is set.
"""

import typer


def log_event(message: str) -> None:
    """Print a per-item event (created, updated, archived) or summary line."""
    typer.echo(message)


def log_error(message: str) -> None:
    """Print a failure message to stderr."""
    typer.echo(message, err=True)


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high-level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Short, plain-English description of what the sync is doing
        (e.g., "Scanning Notion database...").

    verbose : bool
        Whether verbose mode is active. When False, this function does
        nothing.
    """
    if verbose:
        typer.echo(message)
