"""Output utilities for CLI commands with clear intent."""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a message meant for a human to stderr."""
    click.echo(message, err=True, nl=nl)
