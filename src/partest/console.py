"""Console output helpers shared by the runner and reporters."""
from __future__ import annotations

import click


def info(message: str, *, use_color: bool = True) -> None:
    click.echo(click.style(message, fg="cyan") if use_color else message)


def warn(message: str, *, use_color: bool = True) -> None:
    text = f"Warning: {message}"
    click.echo(click.style(text, fg="yellow") if use_color else text, err=True)


def error(message: str, *, use_color: bool = True) -> None:
    text = f"Error: {message}"
    click.echo(click.style(text, fg="red") if use_color else text, err=True)
