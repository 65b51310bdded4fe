"""Utility functions to print formatted CLI messages."""

from __future__ import annotations

import click

__all__ = ["echo_banner", "echo_item", "echo_success"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_item(label: str, value: object) -> None:
    """Echo a bullet with a label/value pair.

    Args:
        label: Short description.
        value: Anything with a useful ``str()``.
    """
    click.echo(f"  • {label}: {value}")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick.

    Args:
        text: Message to display.
    """
    click.secho(f"✓ {text}", fg="green")
