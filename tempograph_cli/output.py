"""Shared output formatting with ASCII boxes. NO class - just functions."""

import click

BOX_WIDTH = 60


def _truncate(text: str, max_len: int = 50) -> str:
    """Truncate text with ellipsis if too long."""
    return text[:max_len-3] + "..." if len(text) > max_len else text


def success_box(title: str, rows: list[tuple[str, str]], next_cmd: str) -> None:
    """Print success box with Next: suggestion."""
    click.echo(f"╭─ {title} " + "─" * (BOX_WIDTH - len(title) - 4) + "╮")
    for label, value in rows:
        line = f"│ {label}: {_truncate(str(value), BOX_WIDTH - len(label) - 6)}"
        click.echo(line + " " * (BOX_WIDTH - len(line)) + "│")
    click.echo("╰" + "─" * (BOX_WIDTH - 1) + "╯")
    click.echo(f"Next: {next_cmd}")


def error_box(title: str, message: str, fix_cmd: str | None = None) -> None:
    """Print error box with optional fix suggestion."""
    message = _truncate(message, BOX_WIDTH - 4)
    click.echo(f"╭─ {title} " + "─" * (BOX_WIDTH - len(title) - 4) + "╮")
    click.echo(f"│ {message}" + " " * (BOX_WIDTH - len(message) - 3) + "│")
    click.echo("╰" + "─" * (BOX_WIDTH - 1) + "╯")
    if fix_cmd:
        click.echo(f"Fix: {fix_cmd}")
