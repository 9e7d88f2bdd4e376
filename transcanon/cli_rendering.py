"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
fingerprint summaries, and reconciled output.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer

from .errors import ContentStageError
from .models.output import output_to_payload, render_text


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ContentStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_fingerprint(fingerprint: str, data_format: str, node_count: int) -> None:
    """Print the fingerprint with the format and node count it was computed over."""

    typer.echo(f"Fingerprint: {fingerprint or '(static: never fetched)'}")
    typer.echo(f"Data format: {data_format}")
    typer.echo(f"Structural nodes: {node_count}")


def echo_json(payload: Any) -> None:
    """Print a JSON document with stable key order."""

    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def echo_rendered_output(output: Any, as_json: bool) -> None:
    """Print reconciled output as plain text or as a JSON output tree."""

    if as_json:
        echo_json(output_to_payload(output))
        return
    typer.echo(render_text(output))
