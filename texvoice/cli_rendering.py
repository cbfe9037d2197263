"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
written section summaries, and section listing rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import MarkerStreamWarning, RunManifest, SectionBuffer


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
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


def echo_section_summary(manifest: RunManifest) -> None:
    """Print written sections, discarded buffers, and audio outputs."""

    typer.echo(f"Sections written: {len(manifest.sections)}")
    for section in manifest.sections:
        typer.echo(f"  {section.path.name}: {section.title or '(untitled)'}")
    if manifest.discarded_sections:
        discarded = ", ".join(str(index) for index in manifest.discarded_sections)
        typer.echo(f"Empty sections discarded: {discarded}")
    if manifest.audio:
        typer.echo(f"Audio files: {len(manifest.audio)}")
    if manifest.warnings:
        typer.echo(f"Marker warnings: {len(manifest.warnings)}")


def echo_section_list(buffers: Sequence[SectionBuffer]) -> None:
    """Print compact deterministic section index/title rows."""

    for buffer in sorted(buffers, key=lambda item: item.index):
        if buffer.index == 0:
            label = "(before first section)"
        else:
            label = buffer.title or "(untitled)"
        suffix = " [empty]" if buffer.is_empty else ""
        typer.echo(f"{buffer.index}. {label}{suffix}")


def echo_marker_warnings(warnings: Sequence[MarkerStreamWarning]) -> None:
    """Print malformed marker stream warnings in yellow."""

    for warning in warnings:
        typer.secho(f"Warning: {warning.describe()}", fg=typer.colors.YELLOW, err=True)
