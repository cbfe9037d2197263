"""Command-line interface for texvoice.

Responsibilities:
- Expose user-facing commands for pipeline operations.
- Convert CLI arguments and YAML defaults into `TexvoiceConfig`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_marker_warnings,
    echo_section_list,
    echo_section_summary,
    exit_with_command_error,
)
from .config import ConfigLoader, TexvoiceConfig
from .errors import PipelineStageError
from .io.document_reader import DocumentReader
from .pipeline import TexvoicePipeline
from .telemetry.logger import RunLogger
from .text.formatter import NarrationFormatter

app = typer.Typer(
    name="texvoice",
    no_args_is_help=True,
    help="texvoice CLI: LaTeX to narration-ready text sections.",
)


class BuildProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _load_yaml_config(config_path: Path | None) -> TexvoiceConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    input_tex: Path | None,
    out: Path | None = None,
    speed: int | None = None,
    bitrate: str | None = None,
    voice: str | None = None,
    audio: bool | None = None,
    keep_intermediates: bool | None = None,
    section_prefix: str | None = None,
) -> TexvoiceConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded = _load_yaml_config(config_file) or TexvoiceConfig(input_tex=None)

    return TexvoiceConfig(
        input_tex=input_tex if input_tex is not None else loaded.input_tex,
        output_dir=out if out is not None else loaded.output_dir,
        speed=speed if speed is not None else loaded.speed,
        bitrate=bitrate if bitrate is not None else loaded.bitrate,
        voice=voice if voice is not None else loaded.voice,
        synthesize_audio=audio if audio is not None else loaded.synthesize_audio,
        keep_intermediates=(
            keep_intermediates if keep_intermediates is not None else loaded.keep_intermediates
        ),
        section_prefix=section_prefix if section_prefix is not None else loaded.section_prefix,
        extra_abbreviations=loaded.extra_abbreviations,
        case_sensitive_abbreviations=loaded.case_sensitive_abbreviations,
        extra=dict(loaded.extra),
    )


def _confirm_audio() -> bool:
    """Ask whether section audio should be generated; no answer means no."""

    try:
        return typer.confirm("Generate audio files for the written sections?", default=False)
    except typer.Abort:
        typer.echo()
        return False


@app.command("build")
def build_command(
    input_tex: Annotated[
        Path | None,
        typer.Argument(
            help="Path to the LaTeX source. Required unless provided by `--config`.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to YAML config file with command defaults.",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option(
            "--out",
            help="Output directory (defaults to `output_YYYY-MM-DD_HH-MM`).",
        ),
    ] = None,
    speed: Annotated[
        int | None,
        typer.Option("--speed", help="Speech rate in words per minute (default 175)."),
    ] = None,
    bitrate: Annotated[
        str | None,
        typer.Option("--bitrate", help="MP3 bitrate passed to ffmpeg (default `256k`)."),
    ] = None,
    voice: Annotated[
        str | None,
        typer.Option("--voice", help="Voice name passed to `say -v`."),
    ] = None,
    audio: Annotated[
        bool | None,
        typer.Option(
            "--audio/--no-audio",
            help="Generate audio per section. Asks interactively when omitted.",
        ),
    ] = None,
    keep_intermediates: Annotated[
        bool | None,
        typer.Option(
            "--keep-intermediates/--no-keep-intermediates",
            help="Keep cleaned LaTeX, plain and formatted text artifacts.",
        ),
    ] = None,
    section_prefix: Annotated[
        str | None,
        typer.Option("--section-prefix", help="Filename prefix of section files."),
    ] = None,
) -> None:
    """Run the full pipeline."""

    try:
        config = _resolve_command_config(
            config_file=config_file,
            input_tex=input_tex,
            out=out,
            speed=speed,
            bitrate=bitrate,
            voice=voice,
            audio=audio,
            keep_intermediates=keep_intermediates,
            section_prefix=section_prefix,
        )
        progress = BuildProgressIndicator(command_name="build")
        pipeline = TexvoicePipeline(
            run_logger=RunLogger(),
            stage_progress_callback=progress.on_stage_start,
        )
        manifest = pipeline.run(config, confirm_audio=_confirm_audio)
    except Exception as exc:
        exit_with_command_error("build", exc)

    typer.echo(f"Run id: {manifest.run_id}")
    typer.echo(f"Output directory: {manifest.output_dir}")
    typer.echo(f"Manifest: {manifest.extra.get('manifest_path', '(not written)')}")
    echo_section_summary(manifest)


@app.command("sections")
def sections_command(
    input_tex: Annotated[Path, typer.Argument(help="Path to the LaTeX source.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with abbreviation settings."),
    ] = None,
) -> None:
    """List section indices and titles without writing files."""

    try:
        config = _resolve_command_config(config_file=config_file, input_tex=input_tex)
        report = TexvoicePipeline().list_sections(config)
    except Exception as exc:
        exit_with_command_error("sections", exc)

    echo_section_list(report.buffers)
    echo_marker_warnings(report.warnings)


@app.command("format")
def format_command(
    input_txt: Annotated[Path, typer.Argument(help="Path to plain text to format.")],
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write formatted text here instead of stdout."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with abbreviation settings."),
    ] = None,
) -> None:
    """Run only the narration formatter over an existing plain-text file."""

    try:
        config = _resolve_command_config(config_file=config_file, input_tex=input_txt)
        abbreviations = config.abbreviations()
        document = DocumentReader().read(input_txt)
        formatted = NarrationFormatter(abbreviations=abbreviations).format(document.text)
        if out is not None:
            try:
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_text(formatted, encoding="utf-8")
            except OSError as exc:
                raise PipelineStageError(
                    stage="write",
                    detail=f"Cannot write `{out}`: {exc}",
                    hint="Choose a writable `--out` path.",
                ) from exc
    except Exception as exc:
        exit_with_command_error("format", exc)

    if out is None:
        typer.echo(formatted, nl=False)
    else:
        typer.echo(f"Formatted text: {out}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
