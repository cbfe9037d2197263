"""Pipeline orchestration for texvoice.

Responsibilities:
- Define the high-level stage order for the LaTeX-to-narration flow.
- Persist intermediate text, section files and optional audio per run.
- Coordinate stage outputs into a reproducible run manifest.

Key types:
- `TexvoicePipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from ..audio.synthesizer import SaySynthesizer, SpeechSynthesizer
from ..audio.transcoder import AudioTranscoder, FfmpegTranscoder
from ..config import TexvoiceConfig
from ..errors import PipelineStageError
from ..io.document_reader import DocumentReader
from ..io.pandoc_converter import PandocConverter, PlainTextConversionError
from ..io.storage import ArtifactStore
from ..models.datatypes import (
    AudioArtifact,
    InsertionReport,
    RunManifest,
    SectionArtifact,
    SectionBuffer,
    SourceDocument,
    SplitReport,
)
from ..telemetry.logger import RunLogger
from ..text.formatter import NarrationFormatter
from ..text.markers import MarkerInserter
from ..text.splitter import SectionSplitter
from .manifesting import PipelineManifestMixin
from .runtime import PipelineRuntimeMixin
from .telemetry import PipelineTelemetryMixin

CLEANED_TEX_PATH = Path("01_cleaned.tex")
PLAIN_TEXT_PATH = Path("02_plain_unformatted.txt")
FORMATTED_TEXT_PATH = Path("03_full_text_formatted.txt")
INTERMEDIATE_PATHS = (CLEANED_TEX_PATH, PLAIN_TEXT_PATH, FORMATTED_TEXT_PATH)


class TexvoicePipeline(
    PipelineRuntimeMixin,
    PipelineTelemetryMixin,
    PipelineManifestMixin,
):
    """Coordinate all stages for a single texvoice run."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
        reader: DocumentReader | None = None,
        converter: PandocConverter | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        transcoder: AudioTranscoder | None = None,
    ) -> None:
        """Initialize runtime hooks and optional stage collaborators."""

        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback
        self._reader = reader or DocumentReader()
        self._converter = converter or PandocConverter()
        self._synthesizer = synthesizer
        self._transcoder = transcoder or FfmpegTranscoder()

    def run(
        self,
        config: TexvoiceConfig,
        confirm_audio: Callable[[], bool] | None = None,
        now: datetime | None = None,
    ) -> RunManifest:
        """Execute the full pipeline and write section files under the output directory.

        `confirm_audio` is asked only when `config.synthesize_audio` is unset and
        after every text stage succeeded.
        """

        run_id, config_hash, store = self._prepare_run(config, now)

        document = self._run_stage("read", lambda: self._read(config))
        insertion = self._run_stage("markers", lambda: self._insert_markers(document, store))
        plain_text = self._run_stage("convert", lambda: self._convert(insertion.text, store))
        formatted = self._run_stage("format", lambda: self._format(plain_text, config, store))
        split_report = self._run_stage(
            "split", lambda: self._split(formatted, insertion.division_titles)
        )

        sections, discarded = self._run_stage(
            "write", lambda: self._write_sections(split_report.buffers, config, store)
        )

        audio: tuple[AudioArtifact, ...] = ()
        if self._wants_audio(config, confirm_audio):
            audio = self._run_stage(
                "synthesize", lambda: self._synthesize(sections, config)
            )

        self._run_stage("cleanup", lambda: self._cleanup(config, store, audio))

        manifest = RunManifest(
            run_id=run_id,
            source_tex=document.path,
            output_dir=store.root,
            sections=sections,
            discarded_sections=discarded,
            audio=audio,
            warnings=tuple(warning.describe() for warning in split_report.warnings),
            extra={
                "config_hash": config_hash,
                "speed": str(config.speed),
                "bitrate": config.bitrate,
                "voice": config.voice or "default",
                "division_count": str(len(insertion.division_titles)),
                "removed_environments": str(insertion.removed_environments),
                "removed_references": str(insertion.removed_references),
                "keep_intermediates": str(config.keep_intermediates).lower(),
                **config.extra,
            },
        )
        return self._run_stage("manifest", lambda: self._write_manifest(manifest, store))

    def list_sections(self, config: TexvoiceConfig) -> SplitReport:
        """Run the text stages in memory and return section buffers without writing files."""

        self._validate_config(config)
        document = self._run_stage("read", lambda: self._read(config))
        insertion = self._run_stage("markers", lambda: self._insert_markers(document))
        plain_text = self._run_stage("convert", lambda: self._convert(insertion.text))
        formatted = self._run_stage("format", lambda: self._format(plain_text, config))
        return self._run_stage(
            "split", lambda: self._split(formatted, insertion.division_titles)
        )

    def _read(self, config: TexvoiceConfig) -> SourceDocument:
        """Load the input document once."""

        return self._reader.read(config.input_tex)

    def _insert_markers(
        self,
        document: SourceDocument,
        store: ArtifactStore | None = None,
    ) -> InsertionReport:
        """Strip non-narrative markup and inject boundary markers."""

        report = MarkerInserter().insert_with_report(document.text)
        if store is not None:
            self._save_text(store, CLEANED_TEX_PATH, report.text, stage="markers")
        return report

    def _convert(self, text: str, store: ArtifactStore | None = None) -> str:
        """Delegate structural-to-plain conversion and map tool failures."""

        try:
            plain_text = self._converter.convert(text)
        except PlainTextConversionError as exc:
            raise PipelineStageError(
                stage="convert",
                detail=str(exc),
                hint="Install pandoc or point `TEXVOICE_PANDOC_BIN` at a pandoc executable.",
            ) from exc
        if store is not None:
            self._save_text(store, PLAIN_TEXT_PATH, plain_text, stage="convert")
        return plain_text

    def _format(
        self,
        plain_text: str,
        config: TexvoiceConfig,
        store: ArtifactStore | None = None,
    ) -> str:
        """Normalize the plain stream for narration."""

        formatter = NarrationFormatter(abbreviations=config.abbreviations())
        formatted = formatter.format(plain_text)
        if store is not None:
            self._save_text(store, FORMATTED_TEXT_PATH, formatted, stage="format")
        return formatted

    def _split(self, formatted: str, division_titles: tuple[str, ...]) -> SplitReport:
        """Split the formatted stream and log malformed marker observations."""

        report = SectionSplitter().split_with_report(formatted, expected_titles=division_titles)
        for warning in report.warnings:
            self._on_stage_warning("split", warning)
        return report

    def _write_sections(
        self,
        buffers: tuple[SectionBuffer, ...],
        config: TexvoiceConfig,
        store: ArtifactStore,
    ) -> tuple[tuple[SectionArtifact, ...], tuple[int, ...]]:
        """Write non-empty buffers and report discarded empty buffer indices."""

        sections: list[SectionArtifact] = []
        discarded: list[int] = []
        for buffer in buffers:
            if buffer.is_empty:
                discarded.append(buffer.index)
                continue
            relative_path = Path(f"{config.section_prefix}_{buffer.index:02d}.txt")
            path = self._save_text(store, relative_path, buffer.text, stage="write")
            sections.append(
                SectionArtifact(
                    index=buffer.index,
                    title=buffer.title,
                    path=path,
                    line_count=len(buffer.lines),
                )
            )
        return tuple(sections), tuple(discarded)

    def _save_text(
        self,
        store: ArtifactStore,
        relative_path: Path,
        content: str,
        stage: str,
    ) -> Path:
        """Write one text artifact and map filesystem failures to `stage`."""

        try:
            return store.save_text(relative_path, content)
        except OSError as exc:
            raise PipelineStageError(
                stage=stage,
                detail=f"Failed to write `{store.path_for(relative_path)}`: {exc}",
                hint="Point the output directory at a writable location, not a file.",
            ) from exc

    def _wants_audio(
        self,
        config: TexvoiceConfig,
        confirm_audio: Callable[[], bool] | None,
    ) -> bool:
        """Resolve the audio decision from config first, then the confirm hook."""

        if config.synthesize_audio is not None:
            return config.synthesize_audio
        if confirm_audio is None:
            return False
        return bool(confirm_audio())

    def _synthesize(
        self,
        sections: tuple[SectionArtifact, ...],
        config: TexvoiceConfig,
    ) -> tuple[AudioArtifact, ...]:
        """Synthesize and transcode one audio file per written section."""

        synthesizer = self._synthesizer or SaySynthesizer(voice=config.voice)
        audio: list[AudioArtifact] = []
        for section in sections:
            aiff_path = section.path.with_suffix(".aiff")
            mp3_path = section.path.with_suffix(".mp3")
            synthesizer.synthesize(section.path, aiff_path, config.speed)
            self._transcoder.transcode(aiff_path, mp3_path, config.bitrate)
            audio.append(
                AudioArtifact(
                    index=section.index,
                    path=mp3_path,
                    source_text_path=section.path,
                    bitrate=config.bitrate,
                    speed=config.speed,
                )
            )
        return tuple(audio)

    def _cleanup(
        self,
        config: TexvoiceConfig,
        store: ArtifactStore,
        audio: tuple[AudioArtifact, ...],
    ) -> None:
        """Remove AIFF files and, unless kept, intermediate text artifacts."""

        for item in audio:
            store.remove(item.source_text_path.with_suffix(".aiff").relative_to(store.root))
        if config.keep_intermediates:
            return
        for relative_path in INTERMEDIATE_PATHS:
            store.remove(relative_path)
