"""Configuration model and loaders for texvoice.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `TexvoiceConfig`: normalized runtime settings for a pipeline run.
- `ConfigLoader`: static construction helpers for `TexvoiceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import os
from pathlib import Path
import re
from typing import Any, Mapping

import yaml

from .parsing import (
    is_valid_bitrate,
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_int,
    parse_token_list,
)
from .text.abbreviations import DEFAULT_ABBREVIATIONS, AbbreviationSet

DEFAULT_SPEED = 175
DEFAULT_BITRATE = "256k"
DEFAULT_SECTION_PREFIX = "section"
_SECTION_PREFIX_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def default_output_dir(now: datetime) -> Path:
    """Return the timestamped output directory used when none is configured."""

    return Path(f"output_{now:%Y-%m-%d_%H-%M}")


@dataclass(slots=True)
class TexvoiceConfig:
    """Runtime configuration for one pipeline run.

    Attributes:
        input_tex: Path to the LaTeX source, `None` until resolved.
        output_dir: Output directory; a timestamped directory is used when `None`.
        speed: Narration speed in words per minute passed to the speech tool.
        bitrate: Audio bitrate passed to the transcoder (for example `256k`).
        voice: Optional speech tool voice name.
        synthesize_audio: Whether to generate audio; `None` asks interactively.
        keep_intermediates: Keep cleaned/converted/formatted intermediate files.
        section_prefix: Filename prefix of section outputs.
        extra_abbreviations: Tokens added to the default abbreviation table.
        case_sensitive_abbreviations: Match abbreviations only in listed case.
        extra: Additional metadata copied into the run manifest.
    """

    input_tex: Path | None
    output_dir: Path | None = None
    speed: int = DEFAULT_SPEED
    bitrate: str = DEFAULT_BITRATE
    voice: str | None = None
    synthesize_audio: bool | None = None
    keep_intermediates: bool = False
    section_prefix: str = DEFAULT_SECTION_PREFIX
    extra_abbreviations: tuple[str, ...] = field(default_factory=tuple)
    case_sensitive_abbreviations: bool = True
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        if isinstance(self.speed, bool) or not isinstance(self.speed, int) or self.speed <= 0:
            raise ValueError("`speed` must be a positive integer.")
        if not is_valid_bitrate(self.bitrate):
            raise ValueError("`bitrate` must look like `256k`.")
        if not _SECTION_PREFIX_RE.fullmatch(self.section_prefix):
            raise ValueError(
                "`section_prefix` must start with a letter or digit and contain only "
                "letters, digits, `-` or `_`."
            )
        self.abbreviations()

    def abbreviations(self) -> AbbreviationSet:
        """Build the abbreviation table for this run."""

        base = AbbreviationSet.from_tokens(
            DEFAULT_ABBREVIATIONS.tokens,
            case_sensitive=self.case_sensitive_abbreviations,
        )
        return base.with_extra(self.extra_abbreviations)

    def resolved_output_dir(self, now: datetime | None = None) -> Path:
        """Return the configured output directory or a timestamped default."""

        if self.output_dir is not None:
            return self.output_dir
        return default_output_dir(now or datetime.now())


class ConfigLoader:
    """Factory methods for creating `TexvoiceConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "input_tex",
            "output_dir",
            "speed",
            "bitrate",
            "voice",
            "synthesize_audio",
            "keep_intermediates",
            "section_prefix",
            "extra_abbreviations",
            "case_sensitive_abbreviations",
            "extra",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> TexvoiceConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TexvoiceConfig:
        """Create a validated config from `TEXVOICE_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS - {"extra"}:
            env_key = f"TEXVOICE_{key.upper()}"
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                payload[key] = value
        return ConfigLoader._build_config_from_mapping(payload, source_label="Environment")

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> TexvoiceConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            raise ValueError(f"{source_label} includes unsupported key(s): {', '.join(unknown)}.")

        input_tex = normalize_optional_string(payload.get("input_tex"))
        output_dir = normalize_optional_string(payload.get("output_dir"))

        speed = DEFAULT_SPEED
        if normalize_optional_string(payload.get("speed")) is not None:
            try:
                speed = parse_positive_int(payload["speed"], "speed")
            except ValueError as exc:
                raise ValueError(f"{source_label} field {exc}") from exc

        config = TexvoiceConfig(
            input_tex=Path(input_tex) if input_tex is not None else None,
            output_dir=Path(output_dir) if output_dir is not None else None,
            speed=speed,
            bitrate=normalize_optional_string(payload.get("bitrate")) or DEFAULT_BITRATE,
            voice=normalize_optional_string(payload.get("voice")),
            synthesize_audio=ConfigLoader._optional_boolean(
                payload, "synthesize_audio", source_label, default=None
            ),
            keep_intermediates=bool(
                ConfigLoader._optional_boolean(
                    payload, "keep_intermediates", source_label, default=False
                )
            ),
            section_prefix=(
                normalize_optional_string(payload.get("section_prefix"))
                or DEFAULT_SECTION_PREFIX
            ),
            extra_abbreviations=parse_token_list(
                payload.get("extra_abbreviations"), "extra_abbreviations"
            ),
            case_sensitive_abbreviations=bool(
                ConfigLoader._optional_boolean(
                    payload, "case_sensitive_abbreviations", source_label, default=True
                )
            ),
            extra=ConfigLoader._optional_string_map(payload, "extra", source_label),
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool | None
    ) -> bool | None:
        """Read and validate a boolean field from a payload."""

        if payload.get(key) is None:
            return default
        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_string_map(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        raw = payload.get(key)
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None or value_value is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank key or value.")
            normalized[key_value] = value_value
        return normalized
