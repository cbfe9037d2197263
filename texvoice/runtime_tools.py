"""External executable resolution for the pandoc, say and ffmpeg collaborators.

Responsibilities:
- Resolve external tool paths with deterministic precedence.
- Allow per-tool overrides through `TEXVOICE_<TOOL>_BIN` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
import sys
from typing import Mapping


def tool_env_key(command_name: str) -> str:
    """Return the override environment variable name for one tool."""

    token = "".join(
        character.upper() if character.isalnum() else "_" for character in command_name.strip()
    )
    return f"TEXVOICE_{token}_BIN"


def resolve_executable(command_name: str, env: Mapping[str, str] | None = None) -> str:
    """Resolve an executable path.

    Resolution order:
    1. `TEXVOICE_<TOOL>_BIN` environment override.
    2. Bundled app directory (`./bin/<tool>` from app root).
    3. System `PATH`.
    4. Raw command name (subprocess then raises its native missing-binary error).
    """

    normalized = command_name.strip()
    if not normalized:
        return command_name

    env_map = os.environ if env is None else env
    override = env_map.get(tool_env_key(normalized), "").strip()
    if override:
        return override

    bundled = _app_root() / "bin" / normalized
    if bundled.is_file():
        return str(bundled)

    resolved_path = shutil.which(normalized)
    if resolved_path is not None:
        return resolved_path

    return normalized


def _app_root() -> Path:
    """Resolve runtime application root for frozen and non-frozen execution."""

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
