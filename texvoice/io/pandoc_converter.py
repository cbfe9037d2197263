"""LaTeX to plain-text conversion through pandoc.

Responsibilities:
- Convert cleaned LaTeX (with injected markers) into plain prose.
- Surface tool failures and unusable output as conversion errors.
"""

from __future__ import annotations

import subprocess

from ..runtime_tools import resolve_executable


class PlainTextConversionError(RuntimeError):
    """Raised when plain-text conversion cannot be completed."""


class PandocConverter:
    """Converter for LaTeX sources using the `pandoc` tool."""

    def __init__(self, source_format: str = "latex") -> None:
        """Initialize the converter with the pandoc reader format."""

        self.source_format = source_format

    def convert(self, text: str) -> str:
        """Convert LaTeX text to plain text, preserving marker and header lines."""

        command = [
            resolve_executable("pandoc"),
            "-s",
            "-f",
            self.source_format,
            "-t",
            "plain",
            "--wrap=none",
        ]
        try:
            result = subprocess.run(
                command,
                input=text.encode("utf-8"),
                check=False,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            raise PlainTextConversionError(
                "The `pandoc` command is required but was not found."
            ) from exc

        if result.returncode != 0:
            details = result.stderr.decode("utf-8", "replace").strip() or "unknown error"
            raise PlainTextConversionError(f"pandoc failed: {details}")

        try:
            output = result.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PlainTextConversionError("pandoc returned output that is not UTF-8.") from exc

        if text.strip() and not output.strip():
            raise PlainTextConversionError("pandoc returned no text for a non-empty document.")
        return output
