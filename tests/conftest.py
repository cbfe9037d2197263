"""Shared pytest fixtures for the full texvoice test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes import SAMPLE_TEX


@pytest.fixture
def sample_tex_path(tmp_path: Path) -> Path:
    """Write the sample LaTeX document used by pipeline and CLI tests."""

    path = tmp_path / "paper.tex"
    path.write_text(SAMPLE_TEX, encoding="utf-8")
    return path
