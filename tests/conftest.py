"""Shared pytest fixtures for spire_deck_report tests."""

from pathlib import Path
from typing import Callable, Iterable

import pytest

from spire_deck_report import AnalyzerConfig


@pytest.fixture
def config(tmp_path: Path) -> AnalyzerConfig:
    """Default analyzer settings writing into a per-test output directory."""
    return AnalyzerConfig(outdir=str(tmp_path / "out"))


@pytest.fixture
def write_deck(tmp_path: Path) -> Callable[[Iterable[str]], str]:
    """Write deck lines to a file and return its path."""

    def _write(lines: Iterable[str], name: str = "deck.txt") -> str:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _write
