"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """An empty vault directory."""
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def write_note(vault: Path) -> Callable[[str, str], Path]:
    """Write ``text`` to ``rel_path`` inside the vault, creating folders."""

    def _write(rel_path: str, text: str = "") -> Path:
        path = vault / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
