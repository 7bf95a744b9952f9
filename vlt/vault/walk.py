"""Vault traversal and note file I/O.

Every tree walk in vlt goes through :func:`iter_files` so that all commands
agree on which directories are part of the vault.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Iterator, NewType

from .frontmatter import read_aliases

NOTE_SUFFIX = ".md"
TRASH_DIR = ".trash"

FoldedKey = NewType("FoldedKey", str)


def fold(s: str) -> FoldedKey:
    """Case-folded lookup key for titles and aliases."""
    return FoldedKey(s.casefold())


def is_excluded_dir(name: str) -> bool:
    """Directories that are never part of the vault (config, trash, VCS)."""
    return name.startswith(".") or name == TRASH_DIR


def read_note_text(path: Path) -> str:
    """Read a note without newline translation."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_note_text(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


@dataclass
class Note:
    """A markdown document in the vault."""

    vault_path: Path
    path: Path
    _aliases: list[str] | None = field(default=None, repr=False, compare=False)

    @property
    def rel_path(self) -> str:
        return self.path.relative_to(self.vault_path).as_posix()

    @property
    def title(self) -> str:
        """Filename without its extension."""
        name = self.path.name
        return name[: -len(NOTE_SUFFIX)] if name.endswith(NOTE_SUFFIX) else self.path.stem

    @cached_property
    def content(self) -> str:
        return read_note_text(self.path)

    @property
    def aliases(self) -> list[str]:
        """Frontmatter aliases; unreadable notes have none."""
        if self._aliases is None:
            try:
                self._aliases = read_aliases(self.content)
            except (OSError, UnicodeDecodeError):
                self._aliases = []
        return self._aliases


def iter_files(root: Path, suffix: str = NOTE_SUFFIX) -> Iterator[Path]:
    """Yield files under ``root`` whose name ends with ``suffix``.

    Depth-first, entries visited in name order. Excluded directories are not
    descended into and symlinked directories are not followed. Errors listing
    a subdirectory skip it; an error listing ``root`` is raised immediately.
    """
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)
    return _walk_entries(entries, suffix)


def _walk_entries(entries: list[os.DirEntry], suffix: str) -> Iterator[Path]:
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue

        if is_dir:
            if is_excluded_dir(entry.name):
                continue
            try:
                with os.scandir(entry.path) as it:
                    children = sorted(it, key=lambda e: e.name)
            except OSError:
                continue
            yield from _walk_entries(children, suffix)
        elif entry.name.endswith(suffix):
            yield Path(entry.path)


def iter_notes(vault_path: Path, folder: str | None = None, suffix: str = NOTE_SUFFIX) -> Iterator[Note]:
    """Yield the vault's notes, optionally limited to ``folder``.

    A folder inside an excluded directory yields nothing.
    """
    vault_path = Path(vault_path)
    root = vault_path
    if folder:
        if any(is_excluded_dir(part) for part in Path(folder).parts):
            return iter(())
        root = vault_path / folder
    return (Note(vault_path, path) for path in iter_files(root, suffix))


def vault_file(vault_path: Path, rel_path: str) -> Path:
    """Join ``rel_path`` onto the vault, refusing paths that escape it."""
    vault_path = Path(os.path.normpath(Path(vault_path).absolute()))
    full = Path(os.path.normpath(vault_path / rel_path))
    if full == vault_path or not full.is_relative_to(vault_path):
        raise ValueError(f"path escapes the vault: {rel_path}")
    return full
