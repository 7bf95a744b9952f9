"""Vault-wide link rewriting after a note is renamed or moved."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import LinkUpdateError
from .parser import replace_markdown_links, replace_wikilinks
from .walk import iter_notes, read_note_text, write_note_text


def rewrite_vault(vault_path: Path, rewrite: Callable[[str], str]) -> int:
    """Apply ``rewrite`` to every note and save the ones that changed.

    Notes whose text comes back identical are not written.

    Returns:
        Number of notes written.

    Raises:
        LinkUpdateError: a write failed; notes already written stay written
            and the rest of the vault is left untouched.
    """
    modified = 0
    for note in iter_notes(vault_path):
        try:
            text = read_note_text(note.path)
        except (OSError, UnicodeDecodeError):
            continue

        updated = rewrite(text)
        if updated == text:
            continue

        try:
            write_note_text(note.path, updated)
        except OSError as e:
            raise LinkUpdateError(note.rel_path, modified) from e
        modified += 1
    return modified


def propagate_rename(vault_path: Path, old_title: str, new_title: str) -> int:
    """Rewrite ``[[old_title...]]`` links and embeds to ``new_title``."""
    return rewrite_vault(vault_path, lambda text: replace_wikilinks(text, old_title, new_title))


def update_markdown_links(vault_path: Path, old_path: str, new_path: str) -> int:
    """Rewrite vault-relative ``[label](old_path)`` links to ``new_path``."""
    return rewrite_vault(vault_path, lambda text: replace_markdown_links(text, old_path, new_path))
