"""Title and alias resolution."""

from __future__ import annotations

from pathlib import Path

from .errors import NoteNotFoundError
from .walk import Note, fold, iter_notes


def resolve_note(vault_path: Path, title: str) -> Note:
    """Find the note a title refers to.

    A filename match (case-sensitive, extension dropped) always wins. Failing
    that, the first note whose frontmatter aliases contain ``title``
    (case-insensitive) is returned. Ties go to the first note in walk order.

    Raises:
        NoteNotFoundError: neither a filename nor an alias matches.
    """
    notes = list(iter_notes(vault_path))

    for note in notes:
        if note.title == title:
            return note

    key = fold(title)
    for note in notes:
        if any(fold(alias) == key for alias in note.aliases):
            return note

    raise NoteNotFoundError(title)
