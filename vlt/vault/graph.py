"""Link graph queries: backlinks, outgoing links, orphans, unresolved links.

Each query walks the vault fresh. Multi-pass queries finish the first walk
before starting the second and never re-walk the tree per lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..models import OutgoingLink, UnresolvedLink
from .parser import link_targets, parse_wikilinks
from .walk import FoldedKey, Note, fold, iter_notes


def _read(note: Note) -> str | None:
    try:
        return note.content
    except (OSError, UnicodeDecodeError):
        return None


@dataclass
class TitleIndex:
    """Lookup tables built from one walk over the vault."""

    notes: list[Note] = field(default_factory=list)
    by_title: dict[str, Note] = field(default_factory=dict)  # exact filename title -> note
    by_alias: dict[FoldedKey, Note] = field(default_factory=dict)  # folded alias -> note
    names: set[FoldedKey] = field(default_factory=set)  # folded titles and aliases

    @classmethod
    def build(cls, vault_path: Path) -> "TitleIndex":
        index = cls()
        for note in iter_notes(vault_path):
            index.notes.append(note)
            index.by_title.setdefault(note.title, note)
            index.names.add(fold(note.title))
            for alias in note.aliases:
                key = fold(alias)
                index.by_alias.setdefault(key, note)
                index.names.add(key)
        return index

    def resolve(self, title: str) -> Note | None:
        """Same precedence as :func:`resolve_note`: filename, then alias."""
        return self.by_title.get(title) or self.by_alias.get(fold(title))

    def __contains__(self, title: str) -> bool:
        return fold(title) in self.names


def find_backlinks(vault_path: Path, title: str) -> list[str]:
    """Relative paths of notes linking to or embedding ``title``.

    Matching ignores case and any heading or display text. Each note is
    listed once, in walk order.
    """
    key = fold(title.strip())
    results = []
    for note in iter_notes(vault_path):
        text = _read(note)
        if text is None:
            continue
        if any(fold(link.title) == key for link in parse_wikilinks(text)):
            results.append(note.rel_path)
    return results


def outgoing_links(vault_path: Path, note: Note) -> list[OutgoingLink]:
    """Unique link targets of ``note`` with where each one resolves.

    Raises:
        OSError: ``note`` itself cannot be read.
        UnicodeDecodeError: ``note`` is not valid UTF-8.
    """
    links = parse_wikilinks(note.content)
    if not links:
        return []

    index = TitleIndex.build(vault_path)
    seen: set[str] = set()
    results = []
    for link in links:
        if link.title in seen:
            continue
        seen.add(link.title)
        resolved = index.resolve(link.title)
        if resolved is None:
            results.append(OutgoingLink(target=link.title, path=None, broken=True))
        else:
            results.append(OutgoingLink(target=link.title, path=resolved.rel_path, broken=False))
    return results


def find_orphans(vault_path: Path) -> list[str]:
    """Notes that nothing links to by title or alias, sorted by path."""
    # Pass 1: titles and aliases.
    notes = [(note.rel_path, fold(note.title), [fold(a) for a in note.aliases]) for note in iter_notes(vault_path)]

    # Pass 2: everything referenced.
    referenced: set[FoldedKey] = set()
    for note in iter_notes(vault_path):
        text = _read(note)
        if text is None:
            continue
        referenced.update(link_targets(text))

    orphans = [
        rel_path
        for rel_path, title, aliases in notes
        if title not in referenced and not any(a in referenced for a in aliases)
    ]
    return sorted(orphans)


def find_unresolved(vault_path: Path) -> list[UnresolvedLink]:
    """Link targets that match no title or alias anywhere in the vault.

    Each target is reported once (case-insensitively), with the first note it
    was seen in.
    """
    index = TitleIndex.build(vault_path)

    results = []
    seen: set[FoldedKey] = set()
    for note in iter_notes(vault_path):
        text = _read(note)
        if text is None:
            continue
        for link in parse_wikilinks(text):
            key = fold(link.title)
            if key in seen or link.title in index:
                continue
            seen.add(key)
            results.append(UnresolvedLink(target=link.title, source=note.rel_path))
    return results
