"""Tag collection from frontmatter ``tags`` and inline ``#tags``."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from .frontmatter import extract_frontmatter, get_list
from .parser import parse_inline_tags
from .walk import FoldedKey, fold, iter_notes


def note_tags(text: str) -> list[FoldedKey]:
    """Every tag on a note, case-folded and deduplicated.

    Frontmatter tags come first, then inline tags from the body. Inline tags
    are only looked for below the frontmatter.
    """
    block, body_start, found = extract_frontmatter(text)
    declared = get_list(block, "tags") if found else []
    body = "\n".join(text.split("\n")[body_start:]) if found else text

    tags: list[FoldedKey] = []
    for tag in declared + parse_inline_tags(body):
        key = fold(tag.lstrip("#"))
        if key and key not in tags:
            tags.append(key)
    return tags


def tag_matches(tag: str, wanted: str) -> bool:
    """True for ``wanted`` itself and any of its nested tags."""
    return tag == wanted or tag.startswith(wanted + "/")


def count_tags(vault_path: Path) -> Counter[str]:
    """Number of notes carrying each tag. Unreadable notes are skipped."""
    counts: Counter[str] = Counter()
    for note in iter_notes(vault_path):
        try:
            text = note.content
        except (OSError, UnicodeDecodeError):
            continue
        counts.update(note_tags(text))
    return counts


def find_tagged(vault_path: Path, tag: str) -> list[str]:
    """Relative paths of notes tagged ``tag`` or one of its nested tags, sorted."""
    wanted = fold(tag.strip().lstrip("#"))
    results = []
    for note in iter_notes(vault_path):
        try:
            text = note.content
        except (OSError, UnicodeDecodeError):
            continue
        if any(tag_matches(t, wanted) for t in note_tags(text)):
            results.append(note.rel_path)
    return sorted(results)
