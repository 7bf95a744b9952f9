"""Link graph commands: backlinks, links, orphans, unresolved."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..output import emit_list, emit_rows
from ..vault.errors import NoteNotFoundError
from ..vault.graph import find_backlinks, find_orphans, find_unresolved, outgoing_links
from ..vault.resolver import resolve_note


def run_backlinks(vault_path: Path, title: str, *, fmt: str = "plain") -> int:
    """List notes that link to or embed ``title``."""
    console = Console(stderr=True)
    try:
        results = find_backlinks(vault_path, title)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    emit_list(results, fmt)
    return 0


def run_links(vault_path: Path, title: str, *, fmt: str = "plain") -> int:
    """List a note's outgoing links and whether each one resolves."""
    console = Console(stderr=True)
    try:
        note = resolve_note(vault_path, title)
        links = outgoing_links(vault_path, note)
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if fmt == "plain":
        for link in links:
            if link.broken:
                print(f"  BROKEN: [[{link.target}]]")
            else:
                print(f"  [[{link.target}]] -> {link.path}")
        return 0

    emit_rows([link.to_dict() for link in links], ["target", "path", "broken"], fmt)
    return 0


def run_orphans(vault_path: Path, *, fmt: str = "plain") -> int:
    """List notes nothing links to."""
    console = Console(stderr=True)
    try:
        orphans = find_orphans(vault_path)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    emit_list(orphans, fmt)
    return 0


def run_unresolved(vault_path: Path, *, fmt: str = "plain") -> int:
    """List link targets that match no note, with the first note using each."""
    console = Console(stderr=True)
    try:
        unresolved = find_unresolved(vault_path)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    emit_rows([u.to_dict() for u in unresolved], ["target", "source"], fmt, plain="[[{target}]] in {source}")
    return 0
