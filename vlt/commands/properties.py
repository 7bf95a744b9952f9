"""Frontmatter property commands."""

from __future__ import annotations

from pathlib import Path

import yaml
from rich.console import Console
from rich.markup import escape

from ..audit_log import CreationSummary, ErasureCost, log_operation
from ..output import emit_mapping
from ..vault.errors import NoteNotFoundError
from ..vault.frontmatter import load_properties, read_frontmatter_block, remove_property, set_property
from ..vault.resolver import resolve_note
from ..vault.walk import write_note_text


def run_properties(vault_path: Path, title: str, *, fmt: str = "plain") -> int:
    """Print a note's frontmatter.

    Plain output is the raw block with its delimiters; structured formats
    use the parsed metadata.
    """
    console = Console(stderr=True)
    try:
        note = resolve_note(vault_path, title)
        text = note.content
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    block = read_frontmatter_block(text)
    if not block:
        return 0

    if fmt == "plain":
        print(block)
        return 0

    try:
        metadata = load_properties(text)
    except yaml.YAMLError as e:
        console.print(f"Error: invalid frontmatter in {escape(note.rel_path)}: {escape(str(e))}", style="bold red")
        return 1
    emit_mapping(metadata, fmt)
    return 0


def run_property_set(vault_path: Path, title: str, name: str, value: str, *, audit: bool = False) -> int:
    """Set a frontmatter property, adding it when missing."""
    console = Console(stderr=True)
    try:
        note = resolve_note(vault_path, title)
        text = note.content
        updated = set_property(text, name, value)
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1
    except ValueError as e:
        console.print(f"Error: {escape(str(e))} in \"{escape(title)}\"", style="bold red")
        return 1

    if updated != text:
        try:
            write_note_text(note.path, updated)
        except OSError as e:
            console.print(f"Error: {escape(str(e))}", style="bold red")
            return 1

        if audit:
            before, after = len(text.encode("utf-8")), len(updated.encode("utf-8"))
            log_operation(
                vault_path,
                "property:set",
                erased=ErasureCost(bytes_erased=max(before - after, 0)),
                created=CreationSummary(bytes_written=max(after - before, 0)),
                metadata={"path": note.rel_path, "property": name, "value": value},
            )

    print(f'set {name}={value} in "{title}"')
    return 0


def run_property_remove(vault_path: Path, title: str, name: str, *, audit: bool = False) -> int:
    """Remove a frontmatter property."""
    console = Console(stderr=True)
    try:
        note = resolve_note(vault_path, title)
        text = note.content
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    updated = remove_property(text, name)
    if updated == text:
        console.print(f'Error: property "{escape(name)}" not found in "{escape(title)}"', style="bold red")
        return 1

    try:
        write_note_text(note.path, updated)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if audit:
        log_operation(
            vault_path,
            "property:remove",
            erased=ErasureCost(bytes_erased=len(text.encode("utf-8")) - len(updated.encode("utf-8"))),
            metadata={"path": note.rel_path, "property": name},
        )

    print(f'removed {name} from "{title}"')
    return 0
