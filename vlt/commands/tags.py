"""Tag commands: tags, tag."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..output import emit_list, emit_rows
from ..vault.tags import count_tags, find_tagged


def run_tags(vault_path: Path, *, counts: bool = False, sort: str = "name", fmt: str = "plain") -> int:
    """List every tag in the vault, optionally with how many notes use it.

    ``sort="count"`` orders by note count, most used first; ties and the
    default order are alphabetical.
    """
    console = Console(stderr=True)
    try:
        tally = count_tags(vault_path)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if sort == "count":
        names = sorted(tally, key=lambda t: (-tally[t], t))
    else:
        names = sorted(tally)

    if counts:
        rows = [{"tag": name, "count": tally[name]} for name in names]
        emit_rows(rows, ["tag", "count"], fmt, plain="#{tag}\t{count}")
    elif fmt == "plain":
        for name in names:
            print(f"#{name}")
    else:
        emit_list(names, fmt)
    return 0


def run_tag(vault_path: Path, tag: str, *, fmt: str = "plain") -> int:
    """List notes tagged ``tag`` (a leading ``#`` is ignored) or a nested tag."""
    console = Console(stderr=True)
    if not tag.strip().lstrip("#"):
        console.print("Error: no tag given", style="bold red")
        return 1

    try:
        results = find_tagged(vault_path, tag)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    emit_list(results, fmt)
    return 0
