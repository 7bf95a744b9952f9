"""Checkbox task listing."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..models import Task
from ..output import emit_rows
from ..vault.errors import NoteNotFoundError
from ..vault.parser import parse_tasks
from ..vault.resolver import resolve_note
from ..vault.walk import iter_notes, vault_file


def filter_tasks(tasks: list[Task], done: bool = False, pending: bool = False) -> list[Task]:
    """Keep done and/or pending tasks; with neither flag, keep all."""
    if not done and not pending:
        return tasks
    return [t for t in tasks if (done and t.done) or (pending and not t.done)]


def collect_tasks(vault_path: Path, folder: str | None = None) -> list[Task]:
    tasks = []
    for note in iter_notes(vault_path, folder):
        try:
            text = note.content
        except (OSError, UnicodeDecodeError):
            continue
        for task in parse_tasks(text):
            task.file = note.rel_path
            tasks.append(task)
    return tasks


def run_tasks(
    vault_path: Path,
    *,
    title: str | None = None,
    folder: str | None = None,
    done: bool = False,
    pending: bool = False,
    fmt: str = "plain",
) -> int:
    """List tasks from one note (``title``) or the whole vault."""
    console = Console(stderr=True)

    try:
        if title:
            note = resolve_note(vault_path, title)
            tasks = parse_tasks(note.content)
            for task in tasks:
                task.file = note.rel_path
        else:
            if folder and not vault_file(vault_path, folder).is_dir():
                console.print(f'Error: path filter "{escape(folder)}" not found in vault', style="bold red")
                return 1
            tasks = collect_tasks(vault_path, folder)
    except (NoteNotFoundError, ValueError, OSError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    tasks = filter_tasks(tasks, done, pending)
    rows = [{**t.to_dict(), "check": "x" if t.done else " "} for t in tasks]
    if fmt == "plain":
        for row in rows:
            print("- [{check}] {text} ({file}:{line})".format(**row))
        return 0

    emit_rows(rows, ["text", "done", "line", "file"], fmt)
    return 0
