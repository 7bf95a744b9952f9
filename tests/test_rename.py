import os
from pathlib import Path

import pytest

from vlt.vault import rename
from vlt.vault.errors import LinkUpdateError
from vlt.vault.rename import propagate_rename, update_markdown_links


def test_propagate_counts_only_changed_notes(vault: Path, write_note) -> None:
    write_note("A.md", "See [[Old Note]] and ![[old note#Intro|shown]]\r\n")
    write_note("sub/B.md", "[[Old Note|alias text]]")
    untouched = write_note("C.md", "[[Old Note Extended]] and [[Other]]")
    before = untouched.stat().st_mtime_ns
    os.utime(untouched, ns=(before - 10_000_000_000, before - 10_000_000_000))
    stamp = untouched.stat().st_mtime_ns

    count = propagate_rename(vault, "Old Note", "New Note")

    assert count == 2
    assert (vault / "A.md").read_bytes() == b"See [[New Note]] and ![[New Note#Intro|shown]]\r\n"
    assert (vault / "sub" / "B.md").read_text(encoding="utf-8") == "[[New Note|alias text]]"
    assert untouched.read_text(encoding="utf-8") == "[[Old Note Extended]] and [[Other]]"
    assert untouched.stat().st_mtime_ns == stamp


def test_propagate_noop(vault: Path, write_note) -> None:
    write_note("A.md", "nothing here")

    assert propagate_rename(vault, "Missing", "Other") == 0
    assert (vault / "A.md").read_text(encoding="utf-8") == "nothing here"


def test_propagate_skips_excluded_dirs(vault: Path, write_note) -> None:
    hidden = write_note(".obsidian/Workspace.md", "[[Old]]")
    trashed = write_note(".trash/Gone.md", "[[Old]]")
    write_note("Live.md", "[[Old]]")

    assert propagate_rename(vault, "Old", "New") == 1
    assert hidden.read_text(encoding="utf-8") == "[[Old]]"
    assert trashed.read_text(encoding="utf-8") == "[[Old]]"


def test_propagate_partial_failure(vault: Path, write_note, monkeypatch: pytest.MonkeyPatch) -> None:
    write_note("a.md", "[[Old]]")
    write_note("b.md", "[[Old]]")
    write_note("c.md", "[[Old]]")

    real_write = rename.write_note_text

    def failing_write(path: Path, text: str) -> None:
        if path.name == "b.md":
            raise PermissionError("read-only")
        real_write(path, text)

    monkeypatch.setattr(rename, "write_note_text", failing_write)

    with pytest.raises(LinkUpdateError) as exc_info:
        propagate_rename(vault, "Old", "New")

    err = exc_info.value
    assert err.modified == 1
    assert err.path == "b.md"
    assert isinstance(err.__cause__, PermissionError)
    assert (vault / "a.md").read_text(encoding="utf-8") == "[[New]]"
    assert (vault / "b.md").read_text(encoding="utf-8") == "[[Old]]"
    assert (vault / "c.md").read_text(encoding="utf-8") == "[[Old]]"


def test_update_markdown_links(vault: Path, write_note) -> None:
    write_note("Referrer.md", "See [note](_inbox/Note.md) and [heading](_inbox/Note.md#section) here.\n")
    write_note("Plain.md", "no links")

    count = update_markdown_links(vault, "_inbox/Note.md", "decisions/Note.md")

    assert count == 1
    text = (vault / "Referrer.md").read_text(encoding="utf-8")
    assert "_inbox/Note.md" not in text
    assert "decisions/Note.md#section" in text
