from pathlib import Path

import pytest

from vlt.audit_log import (
    CreationSummary,
    ErasureCost,
    format_audit_entry,
    get_audit_log_path,
    log_operation,
    read_audit_log,
)
from vlt.commands.notes import run_create, run_delete, run_move
from vlt.commands.vaults import run_history
from vlt.vault import rename
from vlt.vault.walk import iter_notes


def test_log_and_read_roundtrip(vault: Path) -> None:
    log_operation(vault, "create", created=CreationSummary(files=1, bytes_written=5), metadata={"path": "A.md"})
    log_operation(vault, "delete", erased=ErasureCost(files=1, bytes_erased=5))

    entries = read_audit_log(vault)

    assert [e.operation for e in entries] == ["create", "delete"]
    assert entries[0].created.bytes_written == 5
    assert entries[0].metadata == {"path": "A.md"}
    assert [e.operation for e in read_audit_log(vault, last_n=1)] == ["delete"]


def test_malformed_lines_are_skipped(vault: Path) -> None:
    log_operation(vault, "move")
    with get_audit_log_path(vault).open("a", encoding="utf-8") as f:
        f.write("not json\n{\"missing\": \"fields\"}\n\n")

    assert [e.operation for e in read_audit_log(vault)] == ["move"]


def test_log_lives_outside_the_note_walk(vault: Path, write_note) -> None:
    write_note("A.md")
    log_operation(vault, "create")

    assert get_audit_log_path(vault) == vault / ".vlt" / "audit.log"
    assert [n.rel_path for n in iter_notes(vault, suffix=".log")] == []


def test_format_entry() -> None:
    from vlt.audit_log import AuditEntry

    entry = AuditEntry(
        timestamp="2024-01-01T00:00:00+00:00",
        operation="delete",
        erased=ErasureCost(files=1, bytes_erased=42),
        created=CreationSummary(),
        metadata={"path": "Old.md"},
    )

    assert format_audit_entry(entry) == (
        "[2024-01-01T00:00:00+00:00] delete\n"
        "  Erased: 1 files, 42 bytes\n"
        "  path: Old.md"
    )


def test_commands_record_when_enabled(vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
    write_note("Ref.md", "[[Draft]]")

    assert run_create(vault, "Draft", "Draft.md", content="hello", audit=True) == 0
    assert run_move(vault, "Draft.md", "Final.md", audit=True) == 0
    assert run_delete(vault, title="Final", permanent=True, audit=True) == 0

    entries = read_audit_log(vault)
    assert [e.operation for e in entries] == ["create", "move", "delete"]
    assert entries[0].created.bytes_written == 5
    assert entries[1].metadata["wikilink_files"] == 1
    assert entries[2].erased.bytes_erased == 5

    capsys.readouterr()
    assert run_history(vault, last=1) == 0
    assert capsys.readouterr().out.startswith("[")


def test_partial_move_is_recorded(vault: Path, write_note, monkeypatch: pytest.MonkeyPatch) -> None:
    write_note("Old.md", "content")
    write_note("a.md", "[[Old]]")
    write_note("b.md", "[[Old]]")

    real_write = rename.write_note_text

    def failing_write(path: Path, text: str) -> None:
        if path.name == "b.md":
            raise PermissionError("read-only")
        real_write(path, text)

    monkeypatch.setattr(rename, "write_note_text", failing_write)

    assert run_move(vault, "Old.md", "New.md", audit=True) == 1

    (entry,) = read_audit_log(vault)
    assert entry.operation == "move"
    assert entry.metadata["from"] == "Old.md"
    assert entry.metadata["to"] == "New.md"
    assert entry.metadata["failed_path"] == "b.md"
    assert entry.metadata["files_updated_before_failure"] == 1

def test_commands_do_not_record_by_default(vault: Path) -> None:
    assert run_create(vault, "Quiet", "Quiet.md", content="x", silent=True) == 0

    assert not get_audit_log_path(vault).exists()
