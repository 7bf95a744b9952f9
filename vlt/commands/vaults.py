"""Vault listing and audit history."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..audit_log import format_audit_entry, read_audit_log
from ..config import discover_vaults
from ..output import emit_rows


def run_vaults(*, config_path: Path | None = None, fmt: str = "plain") -> int:
    """List vaults registered with Obsidian, sorted by name."""
    console = Console(stderr=True)
    try:
        vaults = discover_vaults(config_path)
    except (ValueError, OSError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if not vaults:
        console.print("No vaults found.", style="yellow")
        return 0

    rows = [{"name": name, "path": str(vaults[name])} for name in sorted(vaults)]
    emit_rows(rows, ["name", "path"], fmt)
    return 0


def run_history(vault_path: Path, *, last: int | None = None) -> int:
    """Print audit log entries, oldest first."""
    console = Console(stderr=True)
    entries = read_audit_log(vault_path, last_n=last)
    if not entries:
        console.print("No audit log entries.", style="dim")
        return 0

    for entry in entries:
        print(format_audit_entry(entry))
    return 0
