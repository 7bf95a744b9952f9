"""
Audit log of state-changing vault operations.

Entries are JSON lines in ``<vault>/.vlt/audit.log``. The directory is dotted,
so the log itself is never enumerated as a note.

Each entry records:
- what was erased (files removed or overwritten, bytes lost)
- what was created (files written, bytes written)
- operation metadata (paths, rewritten link counts)
"""

import json
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

LOG_DIR = ".vlt"
LOG_NAME = "audit.log"


@dataclass
class ErasureCost:
    """Summary of what was erased in an operation."""
    files: int = 0
    bytes_erased: int = 0
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class CreationSummary:
    """Summary of what was created in an operation."""
    files: int = 0
    bytes_written: int = 0
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class AuditEntry:
    """A single audit log entry."""
    timestamp: str
    operation: str
    erased: ErasureCost
    created: CreationSummary
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "erased": asdict(self.erased),
            "created": asdict(self.created),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        return cls(
            timestamp=data["timestamp"],
            operation=data["operation"],
            erased=ErasureCost(**data.get("erased", {})),
            created=CreationSummary(**data.get("created", {})),
            metadata=data.get("metadata", {}),
        )


def get_audit_log_path(vault_path: Path) -> Path:
    return Path(vault_path) / LOG_DIR / LOG_NAME


def log_operation(
    vault_path: Path,
    operation: str,
    erased: ErasureCost | None = None,
    created: CreationSummary | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditEntry:
    """
    Append an operation to the audit log.

    Args:
        vault_path: Vault root directory
        operation: Command name (e.g. "move", "property:set")
        erased: Summary of what was erased
        created: Summary of what was created
        metadata: Additional context (paths, link counts)

    Returns:
        The written entry
    """
    entry = AuditEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        operation=operation,
        erased=erased or ErasureCost(),
        created=created or CreationSummary(),
        metadata=metadata or {},
    )

    log_path = get_audit_log_path(vault_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict()) + "\n")

    return entry


def read_audit_log(vault_path: Path, last_n: int | None = None) -> list[AuditEntry]:
    """
    Read entries from the audit log, oldest first.

    Malformed lines are skipped.

    Args:
        vault_path: Vault root directory
        last_n: If given, only the last N entries
    """
    log_path = get_audit_log_path(vault_path)
    if not log_path.exists():
        return []

    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(AuditEntry.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError):
                continue

    if last_n is not None:
        return entries[-last_n:] if last_n > 0 else []
    return entries


def format_audit_entry(entry: AuditEntry) -> str:
    """Format an audit entry for human-readable display."""
    lines = [f"[{entry.timestamp}] {entry.operation}"]

    if entry.erased.files or entry.erased.bytes_erased:
        lines.append(f"  Erased: {entry.erased.files} files, {entry.erased.bytes_erased} bytes")

    if entry.created.files or entry.created.bytes_written:
        lines.append(f"  Created: {entry.created.files} files, {entry.created.bytes_written} bytes")

    for key, value in entry.metadata.items():
        lines.append(f"  {key}: {value}")

    return "\n".join(lines)
