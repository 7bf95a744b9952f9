"""Rendering of command results as plain text, JSON, CSV or YAML."""

from __future__ import annotations

import csv
import json
import sys
from typing import Any, Iterable, Sequence

import yaml

FORMATS = ("plain", "json", "csv", "yaml")


def _yaml(data: Any) -> None:
    print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False), end="")


def emit_list(items: Sequence[str], fmt: str = "plain") -> None:
    """One value per line in plain and CSV output."""
    if fmt == "json":
        print(json.dumps(list(items), indent=2))
    elif fmt == "csv":
        writer = csv.writer(sys.stdout, lineterminator="\n")
        for item in items:
            writer.writerow([item])
    elif fmt == "yaml":
        if items:
            _yaml(list(items))
    else:
        for item in items:
            print(item)


def emit_rows(
    rows: Iterable[dict[str, Any]],
    fields: Sequence[str],
    fmt: str = "plain",
    plain: str | None = None,
) -> None:
    """Records with a fixed field order.

    Args:
        plain: ``str.format`` template for plain output; defaults to the
            fields joined by tabs.
    """
    rows = [{f: row.get(f, "") for f in fields} for row in rows]
    if fmt == "json":
        print(json.dumps(rows, indent=2, default=str))
    elif fmt == "csv":
        writer = csv.DictWriter(sys.stdout, fieldnames=list(fields), lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    elif fmt == "yaml":
        if rows:
            _yaml(rows)
    else:
        for row in rows:
            if plain is not None:
                print(plain.format(**row))
            else:
                print("\t".join(str(row[f]) for f in fields))


def emit_mapping(data: dict[str, Any], fmt: str = "plain") -> None:
    """A single record, keys in insertion order."""
    if fmt == "json":
        print(json.dumps(data, indent=2, default=str))
    elif fmt == "csv":
        writer = csv.writer(sys.stdout, lineterminator="\n")
        writer.writerow(list(data))
        writer.writerow([_cell(v) for v in data.values()])
    elif fmt == "yaml":
        if data:
            _yaml(data)
    else:
        for key, value in data.items():
            print(f"{key}: {_cell(value)}")


def _cell(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)
