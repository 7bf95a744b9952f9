"""Frontmatter reading and line-preserving property edits.

Frontmatter is the block between a leading ``---`` line and the next ``---``
line. Reads go through PyYAML / python-frontmatter; edits work line by line so
that everything outside the touched key stays byte-for-byte identical.
"""

from __future__ import annotations

from typing import Any

import frontmatter
import yaml

DELIMITER = "---"


def extract_frontmatter(text: str) -> tuple[str, int, bool]:
    """Split out the raw frontmatter block.

    Returns:
        ``(block, body_start, found)`` where ``block`` is the YAML between the
        delimiters and ``body_start`` is the index of the first line after the
        closing delimiter.
    """
    lines = text.split("\n")
    if len(lines) < 2 or lines[0].strip() != DELIMITER:
        return "", 0, False

    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            return "\n".join(lines[1:i]), i + 1, True

    return "", 0, False


def _load_block(block: str) -> dict[str, Any] | None:
    """Parsed block, ``{}`` for non-mapping YAML, None when it does not parse."""
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        return None
    return data if isinstance(data, dict) else {}


def _key_fragment(block: str, key: str) -> str:
    """The ``key:`` line plus its indented or ``- `` continuation lines."""
    lines = block.split("\n")
    for i, line in enumerate(lines):
        if not _is_key_line(line, key):
            continue
        stop = i + 1
        while stop < len(lines):
            nxt = lines[stop]
            if nxt.strip() and nxt[:1] not in (" ", "\t") and not nxt.startswith("-"):
                break
            stop += 1
        return "\n".join(lines[i:stop])
    return ""


def _lookup(block: str, key: str) -> Any:
    data = _load_block(block)
    if data is None:
        # Another key is malformed; read this one on its own.
        data = _load_block(_key_fragment(block, key)) or {}
    return data.get(key)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def get_list(block: str, key: str) -> list[str]:
    """Return ``key`` as a list of strings.

    Accepts inline lists (``key: [a, b]``), block lists and a single scalar.
    Malformed YAML elsewhere in the block does not hide the key; a
    malformed value for the key itself reads as an empty list.
    """
    value = _lookup(block, key)
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    result = []
    for item in value:
        if item is None:
            continue
        s = _stringify(item)
        if s:
            result.append(s)
    return result


def get_value(block: str, key: str) -> str | None:
    """Return a scalar property as a string, or None when absent."""
    value = _lookup(block, key)
    if value is None:
        return None
    return _stringify(value)


def read_aliases(text: str) -> list[str]:
    """Aliases declared in a note's frontmatter (empty if none)."""
    block, _, found = extract_frontmatter(text)
    if not found:
        return []
    return get_list(block, "aliases")


def read_frontmatter_block(text: str) -> str:
    """Raw frontmatter including both delimiter lines ('' if none)."""
    lines = text.split("\n")
    if len(lines) < 2 or lines[0].strip() != DELIMITER:
        return ""
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            return "\n".join(lines[: i + 1])
    return ""


def load_properties(text: str) -> dict[str, Any]:
    """Parsed frontmatter metadata."""
    return frontmatter.loads(text).metadata


def _bounds(lines: list[str]) -> tuple[int, int] | None:
    if len(lines) < 2 or lines[0].strip() != DELIMITER:
        return None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            return 0, i
    return None


def _is_key_line(line: str, key: str) -> bool:
    # Top-level keys only; indented lines belong to a parent value.
    return line[:1] not in (" ", "\t") and line.startswith(key + ":")


def set_property(text: str, key: str, value: str) -> str:
    """Set ``key: value`` in the frontmatter, adding the key if missing.

    Raises:
        ValueError: the text has no frontmatter block.
    """
    lines = text.split("\n")
    bounds = _bounds(lines)
    if bounds is None:
        raise ValueError("no frontmatter found")
    start, end = bounds

    new_line = f"{key}: {value}"
    for i in range(start + 1, end):
        if _is_key_line(lines[i], key):
            stop = _value_end(lines, i, end)
            lines[i:stop] = [new_line]
            return "\n".join(lines)

    lines.insert(end, new_line)
    return "\n".join(lines)


def _value_end(lines: list[str], key_line: int, end: int) -> int:
    """Index just past the key's value, including a following block list."""
    stop = key_line + 1
    if lines[key_line].split(":", 1)[1].strip():
        return stop
    while stop < end:
        stripped = lines[stop].strip()
        if stripped.startswith("- ") or stripped == "-" or (stripped and lines[stop][:1] in (" ", "\t")):
            stop += 1
        else:
            break
    return stop


def remove_property(text: str, key: str) -> str:
    """Remove ``key`` (and its block-list value) from the frontmatter.

    Returns the text unchanged when the key is absent.
    """
    lines = text.split("\n")
    bounds = _bounds(lines)
    if bounds is None:
        return text
    start, end = bounds

    for i in range(start + 1, end):
        if _is_key_line(lines[i], key):
            del lines[i : _value_end(lines, i, end)]
            return "\n".join(lines)
    return text
