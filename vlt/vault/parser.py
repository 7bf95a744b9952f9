"""Markdown parsing: wiki-links, markdown links, tags, tasks and search queries."""

from __future__ import annotations

import re
from urllib.parse import quote

from ..models import Task, WikiLink
from .walk import fold

# [[Title]], ![[Title]], [[Title#Heading]], [[Title|Display]], [[Title#Heading|Display]]
WIKILINK_PATTERN = re.compile(r"(!?)\[\[([^\]#|]+?)(?:#([^\]|]*))?(?:\|([^\]]*))?\]\]")

# #tag and #parent/child; not part of a word, a heading marker or an entity
TAG_PATTERN = re.compile(r"(?<![\w#&/])#([\w/-]+)")

# - [ ] text / - [x] text, optionally indented
TASK_PATTERN = re.compile(r"^[\t ]*- \[([ xX])\] (.+)$")

# [key:value] property filters inside a search query
SEARCH_FILTER_PATTERN = re.compile(r"\[([^\[\]:\s]+):([^\]]*)\]")


def parse_wikilinks(text: str) -> list[WikiLink]:
    """Extract every wiki-link and embed from ``text``.

    Links are returned in order of appearance and are not deduplicated.
    Links with a blank title are skipped.
    """
    links = []
    for m in WIKILINK_PATTERN.finditer(text):
        title = m.group(2).strip()
        if not title:
            continue
        links.append(
            WikiLink(
                title=title,
                heading=m.group(3) or "",
                display=m.group(4) or "",
                is_embed=m.group(1) == "!",
                raw=m.group(0),
                start=m.start(),
                end=m.end(),
            )
        )
    return links


def replace_wikilinks(text: str, old_title: str, new_title: str) -> str:
    """Point every link to ``old_title`` at ``new_title``.

    Titles compare case-insensitively and must match the whole title segment,
    so renaming "Old" never touches ``[[Old Extended]]``. Only the title is
    replaced; the embed marker, heading, display text and any whitespace
    around the title are kept as written.
    """
    old_key = fold(old_title.strip())

    def repl(m: re.Match) -> str:
        raw_title = m.group(2)
        title = raw_title.strip()
        if not title or fold(title) != old_key:
            return m.group(0)
        lead = raw_title[: len(raw_title) - len(raw_title.lstrip())]
        trail = raw_title[len(raw_title.rstrip()) :]
        tail = m.group(0)[m.end(2) - m.start() :]
        return f"{m.group(1)}[[{lead}{new_title}{trail}{tail}"

    return WIKILINK_PATTERN.sub(repl, text)


def link_targets(text: str) -> set[str]:
    """Case-folded titles of every link in ``text``."""
    return {fold(link.title) for link in parse_wikilinks(text)}


def replace_markdown_links(text: str, old_path: str, new_path: str) -> str:
    """Rewrite ``[label](old_path)`` and ``[label](old_path#frag)`` targets.

    Paths are vault-root relative. Both the raw and the percent-encoded
    spelling of ``old_path`` are recognised; the replacement keeps the
    spelling that was matched.
    """
    variants = {old_path: new_path, quote(old_path): quote(new_path)}
    for old, new in variants.items():
        pattern = re.compile(r"(\]\()" + re.escape(old) + r"((?:#[^)\s]*)?\))")
        text = pattern.sub(lambda m, new=new: m.group(1) + new + m.group(2), text)
    return text


def parse_inline_tags(text: str) -> list[str]:
    """Inline tags in order of appearance, without the ``#``.

    Purely numeric tags such as ``#42`` are skipped, as are heading markers.
    """
    return [m.group(1) for m in TAG_PATTERN.finditer(text) if not m.group(1).isdigit()]

def parse_tasks(text: str) -> list[Task]:
    """Checkbox items with 1-based line numbers."""
    tasks = []
    for i, line in enumerate(text.split("\n"), start=1):
        m = TASK_PATTERN.match(line.rstrip("\r"))
        if m:
            tasks.append(Task(text=m.group(2), done=m.group(1) in "xX", line=i))
    return tasks


def parse_search_query(query: str) -> tuple[str, dict[str, str]]:
    """Split ``[key:value]`` property filters out of a search query.

    Returns:
        ``(text, filters)``; the text keeps its inner spacing.
    """
    filters = {m.group(1): m.group(2).strip() for m in SEARCH_FILTER_PATTERN.finditer(query)}
    text = SEARCH_FILTER_PATTERN.sub("", query).strip()
    return text, filters
