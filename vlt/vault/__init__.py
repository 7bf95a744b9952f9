"""Vault traversal, note resolution, link graph and tag queries."""

from .errors import LinkUpdateError, NoteNotFoundError, VaultNotFoundError
from .graph import TitleIndex, find_backlinks, find_orphans, find_unresolved, outgoing_links
from .parser import parse_inline_tags, parse_wikilinks, replace_wikilinks
from .rename import propagate_rename, update_markdown_links
from .resolver import resolve_note
from .tags import count_tags, find_tagged, note_tags
from .walk import Note, fold, is_excluded_dir, iter_files, iter_notes

__all__ = [
    "LinkUpdateError",
    "NoteNotFoundError",
    "VaultNotFoundError",
    "TitleIndex",
    "find_backlinks",
    "find_orphans",
    "find_unresolved",
    "outgoing_links",
    "parse_inline_tags",
    "parse_wikilinks",
    "replace_wikilinks",
    "propagate_rename",
    "update_markdown_links",
    "resolve_note",
    "count_tags",
    "find_tagged",
    "note_tags",
    "Note",
    "fold",
    "is_excluded_dir",
    "iter_files",
    "iter_notes",
]
