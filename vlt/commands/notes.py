"""Note commands: read, search, create, append, prepend, move, delete, files."""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..audit_log import CreationSummary, ErasureCost, log_operation
from ..models import SearchResult
from ..output import emit_list, emit_rows
from ..vault.errors import LinkUpdateError, NoteNotFoundError
from ..vault.frontmatter import extract_frontmatter, get_list
from ..vault.parser import parse_search_query
from ..vault.rename import propagate_rename, update_markdown_links
from ..vault.resolver import resolve_note
from ..vault.walk import NOTE_SUFFIX, TRASH_DIR, fold, iter_notes, vault_file, write_note_text


def _title_of(rel_path: str) -> str:
    name = Path(rel_path).name
    return name[: -len(NOTE_SUFFIX)] if name.endswith(NOTE_SUFFIX) else name


def _rel(vault_path: Path, path: Path) -> str:
    return Path(os.path.relpath(path, Path(vault_path).absolute())).as_posix()


def _check_folder(vault_path: Path, folder: str | None, what: str) -> str | None:
    """Error message when ``folder`` is not a directory inside the vault."""
    if not folder:
        return None
    try:
        root = vault_file(vault_path, folder)
    except ValueError as e:
        return str(e)
    if not root.is_dir():
        return f"{what} not found: {folder}"
    return None


def run_read(vault_path: Path, title: str) -> int:
    """Print a note verbatim."""
    console = Console(stderr=True)
    try:
        note = resolve_note(vault_path, title)
        print(note.content, end="")
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1
    return 0


def _matches_filters(text: str, filters: dict[str, str]) -> bool:
    block, _, found = extract_frontmatter(text)
    if not found:
        return False
    for key, wanted in filters.items():
        values = {fold(v) for v in get_list(block, key)}
        if fold(wanted) not in values:
            return False
    return True


def search_notes(vault_path: Path, query: str, folder: str | None = None) -> list[SearchResult]:
    """Notes whose title or content contains the query text.

    ``[key:value]`` terms in ``query`` must all match a frontmatter property
    (case-insensitive). Unreadable notes are skipped.
    """
    text, filters = parse_search_query(query)
    needle = fold(text)

    results = []
    for note in iter_notes(vault_path, folder):
        content = None
        if filters or needle not in fold(note.title):
            try:
                content = note.content
            except (OSError, UnicodeDecodeError):
                continue

        if filters and not _matches_filters(content, filters):
            continue
        if needle and needle not in fold(note.title) and needle not in fold(content):
            continue
        results.append(SearchResult(title=note.title, path=note.rel_path))
    return results


def run_search(vault_path: Path, query: str, *, folder: str | None = None, fmt: str = "plain") -> int:
    """Search titles and content, printing ``Title (path)`` per match."""
    console = Console(stderr=True)

    text, filters = parse_search_query(query)
    if not text and not filters:
        console.print("Error: empty search query", style="bold red")
        return 1

    err = _check_folder(vault_path, folder, "path filter")
    if err:
        console.print(f"Error: {escape(err)}", style="bold red")
        return 1

    results = search_notes(vault_path, query, folder)
    emit_rows([r.to_dict() for r in results], ["title", "path"], fmt, plain="{title} ({path})")
    return 0


def run_create(
    vault_path: Path,
    name: str,
    path: str,
    *,
    content: str = "",
    silent: bool = False,
    audit: bool = False,
) -> int:
    """Create a new note; an existing file is never overwritten.

    ``path`` is the note's relative path, or a folder when it does not end
    in ``.md`` (the note is then ``<path>/<name>.md``).
    """
    console = Console(stderr=True)

    rel_path = path if path.endswith(NOTE_SUFFIX) else f"{path.rstrip('/')}/{name}{NOTE_SUFFIX}".lstrip("/")
    try:
        full_path = vault_file(vault_path, rel_path)
    except ValueError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if full_path.exists():
        if not silent:
            console.print(f"Note already exists: {escape(rel_path)}", style="yellow")
        return 0

    try:
        full_path.parent.mkdir(parents=True, exist_ok=True)
        write_note_text(full_path, content)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if audit:
        log_operation(
            vault_path,
            "create",
            created=CreationSummary(files=1, bytes_written=len(content.encode("utf-8"))),
            metadata={"path": rel_path},
        )

    if not silent:
        print(f"created: {rel_path}")
    return 0


def run_append(vault_path: Path, title: str, content: str) -> int:
    """Append content to the end of a note."""
    console = Console(stderr=True)
    if not content:
        console.print("Error: no content provided (use --content or pipe to stdin)", style="bold red")
        return 1

    try:
        note = resolve_note(vault_path, title)
        with open(note.path, "a", encoding="utf-8", newline="") as f:
            f.write(content)
    except (NoteNotFoundError, OSError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1
    return 0


def prepend_content(text: str, content: str) -> str:
    """Insert ``content`` right after the frontmatter, or at the very top."""
    _, body_start, found = extract_frontmatter(text)
    lines = text.split("\n")
    if found and body_start <= len(lines):
        before = "\n".join(lines[:body_start])
        after = "\n".join(lines[body_start:])
        return before + "\n" + content + after
    return content + text


def run_prepend(vault_path: Path, title: str, content: str) -> int:
    """Insert content at the top of a note, below any frontmatter."""
    console = Console(stderr=True)
    if not content:
        console.print("Error: no content provided (use --content or pipe to stdin)", style="bold red")
        return 1

    try:
        note = resolve_note(vault_path, title)
        write_note_text(note.path, prepend_content(note.content, content))
    except (NoteNotFoundError, OSError, UnicodeDecodeError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1
    return 0


def run_move(vault_path: Path, src: str, dst: str, *, audit: bool = False) -> int:
    """Move or rename a note and update links that pointed at it.

    Wiki-links are rewritten only when the filename title changes. Markdown
    links written as vault-relative paths follow the file either way.
    """
    console = Console(stderr=True)

    try:
        from_path = vault_file(vault_path, src)
        to_path = vault_file(vault_path, dst)
    except ValueError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if not from_path.exists():
        console.print(f"Error: source not found: {escape(src)}", style="bold red")
        return 1
    if to_path.exists():
        console.print(f"Error: destination already exists: {escape(dst)}", style="bold red")
        return 1

    try:
        to_path.parent.mkdir(parents=True, exist_ok=True)
        from_path.rename(to_path)
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    old_rel = _rel(vault_path, from_path)
    new_rel = _rel(vault_path, to_path)
    print(f"moved: {old_rel} -> {new_rel}")

    old_title = _title_of(old_rel)
    new_title = _title_of(new_rel)
    wikilinks = md_links = 0
    metadata = {"from": old_rel, "to": new_rel}
    try:
        if old_title != new_title:
            wikilinks = propagate_rename(vault_path, old_title, new_title)
            if wikilinks:
                print(f"updated [[{old_title}]] -> [[{new_title}]] in {wikilinks} file(s)")

        md_links = update_markdown_links(vault_path, old_rel, new_rel)
        if md_links:
            print(f"updated markdown links in {md_links} file(s)")
    except LinkUpdateError as e:
        console.print(f"Error: moved file but failed updating links: {escape(str(e))}", style="bold red")
        if audit:
            metadata.update(wikilink_files=wikilinks, failed_path=e.path, files_updated_before_failure=e.modified)
            log_operation(vault_path, "move", metadata=metadata)
        return 1

    if audit:
        metadata.update(wikilink_files=wikilinks, markdown_link_files=md_links)
        log_operation(vault_path, "move", metadata=metadata)
    return 0


def _trash_target(trash_dir: Path, name: str) -> Path:
    target = trash_dir / name
    stem, suffix = os.path.splitext(name)
    n = 1
    while target.exists():
        target = trash_dir / f"{stem} {n}{suffix}"
        n += 1
    return target


def run_delete(
    vault_path: Path,
    *,
    title: str | None = None,
    path: str | None = None,
    permanent: bool = False,
    audit: bool = False,
) -> int:
    """Move a note to ``.trash/`` or, with ``permanent``, remove it."""
    console = Console(stderr=True)

    try:
        if path:
            full_path = vault_file(vault_path, path)
        elif title:
            full_path = resolve_note(vault_path, title).path
        else:
            console.print("Error: delete requires a title or --path", style="bold red")
            return 1
    except (ValueError, NoteNotFoundError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if not full_path.is_file():
        console.print(f"Error: file not found: {escape(path or title or '')}", style="bold red")
        return 1

    rel_path = _rel(vault_path, full_path)
    size = full_path.stat().st_size
    try:
        if permanent:
            full_path.unlink()
            print(f"deleted: {rel_path}")
            erased = ErasureCost(files=1, bytes_erased=size)
            metadata = {"path": rel_path}
        else:
            trash_dir = Path(vault_path) / TRASH_DIR
            trash_dir.mkdir(parents=True, exist_ok=True)
            target = _trash_target(trash_dir, full_path.name)
            full_path.rename(target)
            print(f"trashed: {rel_path} -> {TRASH_DIR}/{target.name}")
            erased = ErasureCost()
            metadata = {"path": rel_path, "trash": f"{TRASH_DIR}/{target.name}"}
    except OSError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if audit:
        log_operation(vault_path, "delete", erased=erased, metadata=metadata)
    return 0


def list_files(vault_path: Path, folder: str | None = None, ext: str = "md") -> list[str]:
    """Sorted relative paths of files with extension ``ext``."""
    suffix = "." + ext.lstrip(".")
    return sorted(note.rel_path for note in iter_notes(vault_path, folder, suffix))


def run_files(
    vault_path: Path,
    *,
    folder: str | None = None,
    ext: str = "md",
    total: bool = False,
    fmt: str = "plain",
) -> int:
    """List vault files, or just count them with ``total``."""
    console = Console(stderr=True)

    err = _check_folder(vault_path, folder, "folder")
    if err:
        console.print(f"Error: {escape(err)}", style="bold red")
        return 1

    files = list_files(vault_path, folder, ext)
    if total:
        print(len(files))
        return 0

    emit_list(files, fmt)
    return 0
