"""CLI entrypoint for vlt."""

import sys
from pathlib import Path

import click

from . import __version__
from .output import FORMATS

format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="plain",
    show_default=True,
    help="Output format",
)


def _vault(ctx: click.Context) -> Path:
    """Resolve the selected vault on first use."""
    from .config import resolve_vault
    from .vault.errors import VaultNotFoundError

    obj = ctx.find_root().obj
    if "vault" not in obj:
        name = obj.get("vault_name")
        if not name:
            raise click.UsageError("Vault not specified. Pass --vault NAME_OR_PATH or set VLT_VAULT.")
        try:
            obj["vault"] = resolve_vault(name)
        except VaultNotFoundError as e:
            raise click.BadParameter(str(e), param_hint="--vault / -v") from e
        except ValueError as e:
            raise click.ClickException(str(e)) from e
    return obj["vault"]


def _audit(ctx: click.Context) -> bool:
    return ctx.find_root().obj.get("audit", False)


def _content(content: str | None) -> str:
    """The --content value, else whatever is piped on stdin."""
    if content is not None:
        return content
    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        return ""
    return stdin.read()


@click.group()
@click.version_option(__version__, prog_name="vlt")
@click.option(
    "--vault",
    "-v",
    "vault_name",
    envvar="VLT_VAULT",
    default=None,
    help="Vault name (from the Obsidian config) or path to the vault directory [env: VLT_VAULT]",
)
@click.option(
    "--audit/--no-audit",
    envvar="VLT_AUDIT",
    default=False,
    help="Record state-changing operations in <vault>/.vlt/audit.log [env: VLT_AUDIT]",
)
@click.pass_context
def cli(ctx: click.Context, vault_name: str | None, audit: bool) -> None:
    """vlt - Obsidian vault CLI that works directly on the filesystem.

    Read, search, create and move notes, edit frontmatter properties, and
    query the wiki-link graph without the Obsidian app running.
    """
    ctx.ensure_object(dict)
    ctx.obj["vault_name"] = vault_name
    ctx.obj["audit"] = audit


# -----------------------------------------------------------------------------
# Notes
# -----------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@click.pass_context
def read(ctx: click.Context, title: str) -> None:
    """Print a note, found by title or alias."""
    from .commands.notes import run_read

    sys.exit(run_read(_vault(ctx), title))


@cli.command()
@click.argument("query")
@click.option("--path", "folder", default=None, help="Only search under this folder")
@format_option
@click.pass_context
def search(ctx: click.Context, query: str, folder: str | None, fmt: str) -> None:
    """Find notes whose title or content contains QUERY.

    [key:value] terms in QUERY filter on frontmatter properties, e.g.
    "meeting [status:active]".
    """
    from .commands.notes import run_search

    sys.exit(run_search(_vault(ctx), query, folder=folder, fmt=fmt))


@cli.command()
@click.argument("name")
@click.argument("path")
@click.option("--content", default=None, help="Note content (default: piped stdin)")
@click.option("--silent", is_flag=True, help="Print nothing on success or when the note exists")
@click.pass_context
def create(ctx: click.Context, name: str, path: str, content: str | None, silent: bool) -> None:
    """Create note NAME at PATH (a .md path, or a folder). Never overwrites."""
    from .commands.notes import run_create

    exit_code = run_create(
        _vault(ctx),
        name,
        path,
        content=_content(content),
        silent=silent,
        audit=_audit(ctx),
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("title")
@click.option("--content", default=None, help="Text to append (default: piped stdin)")
@click.pass_context
def append(ctx: click.Context, title: str, content: str | None) -> None:
    """Append text to the end of a note."""
    from .commands.notes import run_append

    sys.exit(run_append(_vault(ctx), title, _content(content)))


@cli.command()
@click.argument("title")
@click.option("--content", default=None, help="Text to insert (default: piped stdin)")
@click.pass_context
def prepend(ctx: click.Context, title: str, content: str | None) -> None:
    """Insert text at the top of a note, after its frontmatter."""
    from .commands.notes import run_prepend

    sys.exit(run_prepend(_vault(ctx), title, _content(content)))


@cli.command()
@click.argument("src")
@click.argument("dst")
@click.pass_context
def move(ctx: click.Context, src: str, dst: str) -> None:
    """Move or rename a note, updating links to it across the vault."""
    from .commands.notes import run_move

    sys.exit(run_move(_vault(ctx), src, dst, audit=_audit(ctx)))


@cli.command()
@click.argument("title", required=False)
@click.option("--path", default=None, help="Delete by vault-relative path instead of title")
@click.option("--permanent", is_flag=True, help="Remove the file instead of moving it to .trash/")
@click.pass_context
def delete(ctx: click.Context, title: str | None, path: str | None, permanent: bool) -> None:
    """Move a note to .trash/ (or delete it with --permanent)."""
    from .commands.notes import run_delete

    if not title and not path:
        raise click.UsageError("delete requires TITLE or --path")

    sys.exit(run_delete(_vault(ctx), title=title, path=path, permanent=permanent, audit=_audit(ctx)))


@cli.command()
@click.option("--folder", default=None, help="Only list files under this folder")
@click.option("--ext", default="md", show_default=True, help="File extension")
@click.option("--total", is_flag=True, help="Print only the number of files")
@format_option
@click.pass_context
def files(ctx: click.Context, folder: str | None, ext: str, total: bool, fmt: str) -> None:
    """List files in the vault."""
    from .commands.notes import run_files

    sys.exit(run_files(_vault(ctx), folder=folder, ext=ext, total=total, fmt=fmt))


# -----------------------------------------------------------------------------
# Properties
# -----------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@format_option
@click.pass_context
def properties(ctx: click.Context, title: str, fmt: str) -> None:
    """Show a note's frontmatter."""
    from .commands.properties import run_properties

    sys.exit(run_properties(_vault(ctx), title, fmt=fmt))


@cli.command("property:set")
@click.argument("title")
@click.argument("name")
@click.argument("value")
@click.pass_context
def property_set(ctx: click.Context, title: str, name: str, value: str) -> None:
    """Set frontmatter property NAME to VALUE."""
    from .commands.properties import run_property_set

    sys.exit(run_property_set(_vault(ctx), title, name, value, audit=_audit(ctx)))


@cli.command("property:remove")
@click.argument("title")
@click.argument("name")
@click.pass_context
def property_remove(ctx: click.Context, title: str, name: str) -> None:
    """Remove frontmatter property NAME."""
    from .commands.properties import run_property_remove

    sys.exit(run_property_remove(_vault(ctx), title, name, audit=_audit(ctx)))


# -----------------------------------------------------------------------------
# Link graph
# -----------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@format_option
@click.pass_context
def backlinks(ctx: click.Context, title: str, fmt: str) -> None:
    """List notes that link to or embed TITLE."""
    from .commands.links import run_backlinks

    sys.exit(run_backlinks(_vault(ctx), title, fmt=fmt))


@cli.command()
@click.argument("title")
@format_option
@click.pass_context
def links(ctx: click.Context, title: str, fmt: str) -> None:
    """List outgoing links of a note and flag broken ones."""
    from .commands.links import run_links

    sys.exit(run_links(_vault(ctx), title, fmt=fmt))


@cli.command()
@format_option
@click.pass_context
def orphans(ctx: click.Context, fmt: str) -> None:
    """List notes that no other note links to."""
    from .commands.links import run_orphans

    sys.exit(run_orphans(_vault(ctx), fmt=fmt))


@cli.command()
@format_option
@click.pass_context
def unresolved(ctx: click.Context, fmt: str) -> None:
    """List link targets that match no note title or alias."""
    from .commands.links import run_unresolved

    sys.exit(run_unresolved(_vault(ctx), fmt=fmt))


# -----------------------------------------------------------------------------
# Tags
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--counts", is_flag=True, help="Show how many notes carry each tag")
@click.option(
    "--sort",
    type=click.Choice(["name", "count"]),
    default="name",
    show_default=True,
    help="Sort tags by name or by note count",
)
@format_option
@click.pass_context
def tags(ctx: click.Context, counts: bool, sort: str, fmt: str) -> None:
    """List frontmatter and inline tags across the vault."""
    from .commands.tags import run_tags

    sys.exit(run_tags(_vault(ctx), counts=counts, sort=sort, fmt=fmt))


@cli.command()
@click.argument("name")
@format_option
@click.pass_context
def tag(ctx: click.Context, name: str, fmt: str) -> None:
    """List notes tagged NAME, including nested tags (NAME/child)."""
    from .commands.tags import run_tag

    sys.exit(run_tag(_vault(ctx), name, fmt=fmt))


# -----------------------------------------------------------------------------
# Tasks, vaults, history
# -----------------------------------------------------------------------------


@cli.command()
@click.option("--file", "title", default=None, help="Only tasks from this note")
@click.option("--path", "folder", default=None, help="Only tasks under this folder")
@click.option("--done", is_flag=True, help="Only completed tasks")
@click.option("--pending", is_flag=True, help="Only open tasks")
@format_option
@click.pass_context
def tasks(
    ctx: click.Context,
    title: str | None,
    folder: str | None,
    done: bool,
    pending: bool,
    fmt: str,
) -> None:
    """List checkbox tasks (- [ ] / - [x])."""
    from .commands.tasks import run_tasks

    exit_code = run_tasks(_vault(ctx), title=title, folder=folder, done=done, pending=pending, fmt=fmt)
    sys.exit(exit_code)


@cli.command()
@format_option
def vaults(fmt: str) -> None:
    """List vaults registered with Obsidian."""
    from .commands.vaults import run_vaults

    sys.exit(run_vaults(fmt=fmt))


@cli.command()
@click.option("--last", "-n", type=int, default=None, help="Show only the last N entries")
@click.pass_context
def history(ctx: click.Context, last: int | None) -> None:
    """Show the audit log of state-changing operations."""
    from .commands.vaults import run_history

    sys.exit(run_history(_vault(ctx), last=last))


if __name__ == "__main__":
    cli()
