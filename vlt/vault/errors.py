"""Errors raised by vault lookups and vault-wide rewrites."""


class NoteNotFoundError(LookupError):
    """No note matches the queried title by filename or alias."""

    def __init__(self, title: str):
        super().__init__(f'note "{title}" not found')
        self.title = title


class VaultNotFoundError(LookupError):
    """A vault name could not be mapped to a directory."""

    def __init__(self, name: str, reason: str = "not found"):
        super().__init__(f'vault "{name}" {reason}')
        self.name = name


class LinkUpdateError(RuntimeError):
    """A vault-wide link rewrite stopped part way through.

    ``modified`` notes were already rewritten before the write to ``path``
    failed; the remaining notes were left untouched.
    """

    def __init__(self, path: str, modified: int):
        super().__init__(f"failed to update {path} after updating {modified} file(s)")
        self.path = path
        self.modified = modified
