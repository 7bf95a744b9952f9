"""Records produced by vault queries."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class WikiLink:
    """A single ``[[...]]`` or ``![[...]]`` occurrence in a note."""

    title: str  # target title, surrounding whitespace trimmed
    heading: str = ""  # text after '#', verbatim
    display: str = ""  # text after '|', verbatim
    is_embed: bool = False  # '![[...]]' transclusion
    raw: str = ""  # exact matched text
    start: int = 0  # span of ``raw`` in the parsed text
    end: int = 0


@dataclass
class OutgoingLink:
    """A unique outgoing link target and where it resolves."""

    target: str
    path: str | None  # relative path of the resolved note
    broken: bool

    def to_dict(self) -> dict:
        return {"target": self.target, "path": self.path or "", "broken": self.broken}


@dataclass
class UnresolvedLink:
    """A link target that matches no title or alias, with its first source."""

    target: str
    source: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Task:
    """A markdown checkbox item."""

    text: str
    done: bool
    line: int  # 1-based
    file: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchResult:
    title: str
    path: str

    def to_dict(self) -> dict:
        return asdict(self)
