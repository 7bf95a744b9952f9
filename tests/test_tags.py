import json
from pathlib import Path

import pytest

from vlt.commands.tags import run_tag, run_tags
from vlt.vault.tags import count_tags, find_tagged, note_tags


def test_note_tags_merge_frontmatter_and_inline() -> None:
    text = "---\ntags: [project, important]\n---\n\n# My Note\n\nSome #inline-tag and #project again.\n"

    assert note_tags(text) == ["project", "important", "inline-tag"]


def test_note_tags_ignore_case() -> None:
    assert note_tags("---\ntags: [Project]\n---\n\n#project again\n") == ["project"]


def test_note_tags_without_frontmatter() -> None:
    assert note_tags("# My Note\n\nJust #inline tags here.\n") == ["inline"]


def test_note_tags_skip_hash_inside_frontmatter() -> None:
    text = '---\ncolor: "#fff"\ntags:\n  - "#draft"\n---\nbody\n'

    assert note_tags(text) == ["draft"]


@pytest.fixture
def tagged_vault(vault: Path, write_note) -> Path:
    write_note("note1.md", "---\ntags: [project, important]\n---\n\n# Note 1\n")
    write_note("note2.md", "# Note 2\n\nSome #project and #review content.\n")
    write_note(".obsidian/hidden.md", "#hidden-tag should be skipped\n")
    write_note("methodology/Agent.md", "---\ntags: [project/backend]\n---\n\n# Agent\n")
    return vault


def test_count_tags(tagged_vault: Path) -> None:
    assert count_tags(tagged_vault) == {"project": 2, "important": 1, "review": 1, "project/backend": 1}


def test_tags_plain(tagged_vault: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_tags(tagged_vault) == 0

    assert capsys.readouterr().out == "#important\n#project\n#project/backend\n#review\n"


def test_tags_counts_sorted_by_count(tagged_vault: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_tags(tagged_vault, counts=True, sort="count") == 0
    assert capsys.readouterr().out.splitlines() == [
        "#project\t2",
        "#important\t1",
        "#project/backend\t1",
        "#review\t1",
    ]

    assert run_tags(tagged_vault, counts=True, fmt="json") == 0
    assert json.loads(capsys.readouterr().out)[1] == {"tag": "project", "count": 2}


def test_tag_includes_nested_tags(tagged_vault: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert find_tagged(tagged_vault, "project/backend") == ["methodology/Agent.md"]
    assert find_tagged(tagged_vault, "project") == ["methodology/Agent.md", "note1.md", "note2.md"]
    assert find_tagged(tagged_vault, "proj") == []

    assert run_tag(tagged_vault, "project/backend") == 0
    assert capsys.readouterr().out == "methodology/Agent.md\n"


def test_tag_strips_leading_hash(vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
    write_note("note.md", "---\ntags: [meeting]\n---\n\n# Note\n")

    assert run_tag(vault, "#Meeting") == 0
    assert capsys.readouterr().out == "note.md\n"


def test_tag_requires_a_name(vault: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_tag(vault, "#") == 1
    assert "no tag given" in capsys.readouterr().err
