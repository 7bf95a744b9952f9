import pytest

from vlt.vault.frontmatter import (
    extract_frontmatter,
    get_list,
    get_value,
    load_properties,
    read_aliases,
    read_frontmatter_block,
    remove_property,
    set_property,
)

NOTE = "---\ntitle: Plan\naliases:\n  - PM\n  - Project Plan\nstatus: active\n---\n# Body\n"


def test_extract_frontmatter() -> None:
    block, body_start, found = extract_frontmatter(NOTE)

    assert found
    assert block == "title: Plan\naliases:\n  - PM\n  - Project Plan\nstatus: active"
    assert NOTE.split("\n")[body_start] == "# Body"


def test_extract_requires_leading_delimiter() -> None:
    assert extract_frontmatter("# Title\n---\na: b\n---\n") == ("", 0, False)
    assert extract_frontmatter("---\nunterminated: true\n") == ("", 0, False)


def test_get_list_forms() -> None:
    assert get_list("aliases: [A, B]", "aliases") == ["A", "B"]
    assert get_list("aliases:\n  - A\n  - B", "aliases") == ["A", "B"]
    assert get_list("aliases: Single", "aliases") == ["Single"]
    assert get_list("aliases: [A, null, 3]", "aliases") == ["A", "3"]
    assert get_list("other: x", "aliases") == []


def test_get_list_malformed_yaml_is_empty() -> None:
    assert get_list("aliases: [unclosed", "aliases") == []


def test_get_list_survives_malformed_sibling_key() -> None:
    assert get_list("title: Plan: Q3\naliases: [PM]", "aliases") == ["PM"]
    assert get_list("aliases:\n- A\n- B\ntitle: Plan: Q3", "aliases") == ["A", "B"]
    assert get_list("title: Plan: Q3\naliases: [unclosed", "aliases") == []
    assert get_value("title: Plan: Q3\nstatus: active", "status") == "active"


def test_get_value() -> None:
    block = "status: active\ndraft: true\nempty:"

    assert get_value(block, "status") == "active"
    assert get_value(block, "draft") == "true"
    assert get_value(block, "empty") is None
    assert get_value(block, "missing") is None


def test_read_aliases() -> None:
    assert read_aliases(NOTE) == ["PM", "Project Plan"]
    assert read_aliases("no frontmatter [[here]]") == []


def test_read_frontmatter_block_and_properties() -> None:
    assert read_frontmatter_block(NOTE) == NOTE.split("# Body")[0].rstrip("\n")
    assert read_frontmatter_block("# none") == ""
    assert load_properties(NOTE)["status"] == "active"


def test_set_property_replaces_existing_key() -> None:
    result = set_property(NOTE, "status", "done")

    assert "status: done" in result
    assert "status: active" not in result
    assert result.endswith("---\n# Body\n")


def test_set_property_replaces_block_list() -> None:
    result = set_property(NOTE, "aliases", "[X]")

    assert result == "---\ntitle: Plan\naliases: [X]\nstatus: active\n---\n# Body\n"


def test_set_property_inserts_before_closing_delimiter() -> None:
    result = set_property(NOTE, "due", "2024-05-01")

    assert result == "---\ntitle: Plan\naliases:\n  - PM\n  - Project Plan\nstatus: active\ndue: 2024-05-01\n---\n# Body\n"


def test_set_property_does_not_match_key_prefix() -> None:
    result = set_property("---\nstatus_note: x\n---\n", "status", "y")

    assert result == "---\nstatus_note: x\nstatus: y\n---\n"


def test_set_property_without_frontmatter_raises() -> None:
    with pytest.raises(ValueError):
        set_property("# plain\n", "a", "b")


def test_remove_property_with_block_list() -> None:
    result = remove_property(NOTE, "aliases")

    assert result == "---\ntitle: Plan\nstatus: active\n---\n# Body\n"


def test_remove_missing_property_is_unchanged() -> None:
    assert remove_property(NOTE, "missing") == NOTE
    assert remove_property("# plain", "a") == "# plain"
