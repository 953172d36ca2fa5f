from __future__ import annotations

import pytest

from docforge.frontmatter import FrontmatterProcessor, aggregate_frontmatter


class FakeNode:
    def __init__(self, name, properties=None, parent=None):
        self.name = name
        self.properties = properties
        self._parent = parent

    def parent(self):
        return self._parent

    def full_name(self, sep):
        return self.name if self._parent is None else f"{self._parent.full_name(sep)}{sep}{self.name}"

    def path(self, sep):
        return "" if self._parent is None else self._parent.full_name(sep)


def test_title_added_from_node_name():
    node = FakeNode("getting-started_guide.md")
    result = FrontmatterProcessor(node).process({})
    assert result["title"] == "Getting Started Guide"


def test_title_keeps_inner_letters():
    node = FakeNode("my-API.md")
    assert FrontmatterProcessor(node).node_title() == "My API"


def test_existing_title_kept():
    node = FakeNode("doc.md")
    result = FrontmatterProcessor(node).process({"title": "Kept"})
    assert result == {"title": "Kept"}


def test_none_frontmatter_gets_title():
    node = FakeNode("doc.md", properties={"frontmatter": {"title": "From node"}})
    assert FrontmatterProcessor(node).process(None) == {"title": "From node"}


def test_node_frontmatter_overrides_document():
    node = FakeNode("doc.md", properties={"frontmatter": {"weight": 2, "title": "Node"}})
    doc = {"weight": 1, "tags": ["a"]}
    result = FrontmatterProcessor(node).process(doc)
    assert result == {"weight": 2, "title": "Node", "tags": ["a"]}
    assert result is doc


def test_parent_frontmatter_overrides_for_section_file():
    parent = FakeNode("section", properties={"frontmatter": {"weight": 9}})
    node = FakeNode("_index.md", properties={"frontmatter": {"weight": 3, "title": "T"}}, parent=parent)
    result = FrontmatterProcessor(node).process({"weight": 1})
    assert result == {"weight": 9, "title": "T"}


def test_parent_frontmatter_ignored_for_regular_document():
    parent = FakeNode("section", properties={"frontmatter": {"weight": 9}})
    node = FakeNode("doc.md", properties={"frontmatter": {"title": "T"}}, parent=parent)
    result = FrontmatterProcessor(node).process({"weight": 1})
    assert result == {"weight": 1, "title": "T"}


def test_invalid_node_frontmatter_raises():
    node = FakeNode("doc.md", properties={"frontmatter": "not a map"})
    with pytest.raises(ValueError, match="invalid frontmatter properties for node: doc.md"):
        FrontmatterProcessor(node).process({})


def test_invalid_parent_frontmatter_raises():
    parent = FakeNode("section", properties={"frontmatter": ["x"]})
    node = FakeNode("_index.md", parent=parent)
    with pytest.raises(ValueError, match="invalid frontmatter properties"):
        FrontmatterProcessor(node).process({})


def test_index_file_title_from_parent():
    parent = FakeNode("parent")
    node = FakeNode("_index.md", parent=parent)
    assert FrontmatterProcessor(node).node_title() == "Parent"


def test_configured_index_file_title_from_parent():
    parent = FakeNode("section")
    node = FakeNode("README.md", parent=parent)
    processor = FrontmatterProcessor(node, index_file_names=["readme.md"])
    assert processor.node_title() == FrontmatterProcessor(FakeNode("section.md")).node_title()


def test_index_file_without_parent_uses_own_name():
    node = FakeNode("readme.md")
    processor = FrontmatterProcessor(node, index_file_names=["readme.md"])
    assert processor.node_title() == "Readme"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("_index.md", True), ("README.MD", True), ("Read.Me", True), ("other.md", False), ("_INDEX.md", False)],
)
def test_is_index_file(name, expected):
    processor = FrontmatterProcessor(FakeNode("x.md"), index_file_names=["readme.md", "read.me"])
    assert processor.is_index_file(name) is expected


def test_aggregate_earlier_wins():
    metas = [{"title": "first", "a": 1}, {"title": "second", "b": 2}, None, {"b": 3, "c": 4}]
    assert aggregate_frontmatter(metas) == {"title": "first", "a": 1, "b": 2, "c": 4}


def test_aggregate_empty():
    assert aggregate_frontmatter([]) == {}
    assert aggregate_frontmatter([None, {}]) == {}


def test_aggregate_does_not_modify_inputs():
    first = {"a": 1}
    second = {"a": 2, "b": 3}
    result = aggregate_frontmatter([first, second])
    assert result == {"a": 1, "b": 3}
    assert first == {"a": 1}
    assert second == {"a": 2, "b": 3}