"""Front matter handling for rendered documents in Hugo mode."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

SECTION_FILE = "_index.md"


def _is_separator(char: str) -> bool:
    if char.isascii():
        return not (char.isalnum() or char == "_")
    if char.isalpha() or char.isdigit():
        return False
    return char.isspace()


def _title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the other letters alone."""
    chars = []
    previous = " "
    for char in text:
        chars.append(char.upper() if _is_separator(previous) else char)
        previous = char
    return "".join(chars)


def aggregate_frontmatter(metas: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """Merge the front matter of several documents into one.

    Where documents share a key, the value of the earliest document wins.
    Missing (``None``) front matter is skipped.
    """
    aggregated: dict[str, Any] = {}
    for meta in reversed(list(metas)):
        if meta:
            aggregated.update(meta)
    return aggregated


@dataclass
class FrontmatterProcessor:
    """Completes the front matter of a document node.

    The node must offer ``name``, ``properties``, ``parent()``,
    ``full_name(sep)`` and ``path(sep)``.
    """

    node: Any
    index_file_names: list[str] = field(default_factory=list)

    def _node_meta(self, node: Any, describe: str) -> dict[str, Any]:
        properties = getattr(node, "properties", None) or {}
        if "frontmatter" not in properties:
            return {}
        meta = properties["frontmatter"]
        if not isinstance(meta, dict):
            raise ValueError(f"invalid frontmatter properties for node: {describe}")
        return meta

    def process(self, doc_frontmatter: dict[str, Any] | None) -> dict[str, Any]:
        """Overlay node and section front matter on ``doc_frontmatter``.

        Front matter from the node properties overrides the document's; for a
        section file the parent's front matter overrides both. A title derived
        from the node name is added when none is present. Raises ValueError
        when a node carries front matter that is not a mapping.
        """
        result = doc_frontmatter if doc_frontmatter is not None else {}
        node_meta = self._node_meta(self.node, self.node.full_name("/"))
        parent_meta: dict[str, Any] = {}
        parent = self.node.parent()
        if self.node.name == SECTION_FILE and parent is not None:
            parent_meta = self._node_meta(parent, self.node.path("/"))
        result.update(node_meta)
        result.update(parent_meta)
        if "title" not in result:
            result["title"] = self.node_title()
        return result

    def node_title(self) -> str:
        """Return a title made from the node name, or its parent's for index files."""
        title = self.node.name
        parent = self.node.parent()
        if parent is not None and self.is_index_file(self.node.name):
            title = parent.name
        title = title.removesuffix(".md").replace("_", " ").replace("-", " ")
        return _title_case(title)

    def is_index_file(self, name: str) -> bool:
        """Return whether ``name`` is a configured index file name or ``_index.md``."""
        folded = name.casefold()
        if any(folded == candidate.casefold() for candidate in self.index_file_names):
            return True
        return name == SECTION_FILE