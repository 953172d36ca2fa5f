"""Resolution helpers for documentation manifests: node names, section files
and front-matter filter rules."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import Any

from docforge.config import Hugo

logger = logging.getLogger(__name__)

SECTION_FILE = "_index.md"
_DEFAULT_NAME_EXPRESSION = "$name$ext"


def _hugo_enabled(hugo: Hugo | None) -> bool:
    return hugo is not None and hugo.enabled


def resolve_node_names(nodes: Iterable[Any], registry: Any, hugo: Hugo | None = None) -> None:
    """Evaluate name expressions of explicitly defined document nodes.

    A missing name defaults to ``$name$ext``; ``$name``, ``$uuid`` and ``$ext``
    are replaced using the resource handler for the node source. In Hugo mode
    a node with the property ``index: true`` is renamed to ``_index.md``.
    Every document name ends up with a ``.md`` suffix. Containers are
    resolved recursively. Raises LookupError if no handler accepts a source.
    """
    for node in nodes:
        if not node.is_document():
            resolve_node_names(node.nodes or [], registry, hugo)
            continue
        if node.source:
            name = node.name or _DEFAULT_NAME_EXPRESSION
            if "$" in name:
                handler = registry.get(node.source)
                if handler is None:
                    raise LookupError(f"no suitable handler registered for URL {node.source}")
                resource_name, ext = handler.resource_name(node.source)
                name = name.replace("$name", resource_name)
                name = name.replace("$uuid", str(uuid.uuid4()))
                name = name.replace("$ext", ext)
                node.name = name
        if _hugo_enabled(hugo) and node.properties:
            index = node.properties.get("index")
            if isinstance(index, bool) and index:
                node.name = SECTION_FILE
        if not node.name.endswith(".md"):
            node.name = f"{node.name}.md"


def resolve_section_files(container: Any, hugo: Hugo | None) -> None:
    """Pick section files (``_index.md``) for containers that lack one.

    Candidates are document nodes whose names match the configured index
    file names, case-insensitively, tried in the configured order.
    """
    children = container.nodes or []
    has_section_file = any(n.is_document() and n.name == SECTION_FILE for n in children)
    index_names = hugo.index_file_names if hugo is not None else []
    if not has_section_file and index_names:
        for index_name in index_names:
            wanted = index_name.casefold()
            match = next(
                (n for n in children if n.is_document() and n.name.casefold() == wanted),
                None,
            )
            if match is not None:
                logger.debug("renaming %s -> %s", match.full_name("/"), SECTION_FILE)
                match.name = SECTION_FILE
    for node in children:
        if not node.is_document():
            resolve_section_files(node, hugo)


def is_visited(visited: Iterable[str], path: str) -> bool:
    """Return whether ``path`` is already on the stack of visited manifests."""
    return path in visited


def match_path(path_pattern: str, path: str) -> bool:
    """Match ``path`` against a pattern that may hold a single ``**`` wildcard."""
    if path_pattern == path:
        return True
    parts = path_pattern.split("**")
    if len(parts) == 2:
        return path.startswith(parts[0]) and path.endswith(parts[1])
    return False


def _deep_equal(a: Any, b: Any) -> bool:
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    return type(a) is type(b) and a == b


def _match_rule(path_pattern: str, value: Any, parts: tuple[str, ...], data: Any) -> bool:
    if match_path(path_pattern, "".join(parts)) and _deep_equal(value, data):
        return True
    if isinstance(data, list):
        return any(
            _match_rule(path_pattern, value, parts + (f"[{i}]",), item)
            for i, item in enumerate(data)
        )
    if isinstance(data, dict):
        prefix = parts if parts[-1] == "." else parts + (".",)
        return any(
            _match_rule(path_pattern, value, prefix + (str(key),), item)
            for key, item in data.items()
        )
    return False


def match_front_matter_rule(path: str, value: Any, data: Any) -> bool:
    """Return whether ``data`` holds ``value`` at a location matching ``path``.

    Paths use a simplified JSONPath-like notation: ``.`` is the root object,
    ``.a.b`` is key ``b`` in map ``a``, ``.a.b[1]`` is index 1 of list ``b``,
    and one ``**`` wildcard may stand for any run of path nodes.
    """
    return _match_rule(path, value, (".",), data)