"""Resolution of links found in document content.

Links to documents of the structure become relative paths between nodes.
Embeddable resources are scheduled for download and pointed at the
resources location. Other links become absolute and are queued for
validation.
"""

from __future__ import annotations

import hashlib
import logging
import re
import threading
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, unquote, urlsplit

from docforge.config import Hugo
from docforge.downloader import DownloadTask
from docforge.reader import ResourceNotFoundError

logger = logging.getLogger(__name__)

SECTION_FILE = "_index.md"
CONTAINER_NODE_SOURCE_LOCATION = "container_node_source_location"

_INTERNAL_HOSTS = frozenset({"github.tools.sap", "raw.github.tools.sap", "github.wdf.sap.corp"})
_ORGANIZATION_HOSTS = frozenset({"github.com", "raw.githubusercontent.com"})
_ORGANIZATION_PATH_PREFIX = "/gardener/"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _parse_url(raw: str) -> SplitResult:
    """Split ``raw`` into URL parts, rejecting what is not a valid URL."""
    for char in raw:
        if ord(char) < 0x20 or ord(char) == 0x7F:
            raise ValueError(f"parse {raw!r}: invalid control character in URL")
    if raw.startswith(":"):
        raise ValueError(f"parse {raw!r}: missing protocol scheme")
    parsed = urlsplit(raw)
    for part in (parsed.path, parsed.fragment):
        bad = _BAD_ESCAPE.search(part)
        if bad:
            raise ValueError(f"parse {raw!r}: invalid URL escape {part[bad.start():bad.start() + 3]!r}")
    return parsed


def _as_split(url: Any) -> SplitResult:
    return url if isinstance(url, SplitResult) else _parse_url(url)


def _host(parsed: SplitResult) -> str:
    return parsed.netloc.rpartition("@")[2]


def _query_and_fragment(raw: str) -> str:
    """Return the ``?query#fragment`` tail of ``raw``, keeping an empty forced query."""
    rest, _, fragment = raw.partition("#")
    _, question, query = rest.partition("?")
    suffix = f"?{query}" if question else ""
    if fragment:
        suffix += f"#{fragment}"
    return suffix


def _path_base(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _path_ext(path: str) -> str:
    last = path.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


@dataclass
class LinkInfo:
    """A markdown link being resolved.

    ``url`` is the link as parsed, without a trailing slash; ``destination``
    is updated as the link is rewritten.
    """

    url: str
    original_destination: str
    destination: str
    is_embeddable: bool = False
    destination_node: Any = None

    @property
    def parsed(self) -> SplitResult:
        return _parse_url(self.url)


class SourceLocations:
    """Thread-safe index of structure nodes by the sources they are built from."""

    def __init__(self, locations: dict[str, list[Any]] | None = None) -> None:
        self._locations: dict[str, list[Any]] = {
            source: list(nodes) for source, nodes in (locations or {}).items()
        }
        self._lock = threading.RLock()

    def add(self, node: Any) -> None:
        """Index ``node`` and its descendants by their sources."""
        with self._lock:
            self._add(node)

    def _add(self, node: Any) -> None:
        if node.source:
            self._locations.setdefault(node.source, []).append(node)
        elif node.multi_source:
            for source in node.multi_source:
                self._locations.setdefault(source, []).append(node)
        elif node.properties:
            location = node.properties.get(CONTAINER_NODE_SOURCE_LOCATION)
            if isinstance(location, str):
                self._locations.setdefault(location, []).append(node)
                del node.properties[CONTAINER_NODE_SOURCE_LOCATION]
        for child in node.nodes or []:
            self._add(child)

    def get(self, source: str) -> list[Any]:
        """Return the nodes built from ``source``; empty if there are none."""
        with self._lock:
            return list(self._locations.get(source, ()))


def download_embeddable(url: Any) -> bool:
    """Return whether an embeddable resource at ``url`` is to be downloaded.

    Relative links are always downloaded; absolute ones only from internal
    hosts or from the own organisation on the public hosts.
    """
    parsed = _as_split(url)
    if not parsed.scheme:
        return True
    host = _host(parsed)
    if host in _INTERNAL_HOSTS:
        return True
    if parsed.path.startswith(_ORGANIZATION_PATH_PREFIX):
        return host in _ORGANIZATION_HOSTS
    return False


def find_visible_node(node: Any) -> Any:
    """Return the node a link can point to without showing an empty page.

    That is the node itself if it is a document, otherwise the nearest
    container, starting from the node, that holds a section file; None if
    there is none.
    """
    while node is not None and not node.is_document():
        if any(child.name == SECTION_FILE for child in node.nodes or []):
            return node
        node = node.parent()
    return node


def swap_paths(path: str, new_path: str) -> bool:
    """Return whether ``new_path`` is preferred over ``path``.

    Descending paths beat ascending ones, then shorter paths win.
    """
    if path == "":
        return True
    if not path.startswith("./") and new_path.startswith("./"):
        return True
    return path.count("/") > new_path.count("/")


def build_download_destination(node: Any, resource_name: str, root: str) -> str:
    """Return the link from ``node`` to ``resource_name`` stored under ``root``.

    A root starting with ``/`` gives a path from the document root;
    otherwise the path is relative to the node, e.g. ``../__resources/x.png``.
    """
    if root.startswith("/"):
        return f"{root}/{resource_name}"
    ups = max(len(node.parents()) - 1, 0)
    return "../" * ups + f"{root}/{resource_name}"


class LinkResolver:
    """Resolves the links of one source document of a node."""

    def __init__(
        self,
        node: Any,
        source: str,
        resource_handlers: Any,
        validator: Any,
        downloader: Any,
        source_locations: SourceLocations | None = None,
        resources_root: str = "",
        hugo: Hugo | None = None,
    ) -> None:
        self.node = node
        self.source = source
        self.resource_handlers = resource_handlers
        self.validator = validator
        self.downloader = downloader
        self.source_locations = source_locations if source_locations is not None else SourceLocations()
        self.resources_root = resources_root
        self.hugo = hugo if hugo is not None else Hugo()

    def _rewrite(self, link: LinkInfo, destination: str) -> None:
        if link.destination != destination:
            logger.debug("[%s] %s -> %s", self.source, link.destination, destination)
            link.destination = destination

    def resolve_link(self, dest: str, is_embeddable: bool) -> str:
        """Return the destination that ``dest`` is rewritten to."""
        trimmed = dest.removesuffix("/")
        _parse_url(trimmed)
        link = LinkInfo(
            url=trimmed,
            original_destination=dest,
            destination=dest,
            is_embeddable=is_embeddable,
        )
        self.resolve_base_link(link)
        if is_embeddable:
            self.raw_link(link)
        if self.hugo.enabled:
            self.rewrite_destination(link)
        return link.destination

    def resolve_base_link(self, link: LinkInfo) -> None:
        """Rewrite ``link`` to a structure node, a download location or an absolute link."""
        if link.destination.startswith("#") or link.destination.startswith("mailto:"):
            return
        parsed = link.parsed
        if parsed.scheme:
            if self.resource_handlers.get(link.destination) is None:
                self.validator.validate_link(parsed, link.destination, self.source)
                return
            abs_link = link.destination
        else:
            handler = self.resource_handlers.get(self.source)
            try:
                abs_link = handler.build_abs_link(self.source, link.destination)
            except ResourceNotFoundError as err:
                logger.warning(
                    "failed to validate absolute link for %s from source %s: %s",
                    link.destination,
                    self.source,
                    err,
                )
                self._rewrite(link, err.uri)
                return
        abs_url = urlsplit(abs_link)
        key = f"{abs_url.scheme}://{_host(abs_url)}{unquote(abs_url.path)}"

        best_path = ""
        for candidate in self.source_locations.get(key.removesuffix("/")):
            visible = find_visible_node(candidate)
            if visible is None:
                continue
            relative = self.node.relative_path(visible)
            if swap_paths(best_path, relative):
                best_path = relative
                link.destination_node = visible
        if link.destination_node is not None:
            self._rewrite(link, best_path + _query_and_fragment(link.url))
            return

        if link.is_embeddable and download_embeddable(parsed):
            digest = hashlib.md5(key.encode()).hexdigest()[:6]
            path = unquote(parsed.path)
            ext = _path_ext(path)
            name = "$name_$hash$ext"
            name = name.replace("$name", _path_base(path).removesuffix(ext))
            name = name.replace("$hash", digest)
            name = name.replace("$ext", ext)
            self._rewrite(link, build_download_destination(self.node, name, self.resources_root))
            self.downloader.schedule(
                DownloadTask(
                    source=abs_link,
                    target=name,
                    referer=self.source,
                    reference=link.destination,
                )
            )
            return

        self._rewrite(link, abs_link)
        if parsed.scheme:
            self.validator.validate_link(abs_url, link.destination, self.source)

    def raw_link(self, link: LinkInfo) -> None:
        """Rewrite an absolute link to an embedded object into its raw form."""
        if not _parse_url(link.destination).scheme:
            return
        handler = self.resource_handlers.get(link.destination)
        if handler is None:
            return
        self._rewrite(link, handler.get_raw_format_link(link.destination))

    def rewrite_destination(self, link: LinkInfo) -> None:
        """Rewrite a relative destination for a Hugo site."""
        parsed = _parse_url(link.destination)
        if parsed.scheme or link.destination.startswith(("/", "#")):
            return
        base = self.hugo.base_url
        if base:
            base = base.removesuffix("/")
            if not base.startswith("/"):
                base = f"/{base}"
        target = link.destination_node
        if target is not None:
            node_path = target.full_name("/").lower()
            if node_path.endswith(".md"):
                node_path = node_path[:-3]
            node_path = node_path.removesuffix("_index")
            if not node_path.endswith("/"):
                node_path += "/"
            if not self.hugo.pretty_urls:
                node_path = node_path.removesuffix("/") + ".html"
            frontmatter = (target.properties or {}).get("frontmatter")
            if isinstance(frontmatter, dict):
                url_value = frontmatter.get("url")
                if isinstance(url_value, str):
                    try:
                        _parse_url(url_value)
                    except ValueError:
                        logger.warning("Invalid frontmatter url: %s for %s", url_value, target.source)
                    else:
                        node_path = url_value
            node_path = f"{base}/{node_path.removeprefix('/')}"
            self._rewrite(link, node_path + _query_and_fragment(link.destination))
        elif link.is_embeddable:
            embedded = link.destination
            while embedded.startswith("../"):
                embedded = embedded[3:]
            self._rewrite(link, f"{self.hugo.base_url}/{embedded}")