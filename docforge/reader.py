"""Reading resource content through registered resource handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ResourceNotFoundError(Exception):
    """Raised when a resource does not exist at its location."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"resource {uri} not found")
        self.uri = uri


@dataclass
class GenericReader:
    """Reads resources by delegating to the handler registered for their URI.

    When ``is_github_info`` is set, the GitHub info of the resource is read
    instead of its content.
    """

    resource_handlers: Any = None
    is_github_info: bool = False

    def read(self, source: str) -> bytes:
        """Return the bytes at ``source``."""
        if self.resource_handlers is None:
            raise RuntimeError("resource handlers registry is not set")
        handler = self.resource_handlers.get(source)
        if handler is None:
            raise LookupError(f"failed to get handler to read from {source}")
        if self.is_github_info:
            return handler.read_git_info(source)
        return handler.read(source)