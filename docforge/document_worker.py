"""Processing of document nodes into written content."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class DocumentWorkTask:
    """A node of the documentation structure to process and write."""

    node: Any


class DocumentWorker:
    """Renders document nodes and hands the result to a writer.

    The content processor is any object with ``process(reader, node)``
    returning the rendered bytes of the node.
    """

    def __init__(
        self,
        reader: Any,
        writer: Any,
        node_content_processor: Any,
        github_info: Any = None,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.node_content_processor = node_content_processor
        self.github_info = github_info

    def __call__(self, task: Any) -> None:
        if not isinstance(task, DocumentWorkTask):
            raise TypeError(f"incorrect document work task: {type(task).__name__}")
        node = task.node
        path = node.path("/")
        content = None
        if node.is_document():
            content = self.node_content_processor.process(self.reader, node)
            if not content:
                logger.warning(
                    "document node processing halted: no content assigned to document node %s/%s",
                    path,
                    node.name,
                )
                return
            content = bytes(content)
        self.writer.write(node.name, path, content, node)
        if self.github_info is not None and content:
            self.github_info.write_github_info(node)