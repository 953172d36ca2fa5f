"""Writing GitHub info for document nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from docforge.reader import ResourceNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class GitHubInfoTask:
    """A request to write the GitHub info of a node."""

    node: Any


class GitHubInfo:
    """Puts GitHub info tasks on a task queue."""

    def __init__(self, queue: Any) -> None:
        self.queue = queue

    def write_github_info(self, node: Any) -> bool:
        """Enqueue a task for ``node``; return whether it was accepted."""
        added = bool(self.queue.add_task(GitHubInfoTask(node=node)))
        if not added:
            logger.warning("scheduling github info write failed for node %r", node)
        return added


class GitHubInfoWorker:
    """Reads the GitHub info of every source of a node and writes it."""

    def __init__(self, reader: Any, writer: Any) -> None:
        self.reader = reader
        self.writer = writer

    def __call__(self, task: Any) -> None:
        if not isinstance(task, GitHubInfoTask):
            raise TypeError(f"incorrect github info task: {type(task).__name__}")
        node = task.node
        sources = ([node.source] if node.source else []) + list(node.multi_source or [])
        if not sources:
            logger.debug("skip git info for container node: %r", node)
            return
        parts = []
        for source in sources:
            logger.debug("reading git info for %s", source)
            try:
                info = self.reader.read(source)
            except ResourceNotFoundError as err:
                logger.warning("reading GitHub info for %s fails: %s", source, err)
                continue
            except Exception as err:
                raise RuntimeError(f"failed to read git info for {source}: {err}") from err
            if info is not None:
                parts.append(info)
        node_path = node.path("/")
        logger.debug("writing git info for node %s/%s", node_path, node.name)
        self.writer.write(node.name, node_path, b"".join(parts), node)


def github_info_worker_func(reader: Any, writer: Any) -> GitHubInfoWorker:
    """Return a worker that writes GitHub info with ``reader`` and ``writer``."""
    if reader is None:
        raise ValueError("invalid argument: reader is None")
    if writer is None:
        raise ValueError("invalid argument: writer is None")
    return GitHubInfoWorker(reader, writer)