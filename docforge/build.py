"""Helpers for the build phase of a documentation structure."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from docforge.document_worker import DocumentWorkTask


def document_tasks(nodes: Iterable[Any]) -> list[DocumentWorkTask]:
    """Return a work task for every node, in depth-first pre-order."""
    tasks: list[DocumentWorkTask] = []
    for node in nodes:
        tasks.append(DocumentWorkTask(node=node))
        children = getattr(node, "nodes", None)
        if children:
            tasks.extend(document_tasks(children))
    return tasks


def collect_errors(queues: Iterable[Any]) -> list[Exception]:
    """Gather the errors recorded by task queues, in the order of the queues.

    Queues that are ``None`` are skipped. Each queue exposes its failures
    as an ``errors`` sequence, which may be empty or ``None``.
    """
    collected: list[Exception] = []
    for queue in queues:
        if queue is None:
            continue
        collected.extend(getattr(queue, "errors", None) or ())
    return collected