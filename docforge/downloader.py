"""Scheduling and downloading of resources linked from documents."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from docforge.reader import ResourceNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class DownloadTask:
    """Source and target of a linked document resource."""

    source: str = ""
    target: str = ""
    referer: str = ""
    reference: str = ""


class SchedulingError(Exception):
    """Raised when a task cannot be put on its queue."""


class DownloadScheduler:
    """Puts download tasks on a task queue."""

    def __init__(self, queue: Any) -> None:
        self.queue = queue

    def schedule(self, task: DownloadTask) -> None:
        """Enqueue ``task``; raise SchedulingError if the queue refuses it."""
        logger.debug(
            "[%s] linked resource %s scheduled for download as %s",
            task.referer,
            task.reference,
            task.target,
        )
        if not self.queue.add_task(task):
            raise SchedulingError(
                f"scheduling download of {task.reference} referenced by {task.referer} failed"
            )


class DownloadWorker:
    """Downloads each distinct source once and writes it to its target."""

    def __init__(self, reader: Any, writer: Any) -> None:
        self.reader = reader
        self.writer = writer
        self._lock = threading.Lock()
        self._downloaded: dict[str, list[DownloadTask]] = {}

    def __call__(self, task: Any) -> None:
        if not isinstance(task, DownloadTask):
            raise TypeError(f"incorrect download task: {type(task).__name__}")
        if not self._should_download(task):
            return
        try:
            blob = self.reader.read(task.source)
            self.writer.write(task.target, "", blob, None)
        except Exception as err:
            message = (
                f"downloading {task.source} as {task.target} and reference "
                f"{task.reference} from referer {task.referer} failed: {err}"
            )
            if isinstance(err, ResourceNotFoundError):
                logger.warning(message)
                return
            raise RuntimeError(message) from err

    def _should_download(self, task: DownloadTask) -> bool:
        with self._lock:
            seen = self._downloaded.get(task.source)
            if seen is not None:
                seen.append(task)
                return False
            self._downloaded[task.source] = [task]
            return True


def download_work_func(reader: Any, writer: Any) -> DownloadWorker:
    """Return a worker that downloads resources with ``reader`` and ``writer``."""
    if reader is None:
        raise ValueError("invalid argument: reader is None")
    if writer is None:
        raise ValueError("invalid argument: writer is None")
    return DownloadWorker(reader, writer)