"""Asynchronous validation of absolute links found in documents."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = 429
UNAUTHORIZED = 401
FORBIDDEN = 403

_IGNORED_HOSTS = frozenset({"localhost", "127.0.0.1", "1.2.3.4"})
_RETRY_INTERVALS = (1, 5, 10, 20)
_MAX_RETRY_AFTER = 5 * 60


def _as_split(link_url: Any) -> SplitResult:
    if isinstance(link_url, SplitResult):
        return link_url
    return urlsplit(link_url)


def _check_request_url(url: str) -> None:
    netloc = urlsplit(url).netloc
    for char in netloc:
        if char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F:
            raise ValueError(f"invalid URL {url!r}: invalid character {char!r} in host name")


def _is_failure(status: int) -> bool:
    return status >= 400 and status not in (FORBIDDEN, UNAUTHORIZED)


@dataclass
class ValidationTask:
    """A link to check for availability."""

    link_url: Any
    link_destination: str = ""
    content_source_path: str = ""


class Validator:
    """Puts link validation tasks on a task queue."""

    def __init__(self, queue: Any) -> None:
        self.queue = queue

    def validate_link(self, link_url: Any, link_destination: str, content_source_path: str) -> bool:
        """Enqueue a validation of ``link_url``; return whether it was accepted."""
        task = ValidationTask(
            link_url=link_url,
            link_destination=link_destination,
            content_source_path=content_source_path,
        )
        added = bool(self.queue.add_task(task))
        if not added:
            logger.warning("link validation failed for task %r", task)
        return added


class _LinkSet:
    """Thread-safe set of link destinations already validated."""

    def __init__(self) -> None:
        self._links: set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, link: str) -> bool:
        with self._lock:
            return link in self._links

    def add(self, link: str) -> None:
        with self._lock:
            self._links.add(link)


def _send(client: Any, method: str, url: str) -> Any:
    response = client.request(method, url)
    close = getattr(response, "close", None)
    if callable(close):
        close()
    return response


def do_validation(client: Any, method: str, url: str) -> Any:
    """Send a request, retrying a few times while the answer is 429 Too Many Requests."""
    response = _send(client, method, url)
    for attempt, interval in enumerate(_RETRY_INTERVALS[:-1]):
        if response.status_code != TOO_MANY_REQUESTS:
            break
        delay = interval + random.randint(0, attempt)
        headers = getattr(response, "headers", None) or {}
        retry_after = headers.get("Retry-After")
        if retry_after:
            try:
                after = int(retry_after)
            except ValueError:
                pass
            else:
                if after <= _MAX_RETRY_AFTER:
                    delay = max(after, 0)
        time.sleep(delay)
        response = _send(client, method, url)
    return response


class ValidatorWorker:
    """Checks that a link can be reached and logs a warning if it cannot."""

    def __init__(self, http_client: Any, resource_handlers: Any) -> None:
        self.http_client = http_client
        self.resource_handlers = resource_handlers
        self._validated = _LinkSet()

    def __call__(self, task: Any) -> None:
        if not isinstance(task, ValidationTask):
            raise TypeError(f"incorrect validation task: {type(task).__name__}")
        try:
            url = _as_split(task.link_url)
            host = url.hostname or ""
        except ValueError as err:
            raise ValueError(f"failed to prepare HEAD validation request: invalid URL: {err}") from err
        if host in _IGNORED_HOSTS or "foo.bar" in host:
            return
        netloc = url.netloc.rpartition("@")[2]
        unified = urlunsplit((url.scheme, netloc, url.path, "", ""))
        if unified in self._validated:
            return
        absolute = task.link_url if isinstance(task.link_url, str) else url.geturl()
        client = self.http_client
        handler = self.resource_handlers.get(absolute)
        if handler is not None:
            handler_client = handler.get_client()
            if handler_client is not None:
                client = handler_client
        try:
            _check_request_url(absolute)
        except ValueError as err:
            raise ValueError(f"failed to prepare HEAD validation request: {err}") from err
        self._check(client, absolute, task)
        self._validated.add(unified)

    def _check(self, client: Any, url: str, task: ValidationTask) -> None:
        for method in ("HEAD", "GET"):
            try:
                response = do_validation(client, method, url)
            except Exception as err:
                self._warn(task, err)
                return
            if not _is_failure(response.status_code):
                return
        reason = getattr(response, "reason", "") or ""
        self._warn(task, f"HTTP Status {response.status_code} {reason}".rstrip())

    @staticmethod
    def _warn(task: ValidationTask, problem: Any) -> None:
        logger.warning(
            "failed to validate absolute link for %s from source %s: %s",
            task.link_destination,
            task.content_source_path,
            problem,
        )


def validate_worker_func(http_client: Any, resource_handlers: Any) -> ValidatorWorker:
    """Return a worker that validates links with ``http_client``."""
    if http_client is None:
        raise ValueError("invalid argument: http_client is None")
    if resource_handlers is None:
        raise ValueError("invalid argument: resource_handlers is None")
    return ValidatorWorker(http_client, resource_handlers)