from dataclasses import dataclass, field

import pytest

from docforge.github_info import GitHubInfo, GitHubInfoTask, github_info_worker_func
from docforge.reader import ResourceNotFoundError


@dataclass
class _Node:
    name: str = ""
    source: str = ""
    multi_source: list = field(default_factory=list)

    def path(self, sep):
        return ""


class _FakeReader:
    def __init__(self, responses=None, default=(b"", None)):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    def read(self, source):
        index = len(self.calls)
        self.calls.append(source)
        content, error = self.responses.get(index, self.default)
        if error is not None:
            raise error
        return content


class _FakeWriter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def write(self, name, path, content, node):
        self.calls.append((name, path, content, node))
        if self.error is not None:
            raise self.error


class _InlineQueue:
    def __init__(self, work):
        self.work = work
        self.stopped = False
        self.processed = 0
        self.errors = []

    def add_task(self, task):
        if self.stopped:
            return False
        try:
            self.work(task)
        except Exception as err:
            self.errors.append(err)
        self.processed += 1
        return True


def _responses():
    return {
        0: (b"source_content\n", None),
        1: (b"multi_source_content\n", None),
    }


def _task():
    return GitHubInfoTask(
        node=_Node(name="fake_name", source="fake_source", multi_source=["fake_multi_source"])
    )


def test_reader_not_set():
    with pytest.raises(ValueError, match="reader is None"):
        github_info_worker_func(None, _FakeWriter())


def test_writer_not_set():
    with pytest.raises(ValueError, match="writer is None"):
        github_info_worker_func(_FakeReader(), None)


def test_work_succeeds():
    reader = _FakeReader(_responses())
    writer = _FakeWriter()
    work = github_info_worker_func(reader, writer)
    work(_task())
    assert reader.calls == ["fake_source", "fake_multi_source"]
    assert len(writer.calls) == 1
    name, path, content, node = writer.calls[0]
    assert node.name == "fake_name"
    assert node.source == "fake_source"
    assert path == ""
    assert name == "fake_name"
    assert content == b"source_content\nmulti_source_content\n"


@pytest.mark.parametrize("task", [object(), None])
def test_invalid_task(task):
    work = github_info_worker_func(_FakeReader(), _FakeWriter())
    with pytest.raises(TypeError, match="incorrect github info task"):
        work(task)


def test_node_without_sources():
    reader = _FakeReader(_responses())
    writer = _FakeWriter()
    work = github_info_worker_func(reader, writer)
    work(GitHubInfoTask(node=_Node(name="folder")))
    assert reader.calls == []
    assert writer.calls == []


def test_read_fails():
    responses = _responses()
    responses[0] = (None, OSError("fake_read_err"))
    work = github_info_worker_func(_FakeReader(responses), _FakeWriter())
    with pytest.raises(RuntimeError, match="fake_read_err"):
        work(_task())


def test_read_resource_not_found_is_skipped():
    responses = _responses()
    responses[0] = (None, ResourceNotFoundError("fake_target"))
    reader = _FakeReader(responses)
    writer = _FakeWriter()
    work = github_info_worker_func(reader, writer)
    work(_task())
    assert len(reader.calls) == 2
    assert len(writer.calls) == 1
    assert writer.calls[0][2] == b"multi_source_content\n"


def test_read_returns_none():
    responses = _responses()
    responses[0] = (None, None)
    reader = _FakeReader(responses)
    writer = _FakeWriter()
    work = github_info_worker_func(reader, writer)
    work(_task())
    assert len(reader.calls) == 2
    assert len(writer.calls) == 1
    assert writer.calls[0][2] == b"multi_source_content\n"


def test_write_fails():
    work = github_info_worker_func(_FakeReader(_responses()), _FakeWriter(error=OSError("fake_write_err")))
    with pytest.raises(OSError, match="fake_write_err"):
        work(_task())


def test_write_github_info_through_queue():
    reader = _FakeReader(default=(b"info", None))
    writer = _FakeWriter()
    queue = _InlineQueue(github_info_worker_func(reader, writer))
    github_info = GitHubInfo(queue)
    assert github_info.write_github_info(_Node(name="name1", source="source1")) is True
    assert github_info.write_github_info(_Node(name="name2", source="source2")) is True
    assert queue.processed == 2
    assert queue.errors == []
    assert len(reader.calls) == 2
    assert len(writer.calls) == 2


def test_stopped_queue_skips_tasks():
    reader = _FakeReader(default=(b"info", None))
    writer = _FakeWriter()
    queue = _InlineQueue(github_info_worker_func(reader, writer))
    github_info = GitHubInfo(queue)
    github_info.write_github_info(_Node(name="name1", source="source1"))
    github_info.write_github_info(_Node(name="name2", source="source2"))
    queue.stopped = True
    assert github_info.write_github_info(_Node(name="name3", source="source3")) is False
    assert queue.processed == 2