"""Configuration for a documentation build."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Hugo:
    """Options that control output tailored for the Hugo site generator."""

    enabled: bool = False
    pretty_urls: bool = False
    base_url: str = ""
    index_file_names: list[str] = field(default_factory=list)


@dataclass
class Options:
    """Parameters for setting up a documentation build."""

    document_workers_count: int = 0
    validation_workers_count: int = 0
    fail_fast: bool = False
    destination_path: str = ""
    resources_path: str = ""
    manifest_path: str = ""
    resource_download_workers_count: int = 0
    resource_download_writer: Any = None
    git_info_writer: Any = None
    writer: Any = None
    resource_handlers: list[Any] = field(default_factory=list)
    dry_run_writer: Any = None
    resolve: bool = False
    hugo: Hugo = field(default_factory=Hugo)