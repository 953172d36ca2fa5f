"""Manifest resolution, link rewriting, front matter handling and task workers for documentation bundles."""

__version__ = "0.1.0"