"""Workspace-scoped contact deduplication and merge service."""

__version__ = "0.1.0"
