"""Workspace, thread, user and chat records."""

from .registry import InMemoryRegistry, registry

__all__ = ["InMemoryRegistry", "registry"]
