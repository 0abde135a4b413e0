"""Storage module."""

from .storage import IStorage, Storage
from .workspace import WorkspaceStore

__all__ = ["IStorage", "Storage", "WorkspaceStore"]
