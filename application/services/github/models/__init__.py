"""
GitHub Models Module

Shared types, enums, and dataclasses for GitHub content operations.
"""

from application.services.github.models.types import (
    AccessType,
    CommitResult,
    DirectoryEntry,
    EntryType,
    FileChange,
    FileContent,
    RepositoryInfo,
    RepositoryRef,
    TreeEntry,
)

__all__ = [
    "AccessType",
    "CommitResult",
    "DirectoryEntry",
    "EntryType",
    "FileChange",
    "FileContent",
    "RepositoryInfo",
    "RepositoryRef",
    "TreeEntry",
]
