"""
Git Module

Handles writes to the dedicated CMS branch through Git objects:
- Object store abstraction over the Git data API
- Atomic multi-file commit builder
- Dedicated branch creation
"""

from application.services.github.git.branch_manager import BranchManager
from application.services.github.git.commit_builder import (
    AtomicCommitBuilder,
    CommitStage,
    validate_change_set,
)
from application.services.github.git.object_store import GitHubObjectStore, GitObjectStore

__all__ = [
    "AtomicCommitBuilder",
    "BranchManager",
    "CommitStage",
    "GitHubObjectStore",
    "GitObjectStore",
    "validate_change_set",
]
