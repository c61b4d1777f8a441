"""
Atomic multi-file commit builder.

Turns a batch of (path, content) pairs into exactly one commit on a branch:

    READ_PARENT -> CREATE_BLOBS -> CREATE_TREE -> CREATE_COMMIT -> UPDATE_REF -> DONE

Blobs, the tree and the commit are unreferenced objects until UPDATE_REF, a
single compare-and-swap of the branch ref against the parent read in
READ_PARENT. Readers therefore see either the whole batch or none of it. A
failed CAS raises ConflictError and is not retried here; the caller decides
whether to start over from a fresh read.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from application.services.github.git.object_store import GitObjectStore
from application.services.github.models.types import CommitResult, EntryType, FileChange, TreeEntry
from application.services.github.repository.policy import has_unsafe_segments, normalize_path
from common.exception.errors import (
    CMSError,
    ConflictError,
    PathIsDirectoryError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class CommitStage(str, Enum):
    READ_PARENT = "read_parent"
    CREATE_BLOBS = "create_blobs"
    CREATE_TREE = "create_tree"
    CREATE_COMMIT = "create_commit"
    UPDATE_REF = "update_ref"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CommitAttempt:
    """State of one pass through the commit state machine."""

    branch: str
    changes: List[FileChange]
    message: str
    create_only: bool = False
    stage: CommitStage = CommitStage.READ_PARENT
    parent_sha: Optional[str] = None
    base_tree_sha: Optional[str] = None
    blob_shas: Dict[str, str] = field(default_factory=dict)
    tree_sha: Optional[str] = None
    commit_sha: Optional[str] = None
    failed_stage: Optional[CommitStage] = None
    error: Optional[CMSError] = None

    def advance(self, stage: CommitStage) -> None:
        logger.debug(f"Commit on {self.branch}: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def fail(self, error: CMSError) -> None:
        self.failed_stage = self.stage
        self.error = error
        self.stage = CommitStage.FAILED


def validate_change_set(changes: Sequence[FileChange], message: str) -> List[FileChange]:
    """
    Validate a pending change set and return it with normalized paths.

    Raises:
        ValidationError: On an empty batch, empty message, empty or unsafe
            paths, non-text content or duplicate paths
    """
    if not changes:
        raise ValidationError("At least one file is required", field="files")

    if not message or not message.strip():
        raise ValidationError("Commit message is required", field="message")

    normalized: List[FileChange] = []
    seen = set()
    for change in changes:
        path = normalize_path(change.path)
        if not path or has_unsafe_segments(path):
            raise ValidationError(f"Invalid file path '{change.path}'", field="files")
        if not isinstance(change.content, str):
            raise ValidationError(f"Content for '{path}' must be text", field="files")
        if path in seen:
            raise ValidationError(f"Duplicate file path '{path}' in batch", field="files")
        seen.add(path)
        normalized.append(FileChange(path=path, content=change.content))

    return normalized


class AtomicCommitBuilder:
    """Builds one commit per call on a fixed branch of one repository."""

    def __init__(self, store: GitObjectStore, branch: str):
        self.store = store
        self.branch = branch

    async def commit(
        self, changes: Sequence[FileChange], message: str, create_only: bool = False
    ) -> CommitResult:
        """
        Commit a batch of files atomically.

        Paths are checked against the parent commit read in READ_PARENT, so
        the checks and the ref CAS see the same tree.

        Args:
            changes: Files to write
            message: Commit message
            create_only: Fail if any path already exists in the parent

        Raises:
            ValidationError: If the change set is malformed (nothing is created)
            NotFoundError: If the branch does not exist
            PathIsDirectoryError: If a path names a directory in the parent
            ConflictError: If the branch moved after READ_PARENT, or a path
                exists under create_only
            UpstreamError: If GitHub fails; the branch is unchanged
        """
        attempt = CommitAttempt(
            branch=self.branch,
            changes=validate_change_set(changes, message),
            message=message.strip(),
            create_only=create_only,
        )

        try:
            await self._read_parent(attempt)
            await self._create_blobs(attempt)
            await self._create_tree(attempt)
            await self._create_commit(attempt)
            await self._update_ref(attempt)
        except CMSError as e:
            attempt.fail(e)
            logger.warning(
                f"Commit on {self.branch} aborted at {attempt.failed_stage.value}: {e}"
            )
            raise
        except (KeyError, TypeError, ValueError) as e:
            error = UpstreamError(f"Unexpected response while committing: {e}")
            attempt.fail(error)
            logger.error(f"Commit on {self.branch} aborted at {attempt.failed_stage.value}: {e}")
            raise error from e

        attempt.advance(CommitStage.DONE)
        logger.info(
            f"Committed {len(attempt.changes)} file(s) to {self.branch}: "
            f"{attempt.parent_sha[:7]} -> {attempt.commit_sha[:7]}"
        )
        return CommitResult(
            commit_sha=attempt.commit_sha,
            parent_sha=attempt.parent_sha,
            tree_sha=attempt.tree_sha,
            paths=[change.path for change in attempt.changes],
        )

    async def _read_parent(self, attempt: CommitAttempt) -> None:
        attempt.advance(CommitStage.READ_PARENT)
        attempt.parent_sha = await self.store.get_branch_head(self.branch)
        attempt.base_tree_sha = await self.store.get_commit_tree(attempt.parent_sha)

        entry_types = await asyncio.gather(
            *(
                self.store.get_entry_type(attempt.parent_sha, change.path)
                for change in attempt.changes
            )
        )
        for change, entry_type in zip(attempt.changes, entry_types):
            if entry_type is None:
                continue
            if attempt.create_only:
                raise ConflictError(f"'{change.path}' already exists on {self.branch}")
            # A blob entry at a directory path would drop the whole subtree
            if entry_type == EntryType.DIR:
                raise PathIsDirectoryError(
                    f"Path '{change.path}' is a directory", field="files"
                )

    async def _create_blobs(self, attempt: CommitAttempt) -> None:
        attempt.advance(CommitStage.CREATE_BLOBS)
        results = await asyncio.gather(
            *(self.store.create_blob(change.content) for change in attempt.changes),
            return_exceptions=True,
        )
        # Every blob request has settled; report the first failure, if any
        for result in results:
            if isinstance(result, BaseException):
                raise result
        attempt.blob_shas = {
            change.path: sha for change, sha in zip(attempt.changes, results)
        }

    async def _create_tree(self, attempt: CommitAttempt) -> None:
        attempt.advance(CommitStage.CREATE_TREE)
        entries = [
            TreeEntry(path=path, sha=sha) for path, sha in attempt.blob_shas.items()
        ]
        attempt.tree_sha = await self.store.create_tree(attempt.base_tree_sha, entries)

    async def _create_commit(self, attempt: CommitAttempt) -> None:
        attempt.advance(CommitStage.CREATE_COMMIT)
        attempt.commit_sha = await self.store.create_commit(
            attempt.message, attempt.tree_sha, [attempt.parent_sha]
        )

    async def _update_ref(self, attempt: CommitAttempt) -> None:
        attempt.advance(CommitStage.UPDATE_REF)
        await self.store.update_branch(self.branch, attempt.commit_sha, attempt.parent_sha)
