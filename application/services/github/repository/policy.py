"""
Repository policy and the enforcement gate.

The policy is the list of directory prefixes collaborators may read and
write. Access fails closed: an absent, empty or unreadable policy denies
every path.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from common.exception.errors import ForbiddenError, ValidationError

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Strip surrounding slashes; both request paths and prefixes are compared this way."""
    return (path or "").strip().strip("/")


def has_unsafe_segments(path: str) -> bool:
    """True for paths with empty, "." or ".." segments."""
    return any(segment in ("", ".", "..") for segment in path.split("/"))


@dataclass
class RepositoryPolicy:
    """Allowed-directory policy read from the repository config file.

    directories keeps the entries exactly as stored, in order.
    sha is the config file's blob SHA when the policy was read from GitHub.
    """

    directories: List[str] = field(default_factory=list)
    sha: Optional[str] = None

    @classmethod
    def empty(cls) -> "RepositoryPolicy":
        return cls(directories=[])

    @classmethod
    def from_document(cls, document: Any, sha: Optional[str] = None) -> "RepositoryPolicy":
        """Build a policy from a parsed YAML document.

        Anything other than {"allowed_directories": [str, ...]} yields the
        empty policy.
        """
        if not isinstance(document, dict):
            return cls(directories=[], sha=sha)

        directories = document.get("allowed_directories")
        if directories is None:
            return cls(directories=[], sha=sha)

        if not isinstance(directories, list) or not all(isinstance(d, str) for d in directories):
            logger.warning("Malformed allowed_directories in repository policy; denying all paths")
            return cls(directories=[], sha=sha)

        return cls(directories=list(directories), sha=sha)

    def to_document(self) -> dict:
        return {"allowed_directories": list(self.directories)}

    def is_allowed(self, path: str) -> bool:
        return is_allowed(self, path)


def is_allowed(policy: Optional[RepositoryPolicy], path: str) -> bool:
    """
    Decide whether a path may be read or written.

    A path is allowed when it equals an allowed prefix or is nested under one.
    Any matching entry authorizes. Empty prefixes never match, so an empty
    policy (or one holding only blank entries) denies everything.
    """
    if policy is None or not policy.directories:
        return False

    candidate = normalize_path(path)
    if not candidate or has_unsafe_segments(candidate):
        return False

    for directory in policy.directories:
        prefix = normalize_path(directory)
        if not prefix:
            continue
        if candidate == prefix or candidate.startswith(prefix + "/"):
            return True
    return False


def validate_policy_directories(directories: Any) -> List[str]:
    """Validate directories submitted for a policy update.

    Entries are returned unchanged (order and duplicates preserved).

    Raises:
        ValidationError: If the value is not a list of usable directory paths
    """
    if not isinstance(directories, list):
        raise ValidationError("allowed_directories must be a list", field="allowed_directories")

    for directory in directories:
        if not isinstance(directory, str):
            raise ValidationError(
                "allowed_directories entries must be strings", field="allowed_directories"
            )
        normalized = normalize_path(directory)
        if not normalized or has_unsafe_segments(normalized):
            raise ValidationError(
                f"Invalid directory '{directory}' in allowed_directories",
                field="allowed_directories",
            )
    return list(directories)


class PolicyGate:
    """Checks request paths against a repository policy before any GitHub call."""

    def __init__(self, config_path: str):
        """
        Args:
            config_path: Location of the policy file itself, which content
                operations may never touch
        """
        self.config_path = normalize_path(config_path)

    def is_allowed(self, policy: RepositoryPolicy, path: str) -> bool:
        if normalize_path(path) == self.config_path:
            return False
        return is_allowed(policy, path)

    def check(self, policy: RepositoryPolicy, path: str) -> str:
        """Return the normalized path, or raise ForbiddenError."""
        if not self.is_allowed(policy, path):
            logger.warning(f"Path '{path}' denied by repository policy")
            raise ForbiddenError(f"Path '{path}' is not in an allowed directory")
        return normalize_path(path)

    def check_all(self, policy: RepositoryPolicy, paths: Iterable[str]) -> List[str]:
        """Check a whole batch; any denied path rejects the batch."""
        paths = list(paths)
        denied = [path for path in paths if not self.is_allowed(policy, path)]
        if denied:
            logger.warning(f"Batch rejected by repository policy, denied paths: {denied}")
            raise ForbiddenError(
                f"Paths not in an allowed directory: {', '.join(denied)}"
            )
        return [normalize_path(path) for path in paths]
