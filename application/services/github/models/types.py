"""
Shared types and models for GitHub content operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from common.constants import REGULAR_FILE_MODE


class EntryType(str, Enum):
    FILE = "file"
    DIR = "dir"


class AccessType(str, Enum):
    OWNER = "owner"
    MEMBER = "member"
    BOTH = "both"


@dataclass(frozen=True)
class RepositoryRef:
    """Identifies one target repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def api_path(self) -> str:
        return f"repos/{self.owner}/{self.name}"

    def matches(self, owner: str, name: str) -> bool:
        return self.owner.lower() == owner.lower() and self.name.lower() == name.lower()


@dataclass
class DirectoryEntry:
    name: str
    path: str
    type: EntryType
    size: int
    sha: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
            "size": self.size,
            "sha": self.sha,
        }


@dataclass
class FileContent:
    path: str
    content: str
    sha: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "content": self.content, "hash": self.sha}


@dataclass(frozen=True)
class FileChange:
    """One (path, new content) pair of a pending change set."""

    path: str
    content: str


@dataclass(frozen=True)
class TreeEntry:
    path: str
    sha: str
    mode: str = REGULAR_FILE_MODE
    type: str = "blob"

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass
class CommitResult:
    commit_sha: str
    parent_sha: str
    tree_sha: str
    paths: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "commit_hash": self.commit_sha,
            "parent_hash": self.parent_sha,
            "paths": list(self.paths),
        }


@dataclass
class RepositoryInfo:
    name: str
    owner: str
    full_name: str
    url: str
    default_branch: str
    private: bool
    description: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RepositoryInfo":
        return cls(
            name=data.get("name", ""),
            owner=(data.get("owner") or {}).get("login", ""),
            full_name=data.get("full_name", ""),
            url=data.get("html_url", ""),
            default_branch=data.get("default_branch", "main"),
            private=bool(data.get("private", False)),
            description=data.get("description"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "owner": self.owner,
            "full_name": self.full_name,
            "url": self.url,
            "default_branch": self.default_branch,
            "private": self.private,
            "description": self.description,
            "updated_at": self.updated_at,
        }
