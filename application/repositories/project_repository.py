"""
Project Repository for organization and project data access.

The relational store of the full product is outside this service; it only
needs to resolve projects to organizations and repositories and to answer
membership questions. InMemoryProjectRepository serves that from a YAML seed.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from common.exception.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Organization:
    id: str
    name: str
    owner_id: str
    installation_id: Optional[str] = None
    member_ids: Set[str] = field(default_factory=set)


@dataclass
class Project:
    id: str
    name: str
    org_id: str
    github_repo_link: Optional[str] = None
    member_ids: Set[str] = field(default_factory=set)


class ProjectRepository(ABC):
    """Data access for organizations, projects and their members."""

    @abstractmethod
    async def get_project(self, project_id: str) -> Optional[Project]:
        """Return the project or None if it does not exist."""

    @abstractmethod
    async def get_org(self, org_id: str) -> Optional[Organization]:
        """Return the organization or None if it does not exist."""

    @abstractmethod
    async def is_project_member(self, project_id: str, user_id: str) -> bool:
        """True if the user was added to the project as a collaborator."""

    @abstractmethod
    async def is_org_member(self, org_id: str, user_id: str) -> bool:
        """True if the user belongs to the organization (owners included)."""

    @abstractmethod
    async def set_installation_id(self, org_id: str, installation_id: str) -> Organization:
        """Record the GitHub App installation of an organization."""


class InMemoryProjectRepository(ProjectRepository):
    """ProjectRepository kept in process memory."""

    def __init__(
        self,
        orgs: Optional[List[Organization]] = None,
        projects: Optional[List[Project]] = None,
    ):
        self._orgs: Dict[str, Organization] = {org.id: org for org in orgs or []}
        self._projects: Dict[str, Project] = {project.id: project for project in projects or []}
        self._lock = asyncio.Lock()

    @classmethod
    def from_document(cls, document: Any) -> "InMemoryProjectRepository":
        """
        Build a repository from a parsed seed document.

        Expected shape::

            orgs:
              - {id, name, owner, installation_id?, members?: [user_id, ...]}
            projects:
              - {id, name, org_id, github_repo_link?}
            members:
              - {project_id, user_id}

        Raises:
            ConfigurationError: If the document does not have this shape
        """
        if document is None:
            return cls()
        if not isinstance(document, dict):
            raise ConfigurationError("Projects seed must be a mapping")

        try:
            orgs = [
                Organization(
                    id=str(item["id"]),
                    name=str(item.get("name", item["id"])),
                    owner_id=str(item["owner"]),
                    installation_id=(
                        str(item["installation_id"]) if item.get("installation_id") else None
                    ),
                    member_ids={str(user_id) for user_id in item.get("members") or []},
                )
                for item in document.get("orgs") or []
            ]
            projects = [
                Project(
                    id=str(item["id"]),
                    name=str(item.get("name", item["id"])),
                    org_id=str(item["org_id"]),
                    github_repo_link=item.get("github_repo_link"),
                )
                for item in document.get("projects") or []
            ]
            by_id = {project.id: project for project in projects}
            for item in document.get("members") or []:
                project = by_id.get(str(item["project_id"]))
                if project is None:
                    raise ConfigurationError(
                        f"Projects seed lists a member of unknown project {item['project_id']}"
                    )
                project.member_ids.add(str(item["user_id"]))
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Malformed projects seed: {e}") from e

        return cls(orgs=orgs, projects=projects)

    @classmethod
    def from_file(cls, path: str) -> "InMemoryProjectRepository":
        """Load the seed file; a missing file yields an empty repository."""
        seed = Path(path)
        if not seed.exists():
            logger.warning(f"Projects file {path} not found, starting with no projects")
            return cls()

        try:
            document = yaml.safe_load(seed.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Projects file {path} is not valid YAML: {e}") from e

        repository = cls.from_document(document)
        logger.info(
            f"Loaded {len(repository._orgs)} organizations and "
            f"{len(repository._projects)} projects from {path}"
        )
        return repository

    async def get_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    async def get_org(self, org_id: str) -> Optional[Organization]:
        return self._orgs.get(org_id)

    async def is_project_member(self, project_id: str, user_id: str) -> bool:
        project = self._projects.get(project_id)
        return project is not None and user_id in project.member_ids

    async def is_org_member(self, org_id: str, user_id: str) -> bool:
        org = self._orgs.get(org_id)
        if org is None:
            return False
        return org.owner_id == user_id or user_id in org.member_ids

    async def set_installation_id(self, org_id: str, installation_id: str) -> Organization:
        async with self._lock:
            org = self._orgs[org_id]
            org.installation_id = installation_id
            return org
