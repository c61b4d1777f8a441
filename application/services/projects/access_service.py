"""
Project access service.

Resolves projects to their organization, installation and linked repository,
and decides whether a user may act on them.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from application.repositories.project_repository import Organization, ProjectRepository
from application.services.github.auth.authenticator import parse_installation_id
from application.services.github.models.types import AccessType, RepositoryRef
from application.services.github.repository.url_parser import extract_owner_and_repo
from common.exception.errors import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectRepositoryLink:
    project_id: str
    org_id: str
    repo: RepositoryRef


class ProjectAccessService:
    """Project and organization lookups plus access checks."""

    def __init__(self, repository: ProjectRepository):
        self.repository = repository

    async def resolve_project_repo(self, project_id: str) -> ProjectRepositoryLink:
        """
        Resolve the repository linked to a project.

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If no repository is linked or the link is malformed
        """
        if not project_id:
            raise ValidationError("Project ID is required", field="project_id")

        project = await self.repository.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if not project.github_repo_link:
            raise ValidationError("Project has no linked GitHub repository")

        return ProjectRepositoryLink(
            project_id=project.id,
            org_id=project.org_id,
            repo=extract_owner_and_repo(project.github_repo_link),
        )

    async def resolve_installation(self, org_id: str) -> str:
        """
        Return the GitHub App installation ID of an organization.

        Raises:
            NotFoundError: If the organization does not exist or never
                installed the GitHub App
        """
        org = await self._get_org(org_id)
        if not org.installation_id:
            raise NotFoundError("GitHub App is not installed for this organization")
        return org.installation_id

    async def check_access(
        self, project_id: str, user_id: str, access_type: AccessType = AccessType.BOTH
    ) -> None:
        """
        Check a user's access to a project.

        OWNER admits the owner of the project's organization, MEMBER admits
        project collaborators, BOTH admits either.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the user has no access of the requested type
        """
        project = await self.repository.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        if access_type in (AccessType.OWNER, AccessType.BOTH):
            org = await self.repository.get_org(project.org_id)
            if org is not None and org.owner_id == user_id:
                return

        if access_type in (AccessType.MEMBER, AccessType.BOTH):
            if await self.repository.is_project_member(project_id, user_id):
                return

        logger.warning(f"User {user_id} denied {access_type.value} access to project {project_id}")
        raise ForbiddenError("You do not have access to this project")

    async def check_org_access(self, org_id: str, user_id: str) -> Organization:
        """
        Raises:
            NotFoundError: If the organization does not exist
            ForbiddenError: If the user is not part of the organization
        """
        org = await self._get_org(org_id)
        if not await self.repository.is_org_member(org_id, user_id):
            logger.warning(f"User {user_id} denied access to organization {org_id}")
            raise ForbiddenError("You do not have access to this organization")
        return org

    async def register_installation(
        self,
        org_id: str,
        installation_id: str,
        user_id: str,
        verify: Optional[Callable[[int], Awaitable[object]]] = None,
    ) -> Organization:
        """
        Record the GitHub App installation of an organization.

        Only the organization owner may register it, and an installation that
        is already recorded is left unchanged.

        Args:
            verify: Awaited with the numeric ID before storing it; expected to
                raise if the installation cannot be used

        Raises:
            ValidationError: If installation_id is not numeric
            ForbiddenError: If the user does not own the organization
        """
        numeric_id = parse_installation_id(installation_id)
        org = await self._get_org(org_id)
        if org.owner_id != user_id:
            raise ForbiddenError("Only the organization owner can register the GitHub App")

        if org.installation_id:
            logger.info(f"Organization {org_id} already has installation {org.installation_id}")
            return org

        if verify is not None:
            await verify(numeric_id)

        org = await self.repository.set_installation_id(org_id, str(numeric_id))
        logger.info(f"Registered installation {numeric_id} for organization {org_id}")
        return org

    async def _get_org(self, org_id: str) -> Organization:
        if not org_id:
            raise ValidationError("Organization ID is required", field="org_id")
        org = await self.repository.get_org(org_id)
        if org is None:
            raise NotFoundError("Organization not found")
        return org
