from application.services.projects.access_service import ProjectAccessService, ProjectRepositoryLink
from application.services.projects.repository_service import ProjectRepositoryService

__all__ = ["ProjectAccessService", "ProjectRepositoryLink", "ProjectRepositoryService"]
