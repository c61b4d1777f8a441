"""
Service Factory for centralized service initialization.

Implements the Factory pattern for creating and managing service instances.
Provides singleton access to services across the application.
"""

import logging
from typing import Optional

from application.repositories.project_repository import (
    InMemoryProjectRepository,
    ProjectRepository,
)
from application.services.github.auth.authenticator import InstallationAuthenticator
from application.services.github_service_factory import GitHubServiceFactory
from application.services.projects.access_service import ProjectAccessService
from application.services.projects.repository_service import ProjectRepositoryService
from common.config.config import PROJECTS_FILE

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating and managing service instances.

    Implements singleton pattern for services to ensure single instance
    across the application. Manages dependencies between services.
    """

    _instance: Optional["ServiceFactory"] = None

    # Service instances (lazy-loaded)
    _project_repository: Optional[ProjectRepository] = None
    _access_service: Optional[ProjectAccessService] = None
    _authenticator: Optional[InstallationAuthenticator] = None
    _github_factory: Optional[GitHubServiceFactory] = None
    _repository_service: Optional[ProjectRepositoryService] = None

    def __new__(cls):
        """Ensure only one instance exists (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(ServiceFactory, cls).__new__(cls)
            logger.debug("ServiceFactory instance created")
        return cls._instance

    @property
    def project_repository(self) -> ProjectRepository:
        """
        Get ProjectRepository instance, seeded from PROJECTS_FILE.
        """
        if self._project_repository is None:
            self._project_repository = InMemoryProjectRepository.from_file(PROJECTS_FILE)
            logger.debug("ProjectRepository initialized")
        return self._project_repository

    @property
    def access_service(self) -> ProjectAccessService:
        if self._access_service is None:
            self._access_service = ProjectAccessService(self.project_repository)
            logger.debug("ProjectAccessService initialized")
        return self._access_service

    @property
    def authenticator(self) -> InstallationAuthenticator:
        """
        Get InstallationAuthenticator instance.

        Built from the GitHub App settings on first use, so a missing App
        configuration surfaces as ConfigurationError on the first request
        that needs GitHub rather than at startup.
        """
        if self._authenticator is None:
            self._authenticator = InstallationAuthenticator()
            logger.debug("InstallationAuthenticator initialized")
        return self._authenticator

    @property
    def github_factory(self) -> GitHubServiceFactory:
        if self._github_factory is None:
            self._github_factory = GitHubServiceFactory(self.authenticator)
            logger.debug("GitHubServiceFactory initialized")
        return self._github_factory

    @property
    def repository_service(self) -> ProjectRepositoryService:
        """
        Get ProjectRepositoryService instance.

        Returns:
            ProjectRepositoryService: Content operations addressed by project

        Example:
            >>> factory = ServiceFactory()
            >>> service = factory.repository_service
        """
        if self._repository_service is None:
            self._repository_service = ProjectRepositoryService(
                access=self.access_service,
                github_factory=self.github_factory,
            )
            logger.debug("ProjectRepositoryService initialized")
        return self._repository_service

    def configure(
        self,
        project_repository: Optional[ProjectRepository] = None,
        authenticator: Optional[InstallationAuthenticator] = None,
    ) -> None:
        """
        Replace dependencies before first use (tests, alternative stores).

        Dependent services are rebuilt on next access.
        """
        self.clear_cache()
        if project_repository is not None:
            self._project_repository = project_repository
        if authenticator is not None:
            self._authenticator = authenticator

    def clear_cache(self):
        """
        Clear all cached service instances.

        Useful for testing or when services need to be re-initialized.
        """
        self._project_repository = None
        self._access_service = None
        self._authenticator = None
        self._github_factory = None
        self._repository_service = None
        logger.debug("ServiceFactory cache cleared")


# Global factory instance
_factory_instance: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """
    Get global ServiceFactory instance.

    Example:
        >>> from application.services.service_factory import get_service_factory
        >>> service = get_service_factory().repository_service
    """
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ServiceFactory()
    return _factory_instance
