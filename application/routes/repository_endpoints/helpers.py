"""Shared helpers for repository endpoint handlers."""

from quart import request

from application.services.projects.repository_service import ProjectRepositoryService
from application.services.service_factory import get_service_factory


def get_repository_service() -> ProjectRepositoryService:
    return get_service_factory().repository_service


def current_user_id() -> str:
    """User ID attached by require_auth."""
    return request.user_id
