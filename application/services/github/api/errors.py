"""
Translation of raw GitHub API failures into the application error taxonomy.

Components call translate_github_error at their boundary so that no
GitHubAPIError or transport error escapes the integration layer.
"""

import logging
from typing import Dict, Optional, Type

from application.services.github.api.client import GitHubAPIError
from common.exception.errors import (
    CMSError,
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: Dict[int, Type[CMSError]] = {
    401: ConfigurationError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def translate_github_error(
    error: GitHubAPIError,
    context: str,
    overrides: Optional[Dict[int, Type[CMSError]]] = None,
) -> CMSError:
    """
    Map a GitHubAPIError to a CMSError.

    Args:
        error: The raw API error
        context: Short description of the failed operation, used in the message
        overrides: Per-call status mapping taking precedence over the defaults

    Returns:
        CMSError instance to raise (callers use ``raise ... from error``)
    """
    mapping = dict(_STATUS_ERRORS)
    if overrides:
        mapping.update(overrides)

    error_class = mapping.get(error.status_code, UpstreamError)
    detail = error.github_message or error.message
    if error_class is UpstreamError:
        logger.error(f"{context} failed (status {error.status_code}): {detail}")
    return error_class(f"{context}: {detail}" if detail else context)
