"""
Error taxonomy for the content repository integration.

Every error that leaves the integration layer is a CMSError subclass carrying
an HTTP status and a stable error code for client-side handling. Raw GitHub
and transport failures are translated into these at the component boundary.
"""

from typing import Optional


class CMSError(Exception):
    """Base class for all application errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        data = {"error": self.message, "error_code": self.error_code}
        if self.field:
            data["field"] = self.field
        return data


class ConfigurationError(CMSError):
    """GitHub App identity or credentials are missing or rejected."""

    status_code = 500
    error_code = "CONFIGURATION_ERROR"


class ValidationError(CMSError):
    """Malformed input."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class ForbiddenError(CMSError):
    """Path denied by the repository policy, or caller lacks access."""

    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(CMSError):
    """Installation, repository, branch, file, project or organization absent."""

    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(CMSError):
    """An optimistic-concurrency precondition failed; re-read and retry."""

    status_code = 409
    error_code = "CONFLICT"


class NotEncodableError(CMSError):
    """File content cannot be decoded as text."""

    status_code = 422
    error_code = "NOT_ENCODABLE"


class PathIsDirectoryError(CMSError):
    """A file operation was requested on a directory path."""

    status_code = 400
    error_code = "IS_A_DIRECTORY"


class UpstreamError(CMSError):
    """GitHub returned an unexpected response or could not be reached."""

    status_code = 502
    error_code = "UPSTREAM_ERROR"


class OperationTimeoutError(CMSError):
    """A repository operation exceeded the caller-enforced timeout."""

    status_code = 504
    error_code = "TIMEOUT"
