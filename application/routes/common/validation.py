"""
Validation utilities for route handlers.

Provides decorators for automatic request validation using Pydantic models.
"""

import logging
from functools import wraps
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError
from quart import request

from application.routes.common.error_handlers import format_validation_errors
from application.routes.common.response import APIResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def validate_json(model: Type[T]):
    """
    Decorator to validate JSON request body against Pydantic model.

    Makes the validated model available as request.validated_data. Invalid
    bodies are answered with 400 Bad Request and per-field messages.

    Example:
        >>> @validate_json(BulkUpdateRequest)
        >>> async def bulk_update(project_id, owner, repo):
        >>>     data = request.validated_data
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            json_data = await request.get_json(silent=True)

            if not isinstance(json_data, dict):
                return APIResponse.error(
                    "Request body required",
                    400,
                    details={"expected": "application/json object"},
                    error_code="VALIDATION_ERROR",
                )

            try:
                validated = model.model_validate(json_data)
            except ValidationError as e:
                errors = format_validation_errors(e)
                logger.warning(f"Validation error in {func.__name__}: {errors}")
                return APIResponse.error(
                    "Validation failed",
                    400,
                    details={"errors": errors},
                    error_code="VALIDATION_ERROR",
                )

            request.validated_data = validated
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def validate_query_params(model: Type[T]):
    """
    Decorator to validate query parameters against Pydantic model.

    Similar to validate_json; the model is stored as request.validated_params.

    Example:
        >>> @validate_query_params(PathQuery)
        >>> async def list_contents(project_id, owner, repo):
        >>>     path = request.validated_params.path
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                validated = model.model_validate(dict(request.args))
            except ValidationError as e:
                errors = format_validation_errors(e)
                logger.warning(f"Query parameter validation error in {func.__name__}: {errors}")
                return APIResponse.error(
                    "Invalid query parameters",
                    400,
                    details={"errors": errors},
                    error_code="VALIDATION_ERROR",
                )

            request.validated_params = validated
            return await func(*args, **kwargs)

        return wrapper

    return decorator
