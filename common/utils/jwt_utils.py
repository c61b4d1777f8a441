"""
JWT Token Utilities

Verifies session access tokens issued by the authentication subsystem.
Issuance, refresh and blacklisting live in that subsystem; this module only
checks the signature and expiry and extracts the user identity.

Tokens carry the user either as {"data": {"id": ...}} or as a plain "sub" claim.
"""

import logging
from typing import Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from common.config.config import JWT_ALGORITHM, JWT_SECRET_KEY

logger = logging.getLogger(__name__)


class JWTConfig:
    """JWT verification settings."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret_key = secret_key or JWT_SECRET_KEY
        self.algorithm = algorithm or JWT_ALGORITHM

        if self.secret_key == "dev-secret-key-change-in-production":
            logger.warning(
                "Using default JWT_SECRET_KEY! "
                "Set JWT_SECRET_KEY environment variable in production!"
            )


_config = JWTConfig()


class TokenValidationError(Exception):
    """Raised when token validation fails."""

    pass


class TokenExpiredError(Exception):
    """Raised when token has expired."""

    pass


def validate_token(token: str, config: Optional[JWTConfig] = None) -> dict:
    """
    Validate a JWT token and return its payload.

    Args:
        token: JWT token string
        config: Verification settings (defaults to the module configuration)

    Returns:
        dict: Decoded token payload

    Raises:
        TokenExpiredError: If token has expired
        TokenValidationError: If token is invalid
    """
    config = config or _config
    try:
        return jwt.decode(token, config.secret_key, algorithms=[config.algorithm])

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise TokenExpiredError("Token has expired")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise TokenValidationError(f"Invalid token: {e}")


def extract_bearer_token(auth_header: str) -> str:
    """
    Extract the token from an Authorization header.

    Args:
        auth_header: Authorization header value (e.g., "Bearer <token>")

    Returns:
        str: The extracted token

    Raises:
        TokenValidationError: If header format is invalid
    """
    if not auth_header:
        raise TokenValidationError("Missing Authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise TokenValidationError("Invalid Authorization header format")

    return parts[1]


def get_user_id_from_token(token: str, config: Optional[JWTConfig] = None) -> str:
    """
    Extract the user ID from a verified session token.

    Raises:
        TokenValidationError: If token is invalid or carries no user ID
        TokenExpiredError: If token has expired
    """
    payload = validate_token(token, config)

    data = payload.get("data")
    user_id = None
    if isinstance(data, dict):
        user_id = data.get("id")
    user_id = user_id or payload.get("sub")

    if not user_id:
        raise TokenValidationError("Token missing user id")

    return str(user_id)
