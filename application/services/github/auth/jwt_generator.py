"""
GitHub App JWT Token Generator

Generates JSON Web Tokens (JWT) for authenticating as a GitHub App.
JWTs are used to request installation access tokens.
"""

import logging
import time

import jwt

from application.services.github.auth.credentials import GitHubAppCredentials
from common.constants import APP_JWT_MAX_EXPIRATION_SECONDS
from common.exception.errors import ConfigurationError

logger = logging.getLogger(__name__)


class GitHubAppJWTGenerator:
    """Generates JWT tokens for GitHub App authentication."""

    # GitHub recommends backdating iat to tolerate clock drift
    CLOCK_DRIFT_SECONDS = 60

    def __init__(self, credentials: GitHubAppCredentials):
        """
        Initialize JWT generator.

        Args:
            credentials: App ID and private key used to sign tokens
        """
        self.credentials = credentials

    @property
    def app_id(self) -> str:
        return self.credentials.app_id

    def generate_jwt(self, expiration_seconds: int = APP_JWT_MAX_EXPIRATION_SECONDS) -> str:
        """
        Generate a JWT token for GitHub App authentication.

        GitHub requires:
        - Algorithm: RS256
        - Issued at (iat): Current time
        - Expiration (exp): Max 10 minutes from now
        - Issuer (iss): GitHub App ID

        Args:
            expiration_seconds: Token expiration in seconds (max 600 = 10 minutes)

        Returns:
            JWT token as string

        Raises:
            ValueError: If expiration is invalid
            ConfigurationError: If the private key cannot sign the token
        """
        if expiration_seconds > APP_JWT_MAX_EXPIRATION_SECONDS:
            logger.warning(
                f"Requested expiration {expiration_seconds}s exceeds GitHub's 10-minute limit. "
                f"Using {APP_JWT_MAX_EXPIRATION_SECONDS} seconds instead."
            )
            expiration_seconds = APP_JWT_MAX_EXPIRATION_SECONDS

        if expiration_seconds < 1:
            raise ValueError("Expiration must be at least 1 second")

        now = int(time.time())

        payload = {
            "iat": now - self.CLOCK_DRIFT_SECONDS,
            "exp": now + expiration_seconds - self.CLOCK_DRIFT_SECONDS,
            "iss": self.credentials.app_id,
        }

        try:
            token = jwt.encode(payload, self.credentials.private_key, algorithm="RS256")
        except (ValueError, TypeError, jwt.PyJWTError) as e:
            logger.error(f"Failed to generate JWT token: {e}")
            raise ConfigurationError(f"Failed to sign GitHub App JWT: {e}") from e

        logger.debug(
            f"Generated GitHub App JWT token (expires in {expiration_seconds}s, "
            f"app_id={self.credentials.app_id})"
        )

        return token
