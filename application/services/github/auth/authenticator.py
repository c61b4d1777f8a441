"""
Installation Authenticator

Resolves an organization's GitHub App installation into an API client
scoped to that installation's permissions.
"""

import logging
from typing import Optional, Union

import httpx

from application.services.github.api.client import GitHubAPIClient
from application.services.github.auth.credentials import GitHubAppCredentials
from application.services.github.auth.installation_token_manager import InstallationTokenManager
from application.services.github.auth.jwt_generator import GitHubAppJWTGenerator
from common.config.config import GITHUB_API_URL, GITHUB_REQUEST_TIMEOUT
from common.exception.errors import ValidationError

logger = logging.getLogger(__name__)


def parse_installation_id(installation_id: Union[str, int, None]) -> int:
    """Coerce an installation identifier to int.

    Raises:
        ValidationError: If the identifier is empty or not numeric
    """
    if installation_id is None or str(installation_id).strip() == "":
        raise ValidationError("Installation ID is required", field="installation_id")

    try:
        value = int(str(installation_id).strip())
    except ValueError:
        raise ValidationError(
            f"Installation ID must be numeric, got '{installation_id}'",
            field="installation_id",
        ) from None

    if value <= 0:
        raise ValidationError("Installation ID must be positive", field="installation_id")
    return value


class InstallationAuthenticator:
    """Mints installation-scoped API clients.

    One authenticator (and its token cache) is shared per process; the
    clients it returns look the token up on every request, so tokens are
    refreshed before GitHub's one-hour expiry instead of cached forever.
    """

    def __init__(
        self,
        credentials: Optional[GitHubAppCredentials] = None,
        token_manager: Optional[InstallationTokenManager] = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            credentials: App identity; required unless token_manager is given
            token_manager: Pre-built token manager (tests)
            base_url: GitHub REST API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport shared by the clients (tests)
        """
        if token_manager is None:
            if credentials is None:
                credentials = GitHubAppCredentials.from_config()
            token_manager = InstallationTokenManager(
                GitHubAppJWTGenerator(credentials),
                base_url=base_url,
                timeout=timeout,
                transport=transport,
            )
        self.token_manager = token_manager
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def authenticate(self, installation_id: Union[str, int]) -> GitHubAPIClient:
        """
        Produce an API client scoped to one installation.

        The token is minted eagerly so an unknown installation fails here.

        Raises:
            ValidationError: If installation_id is empty or not numeric
            ConfigurationError: If the App identity is missing or rejected
            NotFoundError: If the installation does not exist
        """
        numeric_id = parse_installation_id(installation_id)
        await self.token_manager.get_installation_token(numeric_id)

        logger.debug(f"Authenticated GitHub App installation {numeric_id}")
        return GitHubAPIClient(
            installation_id=numeric_id,
            token_manager=self.token_manager,
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
