"""
GitHub API client for making authenticated requests.
Supports both personal access tokens and GitHub App installation tokens.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from common.config.config import GITHUB_API_URL, GITHUB_API_VERSION, GITHUB_REQUEST_TIMEOUT

if TYPE_CHECKING:
    from application.services.github.auth.installation_token_manager import InstallationTokenManager

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Non-success response (or transport failure) from the GitHub REST API.

    status_code is 0 when the request never produced a response.
    """

    def __init__(self, message: str, status_code: int = 0, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def github_message(self) -> str:
        if isinstance(self.payload, dict):
            return str(self.payload.get("message", ""))
        return ""


class GitHubAPIClient:
    """Base client for GitHub API interactions with dual-mode authentication."""

    def __init__(
        self,
        token: Optional[str] = None,
        installation_id: Optional[int] = None,
        token_manager: Optional["InstallationTokenManager"] = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: Static API token (personal access token)
            installation_id: GitHub App installation ID
            token_manager: Mints and refreshes installation tokens
            base_url: GitHub REST API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.token = token
        self.installation_id = installation_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_manager = token_manager
        self._transport = transport

        if installation_id and token_manager:
            logger.debug(f"GitHub API client initialized with installation ID: {installation_id}")
        elif not token:
            logger.warning("GitHub API client initialized without credentials - authentication may fail")

    async def _get_token(self) -> Optional[str]:
        """Get authentication token (installation token or personal access token).

        The installation token is looked up on every request so an expiring
        token is refreshed instead of being reused past its validity window.
        """
        if self.installation_id and self._token_manager:
            return await self._token_manager.get_installation_token(self.installation_id)
        return self.token

    async def _get_headers(self) -> Dict[str, str]:
        token = await self._get_token()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path (without base URL)
            data: Request body data
            params: Query parameters

        Returns:
            Decoded JSON body (dict or list), or an empty dict for empty bodies

        Raises:
            GitHubAPIError: If the request fails or returns a non-success status
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = await self._get_headers()

        try:
            timeout_config = httpx.Timeout(self.timeout, connect=10.0)
            async with httpx.AsyncClient(
                timeout=timeout_config, trust_env=False, transport=self._transport
            ) as client:
                response = await client.request(
                    method.upper(), url, json=data, params=params, headers=headers
                )

        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg) from e

        return self._process_response(response, method, url)

    def _process_response(self, response: httpx.Response, method: str, url: str) -> Any:
        """Process HTTP response and extract data.

        Raises:
            GitHubAPIError: If response status indicates failure
        """
        payload: Any = {}
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = {}

        if 200 <= response.status_code < 300:
            logger.debug(
                f"GitHub API {method} request to {url} "
                f"successful (status: {response.status_code})"
            )
            return payload

        error_msg = f"GitHub API {method} {url} failed (status {response.status_code}): {response.text}"
        if response.status_code >= 500:
            logger.error(error_msg)
        else:
            logger.info(error_msg)
        raise GitHubAPIError(error_msg, status_code=response.status_code, payload=payload)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, data=data)

    async def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", path, data=data)

    async def patch(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PATCH", path, data=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
