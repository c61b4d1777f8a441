"""Tests for the GitHub API client and error translation."""

import httpx
import pytest

from application.services.github.api.client import GitHubAPIClient, GitHubAPIError
from application.services.github.api.errors import translate_github_error
from application.services.github.api.repositories import RepositoryOperations
from application.services.github.auth import GitHubAppJWTGenerator, InstallationTokenManager
from application.services.github.models.types import RepositoryRef
from common.exception.errors import (
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from tests.fixtures.github_fixtures import BASE_URL


def _client(handler, token="ghs_test"):
    return GitHubAPIClient(token=token, base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestGitHubAPIClient:
    """Tests for GitHubAPIClient request handling."""

    @pytest.mark.asyncio
    async def test_sends_auth_and_version_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"ok": True})

        result = await _client(handler).get("/repos/acme/site", params={"ref": "main"})

        assert result == {"ok": True}
        assert seen["authorization"] == "Bearer ghs_test"
        assert seen["accept"] == "application/vnd.github+json"
        assert "x-github-api-version" in seen
        assert seen["url"] == f"{BASE_URL}/repos/acme/site?ref=main"

    @pytest.mark.asyncio
    async def test_sends_json_body(self):
        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(201, json={"sha": "abc"})

        result = await _client(handler).post("repos/acme/site/git/blobs", data={"content": "x"})

        assert result == {"sha": "abc"}
        assert b'"content"' in bodies[0]

    @pytest.mark.asyncio
    async def test_empty_body(self):
        result = await _client(lambda request: httpx.Response(204)).delete("repos/acme/site")
        assert result == {}

    @pytest.mark.asyncio
    async def test_error_status_carries_payload(self):
        def handler(request):
            return httpx.Response(422, json={"message": "Reference already exists"})

        with pytest.raises(GitHubAPIError) as exc_info:
            await _client(handler).post("repos/acme/site/git/refs", data={})

        assert exc_info.value.status_code == 422
        assert exc_info.value.github_message == "Reference already exists"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        with pytest.raises(GitHubAPIError) as exc_info:
            await _client(handler).get("repos/acme/site")

        assert exc_info.value.status_code == 502
        assert exc_info.value.github_message == ""

    @pytest.mark.asyncio
    async def test_transport_error_has_status_zero(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(GitHubAPIError) as exc_info:
            await _client(handler).get("repos/acme/site")

        assert exc_info.value.status_code == 0

    @pytest.mark.asyncio
    async def test_installation_token_is_looked_up_per_request(self, fake_github, app_credentials):
        fake_github.add_repo("acme", "site", installation_id=7)
        fake_github.token_expires_at = "2000-01-01T00:00:00Z"
        manager = InstallationTokenManager(
            GitHubAppJWTGenerator(app_credentials),
            base_url=BASE_URL,
            transport=fake_github.transport(),
        )
        client = GitHubAPIClient(
            installation_id=7,
            token_manager=manager,
            base_url=BASE_URL,
            transport=fake_github.transport(),
        )

        await client.get("installation/repositories")
        await client.get("installation/repositories")

        assert fake_github.tokens_issued == 2


class TestTranslateGitHubError:
    """Tests for translate_github_error."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (0, UpstreamError),
            (401, ConfigurationError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (409, ConflictError),
            (422, ValidationError),
            (500, UpstreamError),
            (503, UpstreamError),
        ],
    )
    def test_default_mapping(self, status, expected):
        error = translate_github_error(GitHubAPIError("boom", status_code=status), "Reading x")
        assert type(error) is expected

    def test_overrides_take_precedence(self):
        error = translate_github_error(
            GitHubAPIError("boom", status_code=422), "Updating ref", overrides={422: ConflictError}
        )
        assert isinstance(error, ConflictError)

    def test_message_includes_context_and_github_message(self):
        error = translate_github_error(
            GitHubAPIError("raw", status_code=404, payload={"message": "Not Found"}), "Reading a.md"
        )
        assert str(error) == "Reading a.md: Not Found"


class TestRepositoryOperations:
    """Tests for repository lookups against the in-memory API."""

    @pytest.mark.asyncio
    async def test_installation_repositories_are_paginated_and_sorted(self, fake_github):
        for index in range(150):
            fake_github.add_repo(
                "acme",
                f"repo-{index:03d}",
                installation_id=7,
                updated_at=f"2024-01-01T00:{index // 60:02d}:{index % 60:02d}Z",
            )
        fake_github.add_repo("other", "private", installation_id=8)

        client = GitHubAPIClient(token="ghs_7_0", base_url=BASE_URL, transport=fake_github.transport())
        repositories = await RepositoryOperations(client).list_installation_repositories()

        assert len(repositories) == 150
        assert repositories[0].name == "repo-149"
        assert repositories[-1].name == "repo-000"
        assert all(repo.owner == "acme" for repo in repositories)
        assert fake_github.count("GET", r"^/installation/repositories$") == 2

    @pytest.mark.asyncio
    async def test_branch_exists(self, fake_github):
        fake_github.add_repo("acme", "site")
        operations = RepositoryOperations(fake_github.client())
        ref = RepositoryRef(owner="acme", name="site")
        assert await operations.branch_exists(ref, "main")
        assert not await operations.branch_exists(ref, "mini-cms-flow")
