"""Pytest configuration for tests.

Sets up Python path and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from application.services.github.auth.credentials import GitHubAppCredentials  # noqa: E402
from tests.fixtures.github_fixtures import FakeGitHub, generate_private_key_pem  # noqa: E402


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """RSA key shared by the whole session (generation is slow)."""
    return generate_private_key_pem()


@pytest.fixture
def app_credentials(private_key_pem) -> GitHubAppCredentials:
    return GitHubAppCredentials(app_id="12345", private_key=private_key_pem)


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()
