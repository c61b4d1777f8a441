"""Tests for repository link parsing."""

import pytest

from application.services.github.models.types import RepositoryRef
from application.services.github.repository.url_parser import (
    extract_owner_and_repo,
    parse_repository_url,
)
from common.exception.errors import ValidationError


@pytest.mark.parametrize(
    "url,is_ssh",
    [
        ("https://github.com/acme/site", False),
        ("https://github.com/acme/site.git", False),
        ("https://github.com/acme/site/", False),
        ("http://www.github.com/acme/site", False),
        ("git@github.com:acme/site.git", True),
        ("acme/site", False),
        ("  acme/site  ", False),
    ],
)
def test_supported_formats(url, is_ssh):
    info = parse_repository_url(url)

    assert (info.owner, info.repo_name) == ("acme", "site")
    assert info.is_ssh is is_ssh
    assert info.original_url == url
    assert info.to_https_url() == "https://github.com/acme/site"


@pytest.mark.parametrize(
    "url",
    [
        "",
        "   ",
        "site",
        "https://gitlab.com/acme/site",
        "https://github.com/acme/site/tree/main",
        "acme/site/extra",
    ],
)
def test_invalid_links(url):
    with pytest.raises(ValidationError) as exc_info:
        parse_repository_url(url)
    assert exc_info.value.field == "github_repo_link"


def test_extract_owner_and_repo():
    ref = extract_owner_and_repo("https://github.com/Acme/Site.git")

    assert ref == RepositoryRef(owner="Acme", name="Site")
    assert ref.matches("acme", "site")
    assert not ref.matches("acme", "site-docs")
