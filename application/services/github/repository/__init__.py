"""
Repository Module

Handles the in-repository configuration of the CMS:
- Allowed-directory policy and the enforcement gate
- Policy file storage on the dedicated branch
- Repository link parsing
"""

from application.services.github.repository.config import (
    RepositoryConfigStore,
    parse_policy,
    serialize_policy,
)
from application.services.github.repository.policy import (
    PolicyGate,
    RepositoryPolicy,
    is_allowed,
    normalize_path,
    validate_policy_directories,
)
from application.services.github.repository.url_parser import (
    RepositoryURLInfo,
    extract_owner_and_repo,
    parse_repository_url,
)

__all__ = [
    "PolicyGate",
    "RepositoryConfigStore",
    "RepositoryPolicy",
    "RepositoryURLInfo",
    "extract_owner_and_repo",
    "is_allowed",
    "normalize_path",
    "parse_policy",
    "parse_repository_url",
    "serialize_policy",
    "validate_policy_directories",
]
