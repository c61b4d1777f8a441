"""
Configuration module.

Reads environment variables (optionally from a .env file) into module-level
constants. Integration components receive explicit objects built from these
values instead of reading them directly.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    return int(value) if value else default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    return float(value) if value else default


# GitHub App configuration
GITHUB_APP_ID = os.getenv("GITHUB_APP_ID") or os.getenv("APP_ID")
GITHUB_APP_PRIVATE_KEY_PATH = os.getenv("GITHUB_APP_PRIVATE_KEY_PATH")
GITHUB_APP_PRIVATE_KEY_CONTENT = os.getenv("GITHUB_APP_PRIVATE_KEY_CONTENT") or os.getenv(
    "GITHUB_PRIVATE_KEY"
)

# GitHub REST API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")
GITHUB_REQUEST_TIMEOUT = _get_float("GITHUB_REQUEST_TIMEOUT", 30.0)

# Content repository layout
CMS_BRANCH = os.getenv("CMS_BRANCH", "mini-cms-flow")
CMS_CONFIG_FILE = os.getenv("CMS_CONFIG_FILE", ".mini-cms.yml")

# Caller-side limits for repository operations
CMS_OPERATION_TIMEOUT = _get_float("CMS_OPERATION_TIMEOUT", 60.0)
CMS_COMMIT_MAX_ATTEMPTS = _get_int("CMS_COMMIT_MAX_ATTEMPTS", 1)
CMS_COMMIT_RETRY_BACKOFF = _get_float("CMS_COMMIT_RETRY_BACKOFF", 0.5)

# Session tokens (issued by the auth subsystem, verified here)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_COOKIE = os.getenv("ACCESS_TOKEN_COOKIE", "access_token")

# Project directory seed (organizations, projects, members)
PROJECTS_FILE = os.getenv("PROJECTS_FILE", "projects.yml")

# Browser clients; credentials (the access cookie) need an explicit origin
CORS_ALLOWED_ORIGIN = os.getenv("CORS_ALLOWED_ORIGIN", "*")
