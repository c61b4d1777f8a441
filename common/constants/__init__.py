"""Service and business logic constants."""

# ============================================================================
# GitHub App Authentication
# ============================================================================

# GitHub rejects App JWTs valid for longer than 10 minutes
APP_JWT_MAX_EXPIRATION_SECONDS = 600

# Installation tokens are refreshed this long before they actually expire
INSTALLATION_TOKEN_REFRESH_BUFFER_SECONDS = 300

# ============================================================================
# Git Data API
# ============================================================================

# Every file written by the CMS is a regular, non-executable blob
REGULAR_FILE_MODE = "100644"

# Page size when listing repositories accessible to an installation
INSTALLATION_REPOS_PAGE_SIZE = 100

# ============================================================================
# Commit Messages
# ============================================================================

INITIALIZE_CONFIG_MESSAGE = "Initialize mini-cms configuration"
UPDATE_CONFIG_MESSAGE = "Update mini-cms configuration"

__all__ = [
    'APP_JWT_MAX_EXPIRATION_SECONDS',
    'INSTALLATION_TOKEN_REFRESH_BUFFER_SECONDS',
    'REGULAR_FILE_MODE',
    'INSTALLATION_REPOS_PAGE_SIZE',
    'INITIALIZE_CONFIG_MESSAGE',
    'UPDATE_CONFIG_MESSAGE',
]
