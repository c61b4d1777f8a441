"""
Constants used across route handlers.

Centralizes rate limits and request bounds of the repository endpoints.
"""

# ============================================================================
# Rate Limiting Defaults
# ============================================================================

# Read endpoints: directory listings, file reads, policy reads (requests per minute)
RATE_LIMIT_REPOSITORY_READ = 300

# Commit endpoints: bulk update and file creation (requests per minute)
RATE_LIMIT_REPOSITORY_WRITE = 30

# Policy updates and installation registration (requests per minute)
RATE_LIMIT_REPOSITORY_ADMIN = 10

# ============================================================================
# Request Bounds
# ============================================================================

# Maximum number of files in one bulk update
MAX_FILES_PER_COMMIT = 100

# Maximum length of a commit message
MAX_COMMIT_MESSAGE_LENGTH = 1000
