"""Repository endpoints package."""

from application.routes.repository_endpoints.bulk_update import handle_bulk_update
from application.routes.repository_endpoints.config import handle_get_config, handle_update_config
from application.routes.repository_endpoints.contents import handle_list_contents
from application.routes.repository_endpoints.create_file import handle_create_file
from application.routes.repository_endpoints.file_content import handle_get_file_content
from application.routes.repository_endpoints.health import handle_health_check
from application.routes.repository_endpoints.installation import (
    handle_list_installation_repositories,
    handle_register_installation,
)

__all__ = [
    "handle_bulk_update",
    "handle_create_file",
    "handle_get_config",
    "handle_get_file_content",
    "handle_health_check",
    "handle_list_contents",
    "handle_list_installation_repositories",
    "handle_register_installation",
    "handle_update_config",
]
