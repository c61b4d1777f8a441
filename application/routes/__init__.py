"""
Application routes package.

Contains all API endpoint blueprints of the repository service.
"""

from application.routes.org_routes import org_bp
from application.routes.repository_routes import repository_bp

__all__ = ["org_bp", "repository_bp"]
