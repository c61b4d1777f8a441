import sys
from pathlib import Path

# Load environment variables FIRST, before any other imports
from dotenv import load_dotenv
load_dotenv()

# Add project root to path (for IDE compatibility when running directly)
project_root = Path(__file__).parent.parent.resolve()
project_root_str = str(project_root)

if sys.path and Path(sys.path[0]).name == 'application':
    sys.path[0] = project_root_str
elif project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import logging
import os
from typing import Dict

from quart import Quart, Response, jsonify
from quart_rate_limiter import RateLimiter
from quart_schema import QuartSchema, ResponseSchemaValidationError, hide

from application.routes import org_bp, repository_bp
from application.routes.common.error_handlers import register_error_handlers
from application.services.service_factory import get_service_factory
from common.config.config import CMS_BRANCH, CMS_CONFIG_FILE, CORS_ALLOWED_ORIGIN, GITHUB_API_URL

# Configure root logging to both stdout and a file for debugging/triage.
# Default file is app-log.log in the current working directory; override with APP_LOG_FILE.
log_file = os.getenv("APP_LOG_FILE", "app-log.log")
log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=logging.INFO,
    format=log_format,
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_file, mode="a"),
    ],
)

# httpx logs every request URL at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = Quart(__name__)

# Initialize rate limiter
RateLimiter(app)

QuartSchema(
    app,
    info={"title": "Mini CMS Repository Service", "version": "1.0.0"},
    tags=[
        {"name": "Repository", "description": "Project content stored in GitHub"},
        {"name": "Organizations", "description": "GitHub App installation endpoints"},
        {"name": "System", "description": "System and health endpoints"},
    ],
    security=[{"bearerAuth": []}],
    security_schemes={
        "bearerAuth": {
            "type": "http",
            "scheme": "bearer",
        }
    },
)


@app.errorhandler(ResponseSchemaValidationError)
async def handle_response_validation_error(
    error: ResponseSchemaValidationError,
) -> tuple[Dict[str, str], int]:
    return {"error": "VALIDATION"}, 500


register_error_handlers(app)

# Register blueprints (URL prefixes are set in the blueprints)
app.register_blueprint(repository_bp)
app.register_blueprint(org_bp)


@app.route("/favicon.ico")
@hide
def favicon() -> tuple[str, int]:
    return "", 200


@app.before_serving
async def startup() -> None:
    # A malformed projects seed fails here rather than on the first request
    _ = get_service_factory().project_repository
    logger.info(
        f"Repository service ready: branch={CMS_BRANCH}, policy file={CMS_CONFIG_FILE}, "
        f"GitHub API={GITHUB_API_URL}"
    )


@app.after_serving
async def shutdown() -> None:
    logger.info("Repository service stopped")


@app.after_request
async def apply_cors(response: Response) -> Response:
    response.headers["Access-Control-Allow-Origin"] = CORS_ALLOWED_ORIGIN
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
    if CORS_ALLOWED_ORIGIN != "*":
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


# Handle OPTIONS preflight requests for CORS
@app.route("/<path:path>", methods=["OPTIONS"])
async def handle_options(path: str) -> tuple[Response, int]:
    """Handle CORS preflight OPTIONS requests."""
    return jsonify({"status": "ok"}), 200
