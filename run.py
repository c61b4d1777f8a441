#!/usr/bin/env python3
"""
Entry point script to run the Mini CMS repository service.

This script should be run from the project root directory:
    python run.py

Environment variables:
    APP_HOST: Host to bind to (default: 127.0.0.1)
    APP_PORT: Port to bind to (default: 8000)
    APP_DEBUG: Enable debug mode (default: false)
    APP_TIMEOUT: Keep-alive and shutdown timeout in seconds (default: 75)
"""
import os
import asyncio
from hypercorn.config import Config
from hypercorn.asyncio import serve

if __name__ == "__main__":
    from application.app import app, logger

    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "8000"))
    debug = os.getenv("APP_DEBUG", "false").lower() == "true"
    # Above CMS_OPERATION_TIMEOUT so a timed-out operation still gets its 504 out
    timeout = int(os.getenv("APP_TIMEOUT", "75"))

    config = Config()
    config.bind = [f"{host}:{port}"]
    config.keep_alive_timeout = timeout
    config.shutdown_timeout = timeout
    config.graceful_timeout = 30

    if debug:
        config.loglevel = "DEBUG"
        config.accesslog = "-"  # Log to stdout
        config.errorlog = "-"

    logger.info(f"Starting Mini CMS repository service on {host}:{port}")
    logger.info(f"Debug mode: {debug}")

    asyncio.run(serve(app, config))
