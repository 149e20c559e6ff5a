#!/usr/bin/env python
"""
Entry point for the Aib HUB API server
"""
import os
import sys
import logging

# Allow running from a checkout without installing the package
src_path = os.path.join(os.path.dirname(__file__), "src")
if os.path.exists(src_path) and src_path not in sys.path:
    sys.path.insert(0, src_path)

from aib_hub.api_server import app  # noqa: E402
from aib_hub.config import config  # noqa: E402


if __name__ == "__main__":
    import uvicorn

    logger = logging.getLogger(__name__)
    logger.info("=" * 50)
    logger.info("Aib HUB API - Starting Up")
    logger.info("=" * 50)
    logger.info(f"DATABASE_URL: {'SET' if os.getenv('DATABASE_URL') else 'NOT SET (using SQLite)'}")
    logger.info(f"Starting Aib HUB API server on port {config.PORT}")
    logger.info(f"Health check endpoint: http://0.0.0.0:{config.PORT}/health")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=config.PORT,
        log_config=None,
        access_log=True,
    )
