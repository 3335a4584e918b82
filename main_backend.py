"""
Backend entry point.

Checks mandatory credentials, then serves `salus.app` with uvicorn.
Exits with status 1 when a credential is missing or the configuration is
unusable.
"""

import argparse
import logging
import sys

import uvicorn
from dotenv import load_dotenv

from salus.settings import ConfigurationError, load_settings, missing_credentials
from salus_libs.api_keys.api_key_manager import get_default_api_key_manager
from salus_libs.core.project_paths import get_project_root

logger = logging.getLogger("salus")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_dotenv(get_project_root() / ".env")

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    parser = argparse.ArgumentParser(description="Salus plan relay HTTP server")
    parser.add_argument("--host", default=settings.host, help="bind address")
    parser.add_argument("--port", type=int, default=settings.port, help="bind port")
    args = parser.parse_args()

    missing = missing_credentials(settings, get_default_api_key_manager())
    if missing:
        logger.error("Missing required configuration: %s", ", ".join(missing))
        sys.exit(1)

    if not settings.frontend_url:
        logger.warning("FRONTEND_URL not set, allowing all CORS origins")

    logger.info("Server starting on %s:%s (model=%s)", args.host, args.port, settings.gemini_model_name)
    uvicorn.run("salus.app:app", host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
