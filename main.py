#!/usr/bin/env python3
"""
Financial Insights Agent - Entry Point

Starts the HTTP API serving the plugin data endpoints and agent chat.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import uvicorn

from config.settings import settings
from database.queries import get_db_manager
from utils.logger import logger, setup_logger


def check_configuration():
    """Warn about configuration that limits what the agent can do."""
    if not settings.GEMINI_API_KEY and not settings.OPENROUTER_API_KEY:
        logger.warning(
            "Neither GEMINI_API_KEY nor OPENROUTER_API_KEY is set; "
            "chat requests will fail with a generation error"
        )


def initialize_database():
    """Initialize the database, create tables and seed the default agent."""
    try:
        db_manager = get_db_manager()
        db_manager.create_tables()
        db_manager.seed_default_data()
        logger.info("Database initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        return False


def main():
    """Main entry point."""
    setup_logger(settings.LOG_LEVEL, settings.LOG_DIR)

    logger.info("=" * 50)
    logger.info("Financial Insights Agent Starting...")
    logger.info("=" * 50)

    check_configuration()

    if not initialize_database():
        logger.error("Database initialization failed. Exiting.")
        sys.exit(1)

    from api import create_app

    app = create_app()

    logger.info(f"Database: {settings.DATABASE_URL}")
    logger.info(f"Primary LLM: {settings.PRIMARY_LLM_MODEL}")
    logger.info(f"Debug Mode: {settings.DEBUG}")
    logger.info("=" * 50)

    try:
        uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT, log_level=settings.LOG_LEVEL.lower())
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
