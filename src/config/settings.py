"""
Configuration settings for the Blog Posts Backend
"""

import os
import logging

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD, DEV or TEST
DATABASE_URL = os.getenv("DATABASE_URL")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")
PORT = int(os.getenv("PORT", 8080))

# Special DATABASE_URL value that keeps posts in process memory (local development only)
MEMORY_DATABASE_URL = "memory://"

# Name of the collection (table) holding blog post documents
POSTS_TABLE = os.getenv("POSTS_TABLE", "blog_posts")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]


def get_database_url() -> str:
    """Resolve the connection string for the current environment"""
    if ENV == "TEST":
        return TEST_DATABASE_URL
    return DATABASE_URL


logger.info(f"Environment: {ENV}")

if not get_database_url():
    logger.warning(
        "No database URL configured for environment %s - set %s before starting the server",
        ENV,
        "TEST_DATABASE_URL" if ENV == "TEST" else "DATABASE_URL",
    )
