"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from config.settings import POSTS_TABLE, get_database_url

logger = logging.getLogger(__name__)

# Global database pool
db_pool = None


class DatabaseConfigurationError(RuntimeError):
    """Raised when the server is started without a usable connection string"""


POSTS_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {POSTS_TABLE} (
    id UUID PRIMARY KEY,
    author_first_name TEXT NOT NULL DEFAULT '',
    author_last_name TEXT NOT NULL DEFAULT '',
    title TEXT NOT NULL CHECK (title <> ''),
    content TEXT NOT NULL CHECK (content <> ''),
    created TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


async def init_database(database_url: Optional[str] = None):
    """Initialize database connection pool"""
    global db_pool

    database_url = database_url or get_database_url()
    if not database_url:
        raise DatabaseConfigurationError("DATABASE_URL environment variable is required")

    db_pool = await asyncpg.create_pool(
        database_url,
        min_size=2,
        max_size=10,
        command_timeout=60,
        statement_cache_size=0  # Fix for pgbouncer compatibility
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    await ensure_schema()
    logger.info("Database initialized successfully")


async def ensure_schema():
    """Create the posts table if it does not exist yet"""
    async with db_pool.acquire() as conn:
        await conn.execute(POSTS_SCHEMA)


async def drop_posts_table():
    """Drop the posts table (test database teardown)"""
    logger.warning(f"Dropping table {POSTS_TABLE}")
    async with db_pool.acquire() as conn:
        await conn.execute(f"DROP TABLE IF EXISTS {POSTS_TABLE}")


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")


def get_db_pool():
    """Get the database pool instance"""
    return db_pool
