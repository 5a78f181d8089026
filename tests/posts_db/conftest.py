"""
pytest fixtures for end-to-end tests against a real PostgreSQL database
Seeds five posts before each test and drops the posts table afterwards
"""

import os

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv

from app import app
from database.connection import init_database, close_database, drop_posts_table
from services.posts_service import PostsService, get_posts_service

load_dotenv()

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

SEED_COUNT = 5


def pytest_collection_modifyitems(config, items):
    """Mark the database suite and skip it when no test database is configured"""
    skip_db = pytest.mark.skip(reason="TEST_DATABASE_URL not set")
    for item in items:
        if "posts_db" not in item.path.parts:
            continue
        item.add_marker(pytest.mark.integration)
        if not TEST_DATABASE_URL:
            item.add_marker(skip_db)


@pytest_asyncio.fixture
async def posts_service(post_factory):
    await init_database(TEST_DATABASE_URL)
    service = PostsService()
    app.dependency_overrides[get_posts_service] = lambda: service

    await service.insert_many([post_factory.generate_post() for _ in range(SEED_COUNT)])

    yield service

    app.dependency_overrides.clear()
    await drop_posts_table()
    await close_database()


@pytest_asyncio.fixture
async def api_client(posts_service):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
