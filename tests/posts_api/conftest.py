"""
pytest fixtures for the posts API suite
Each test runs against a fresh in-memory store seeded with five posts
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from app import app
from services.posts_service import InMemoryPostsService, get_posts_service

SEED_COUNT = 5


@pytest.fixture
def posts_store(post_factory):
    """Seed the store before each test and empty it afterwards"""
    store = InMemoryPostsService()
    asyncio.run(store.insert_many([post_factory.generate_post() for _ in range(SEED_COUNT)]))

    app.dependency_overrides[get_posts_service] = lambda: store
    yield store

    app.dependency_overrides.clear()
    store.reset()


@pytest.fixture
def client(posts_store):
    return TestClient(app)


@pytest.fixture
def stored_post(posts_store):
    """First post as the store returns it"""
    result = asyncio.run(posts_store.list_posts())
    return result.data[0]


@pytest.fixture
def find_post(posts_store):
    """Read a post straight from the store, bypassing HTTP"""
    def _find(post_id):
        return asyncio.run(posts_store.get_post(post_id))
    return _find
