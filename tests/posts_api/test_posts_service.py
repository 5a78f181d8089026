"""
PostsService tests against a mocked asyncpg pool, plus in-memory store semantics
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.posts_service import InMemoryPostsService, PostsService

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_row(**overrides):
    row = {
        "id": uuid.uuid4(),
        "author_first_name": "Jane",
        "author_last_name": "Doe",
        "title": "First post",
        "content": "Hello world",
        "created": CREATED
    }
    row.update(overrides)
    return row


@pytest.fixture
def conn():
    connection = AsyncMock()
    connection.transaction = MagicMock()
    return connection


@pytest.fixture
def service(conn):
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return PostsService(pool=pool)


class TestPostsServiceReads:

    @pytest.mark.asyncio
    async def test_list_maps_rows_to_documents(self, service, conn):
        row = make_row()
        conn.fetch.return_value = [row]

        result = await service.list_posts()

        assert result.success
        assert result.count == 1
        assert result.data[0] == {
            "id": str(row["id"]),
            "author": {"firstName": "Jane", "lastName": "Doe"},
            "title": "First post",
            "content": "Hello world",
            "created": CREATED
        }
        assert "FROM blog_posts" in conn.fetch.call_args.args[0]

    @pytest.mark.asyncio
    async def test_count(self, service, conn):
        conn.fetchval.return_value = 7

        result = await service.count_posts()

        assert result.success
        assert result.count == 7

    @pytest.mark.asyncio
    async def test_get_by_id(self, service, conn):
        row = make_row()
        conn.fetchrow.return_value = row

        result = await service.get_post(str(row["id"]))

        assert result.success
        assert result.data[0]["id"] == str(row["id"])
        assert conn.fetchrow.call_args.args[1] == row["id"]

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, service, conn):
        conn.fetchrow.return_value = None

        result = await service.get_post(str(uuid.uuid4()))

        assert not result.success
        assert result.error_type == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_malformed_id_skips_database(self, service, conn):
        result = await service.get_post("12345")

        assert result.error_type == "RESOURCE_NOT_FOUND"
        conn.fetchrow.assert_not_called()


class TestPostsServiceWrites:

    @pytest.mark.asyncio
    async def test_create_inserts_document(self, service, conn):
        conn.fetchrow.side_effect = lambda query, *params: make_row(
            id=params[0], author_first_name=params[1], author_last_name=params[2],
            title=params[3], content=params[4], created=params[5]
        )

        result = await service.create_post({
            "author": {"firstName": "Ada", "lastName": "Lovelace"},
            "title": "Notes",
            "content": "On the analytical engine",
            "created": CREATED
        })

        assert result.success
        post = result.data[0]
        assert uuid.UUID(post["id"])
        assert post["author"] == {"firstName": "Ada", "lastName": "Lovelace"}
        assert post["created"] == CREATED

        query = conn.fetchrow.call_args.args[0]
        assert query.startswith("INSERT INTO blog_posts")
        assert "RETURNING" in query

    @pytest.mark.asyncio
    async def test_create_defaults_missing_author(self, service, conn):
        conn.fetchrow.side_effect = lambda query, *params: make_row(
            id=params[0], author_first_name=params[1], author_last_name=params[2]
        )

        result = await service.create_post({"title": "T", "content": "C"})

        assert result.data[0]["author"] == {"firstName": "", "lastName": ""}

    @pytest.mark.asyncio
    async def test_create_requires_title_and_content(self, service, conn):
        result = await service.create_post({"content": "No title"})

        assert result.error_type == "INVALID_QUERY"
        conn.fetchrow.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_many_uses_transaction(self, service, conn):
        result = await service.insert_many([
            {"title": "One", "content": "1"},
            {"title": "Two", "content": "2"}
        ])

        assert result.success
        assert result.count == 2
        conn.transaction.assert_called_once()
        assert len(conn.executemany.call_args.args[1]) == 2

    @pytest.mark.asyncio
    async def test_update_content_only(self, service, conn):
        row = make_row(content="Changed")
        conn.fetchrow.return_value = row

        result = await service.update_post(str(row["id"]), {"content": "Changed"})

        assert result.success
        query, *params = conn.fetchrow.call_args.args
        assert query.startswith("UPDATE blog_posts SET content = $2 WHERE id = $1")
        assert params == [row["id"], "Changed"]

    @pytest.mark.asyncio
    async def test_update_title_and_content(self, service, conn):
        row = make_row()
        conn.fetchrow.return_value = row

        await service.update_post(row["id"], {"content": "Body", "title": "New"})

        query, *params = conn.fetchrow.call_args.args
        assert "SET title = $2, content = $3 WHERE" in query
        assert "author" not in query.split("RETURNING")[0]
        assert params == [row["id"], "New", "Body"]

    @pytest.mark.asyncio
    async def test_update_missing_is_not_found(self, service, conn):
        conn.fetchrow.return_value = None

        result = await service.update_post(str(uuid.uuid4()), {"content": "x"})

        assert result.error_type == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [
        {},
        {"content": ""},
        {"created": "2024-01-01"},
        {"id": "other"},
        {"author": {"firstName": "Ada", "lastName": "Lovelace"}},
        {"title": "New", "author": {"firstName": "Ada"}},
    ])
    async def test_update_rejects_invalid_fields(self, service, conn, fields):
        result = await service.update_post(str(uuid.uuid4()), fields)

        assert result.error_type == "INVALID_QUERY"
        conn.fetchrow.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [("DELETE 1", 1), ("DELETE 0", 0)])
    async def test_delete_reports_removed_count(self, service, conn, status, expected):
        conn.execute.return_value = status

        result = await service.delete_post(str(uuid.uuid4()))

        assert result.success
        assert result.count == expected


class TestPostsServiceFailures:

    @pytest.mark.asyncio
    async def test_pool_not_initialized(self):
        result = await PostsService().list_posts()

        assert not result.success
        assert result.error_type == "DATABASE_ERROR"
        assert "not initialized" in result.error

    @pytest.mark.asyncio
    async def test_connection_error(self, service, conn):
        conn.fetch.side_effect = OSError("connection refused")

        result = await service.list_posts()

        assert result.error_type == "DATABASE_ERROR"
        assert "connection refused" in result.error


class TestInMemoryPostsService:

    @pytest.mark.asyncio
    async def test_crud_cycle(self):
        store = InMemoryPostsService()

        created = await store.create_post({"title": "T", "content": "C"})
        post_id = created.data[0]["id"]
        assert (await store.count_posts()).count == 1

        updated = await store.update_post(post_id, {"content": "C2"})
        assert updated.data[0]["content"] == "C2"
        assert updated.data[0]["created"] == created.data[0]["created"]

        deleted = await store.delete_post(post_id)
        assert deleted.count == 1
        assert (await store.get_post(post_id)).error_type == "RESOURCE_NOT_FOUND"
        assert (await store.delete_post(post_id)).count == 0

    @pytest.mark.asyncio
    async def test_results_are_copies(self):
        store = InMemoryPostsService()
        created = await store.create_post({"title": "T", "content": "C"})

        created.data[0]["title"] = "mutated"

        fetched = await store.get_post(created.data[0]["id"])
        assert fetched.data[0]["title"] == "T"

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_created(self):
        store = InMemoryPostsService()
        await store.insert_many([
            {"title": "Later", "content": "2", "created": datetime(2024, 2, 1, tzinfo=timezone.utc)},
            {"title": "Earlier", "content": "1", "created": datetime(2024, 1, 1, tzinfo=timezone.utc)},
        ])

        result = await store.list_posts()

        assert [post["title"] for post in result.data] == ["Earlier", "Later"]
