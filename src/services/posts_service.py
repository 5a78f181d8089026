"""
Posts service - persistence of blog post documents
"""

import copy
import logging
import uuid
from typing import Dict, Any, List, Optional, Union

import asyncpg

from config.settings import MEMORY_DATABASE_URL, POSTS_TABLE, get_database_url
from database.connection import get_db_pool
from services.base_service import BaseService, ServiceResult
from utils.helpers import normalize_timestamp

logger = logging.getLogger(__name__)

# Fields a client may change after creation; id and created are immutable
UPDATABLE_FIELDS = ("title", "content")

POST_COLUMNS = "id, author_first_name, author_last_name, title, content, created"

# Failures reported as DATABASE_ERROR results instead of propagating
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError)


def row_to_post(row) -> Dict[str, Any]:
    """Convert a blog_posts row into the post document shape"""
    return {
        "id": str(row["id"]),
        "author": {
            "firstName": row["author_first_name"],
            "lastName": row["author_last_name"]
        },
        "title": row["title"],
        "content": row["content"],
        "created": row["created"]
    }


def build_post_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Assign an id and default timestamp to a new post"""
    author = data.get("author") or {}
    return {
        "id": str(uuid.uuid4()),
        "author": {
            "firstName": author.get("firstName") or "",
            "lastName": author.get("lastName") or ""
        },
        "title": data["title"],
        "content": data["content"],
        "created": normalize_timestamp(data.get("created"))
    }


def check_update_fields(fields: Dict[str, Any]) -> Optional[str]:
    """Return an error message when an update cannot be applied, otherwise None"""
    if not fields:
        return "No fields provided for update"

    unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
    if unknown:
        return f"Fields cannot be updated: {', '.join(unknown)}"

    for name in ("title", "content"):
        if name in fields and not fields[name]:
            return f"{name} cannot be empty"

    return None


class PostsService(BaseService):
    """Blog posts stored in PostgreSQL through the shared asyncpg pool"""

    def __init__(self, pool=None):
        super().__init__("posts")
        self._pool = pool

    def _get_pool(self):
        pool = self._pool or get_db_pool()
        if not pool:
            raise RuntimeError("Database pool not initialized")
        return pool

    async def list_posts(self) -> ServiceResult:
        """Return every stored post, oldest first"""
        try:
            async with self._get_pool().acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT {POST_COLUMNS} FROM {POSTS_TABLE} ORDER BY created, id"
                )
        except DATABASE_ERRORS as e:
            return self.database_error("List", e)

        return self.ok([row_to_post(row) for row in rows])

    async def count_posts(self) -> ServiceResult:
        try:
            async with self._get_pool().acquire() as conn:
                total = await conn.fetchval(f"SELECT COUNT(*) FROM {POSTS_TABLE}")
        except DATABASE_ERRORS as e:
            return self.database_error("Count", e)

        return ServiceResult(success=True, data=[], count=total)

    async def get_post(self, post_id: Union[str, uuid.UUID]) -> ServiceResult:
        """Fetch a single post; unknown or malformed ids are reported as not found"""
        record_id = self.parse_id(post_id)
        if record_id is None:
            return self.not_found(post_id)

        try:
            async with self._get_pool().acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {POST_COLUMNS} FROM {POSTS_TABLE} WHERE id = $1",
                    record_id
                )
        except DATABASE_ERRORS as e:
            return self.database_error("Read", e)

        if not row:
            return self.not_found(post_id)

        return self.ok([row_to_post(row)])

    async def create_post(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Insert a new post

        Args:
            data: Dictionary with author {firstName, lastName}, title, content
                  and an optional created timestamp

        Returns:
            ServiceResult with the stored post, including its generated id
        """
        if not data.get("title") or not data.get("content"):
            return self.invalid_query("title and content are required")

        post = build_post_document(data)
        logger.info(f"Creating post {post['id']}: {post['title'][:100]}")

        try:
            async with self._get_pool().acquire() as conn:
                row = await conn.fetchrow(
                    f"INSERT INTO {POSTS_TABLE} ({POST_COLUMNS}) "
                    f"VALUES ($1, $2, $3, $4, $5, $6) RETURNING {POST_COLUMNS}",
                    uuid.UUID(post["id"]),
                    post["author"]["firstName"],
                    post["author"]["lastName"],
                    post["title"],
                    post["content"],
                    post["created"]
                )
        except DATABASE_ERRORS as e:
            return self.database_error("Create", e)

        if not row:
            return self.database_error("Create", RuntimeError("Insert operation failed - no data returned"))

        return self.ok([row_to_post(row)])

    async def insert_many(self, posts: List[Dict[str, Any]]) -> ServiceResult:
        """Insert several posts in one transaction (used for seeding)"""
        documents = [build_post_document(post) for post in posts]

        try:
            async with self._get_pool().acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(
                        f"INSERT INTO {POSTS_TABLE} ({POST_COLUMNS}) VALUES ($1, $2, $3, $4, $5, $6)",
                        [
                            (
                                uuid.UUID(doc["id"]),
                                doc["author"]["firstName"],
                                doc["author"]["lastName"],
                                doc["title"],
                                doc["content"],
                                doc["created"]
                            )
                            for doc in documents
                        ]
                    )
        except DATABASE_ERRORS as e:
            return self.database_error("Bulk insert", e)

        return self.ok(documents)

    async def update_post(self, post_id: Union[str, uuid.UUID], fields: Dict[str, Any]) -> ServiceResult:
        """Apply a partial update to title and/or content"""
        problem = check_update_fields(fields)
        if problem:
            return self.invalid_query(problem)

        record_id = self.parse_id(post_id)
        if record_id is None:
            return self.not_found(post_id)

        set_clauses = []
        params: List[Any] = [record_id]
        for name in UPDATABLE_FIELDS:
            if name not in fields:
                continue
            params.append(fields[name])
            set_clauses.append(f"{name} = ${len(params)}")

        query = (
            f"UPDATE {POSTS_TABLE} SET {', '.join(set_clauses)} "
            f"WHERE id = $1 RETURNING {POST_COLUMNS}"
        )
        logger.info(f"Updating post {record_id}: {', '.join(sorted(fields))}")

        try:
            async with self._get_pool().acquire() as conn:
                row = await conn.fetchrow(query, *params)
        except DATABASE_ERRORS as e:
            return self.database_error("Update", e)

        if not row:
            return self.not_found(post_id)

        return self.ok([row_to_post(row)])

    async def delete_post(self, post_id: Union[str, uuid.UUID]) -> ServiceResult:
        """Remove a post; count is the number of removed documents (0 or 1)"""
        record_id = self.parse_id(post_id)
        if record_id is None:
            return ServiceResult(success=True, data=[], count=0)

        try:
            async with self._get_pool().acquire() as conn:
                status = await conn.execute(f"DELETE FROM {POSTS_TABLE} WHERE id = $1", record_id)
        except DATABASE_ERRORS as e:
            return self.database_error("Delete", e)

        # asyncpg returns the command tag, e.g. "DELETE 1"
        deleted = int(status.split()[-1]) if status else 0
        logger.info(f"Deleted {deleted} post(s) with id {record_id}")
        return ServiceResult(success=True, data=[], count=deleted)


class InMemoryPostsService(BaseService):
    """Blog posts kept in a process-local dict; same contract as PostsService"""

    def __init__(self):
        super().__init__("posts")
        self._posts: Dict[str, Dict[str, Any]] = {}

    def reset(self):
        self._posts.clear()

    async def list_posts(self) -> ServiceResult:
        posts = sorted(self._posts.values(), key=lambda post: (post["created"], post["id"]))
        return self.ok(copy.deepcopy(posts))

    async def count_posts(self) -> ServiceResult:
        return ServiceResult(success=True, data=[], count=len(self._posts))

    async def get_post(self, post_id: Union[str, uuid.UUID]) -> ServiceResult:
        record_id = self.parse_id(post_id)
        post = self._posts.get(str(record_id)) if record_id else None
        if post is None:
            return self.not_found(post_id)
        return self.ok([copy.deepcopy(post)])

    async def create_post(self, data: Dict[str, Any]) -> ServiceResult:
        if not data.get("title") or not data.get("content"):
            return self.invalid_query("title and content are required")

        post = build_post_document(data)
        self._posts[post["id"]] = post
        logger.info(f"Creating post {post['id']}: {post['title'][:100]}")
        return self.ok([copy.deepcopy(post)])

    async def insert_many(self, posts: List[Dict[str, Any]]) -> ServiceResult:
        documents = [build_post_document(post) for post in posts]
        for doc in documents:
            self._posts[doc["id"]] = doc
        return self.ok(copy.deepcopy(documents))

    async def update_post(self, post_id: Union[str, uuid.UUID], fields: Dict[str, Any]) -> ServiceResult:
        problem = check_update_fields(fields)
        if problem:
            return self.invalid_query(problem)

        record_id = self.parse_id(post_id)
        post = self._posts.get(str(record_id)) if record_id else None
        if post is None:
            return self.not_found(post_id)

        for name in UPDATABLE_FIELDS:
            if name not in fields:
                continue
            post[name] = fields[name]

        return self.ok([copy.deepcopy(post)])

    async def delete_post(self, post_id: Union[str, uuid.UUID]) -> ServiceResult:
        record_id = self.parse_id(post_id)
        removed = self._posts.pop(str(record_id), None) if record_id else None
        return ServiceResult(success=True, data=[], count=1 if removed else 0)


# Global service instance
_posts_service: Optional[Union[PostsService, InMemoryPostsService]] = None

def get_posts_service() -> Union[PostsService, InMemoryPostsService]:
    """Get the global posts service instance for the configured store"""
    global _posts_service
    if _posts_service is None:
        if get_database_url() == MEMORY_DATABASE_URL:
            _posts_service = InMemoryPostsService()
        else:
            _posts_service = PostsService()
    return _posts_service
