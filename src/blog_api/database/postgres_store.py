"""
PostgreSQL blog post store

Each post is one row: the store-managed ``id`` and ``created`` columns plus
a JSONB ``document`` holding author, title and content.
"""

import json
import logging
from typing import Any, Iterable, List, Optional

import asyncpg

from blog_api.config.settings import DB_COMMAND_TIMEOUT, DB_POOL_MAX_SIZE, DB_POOL_MIN_SIZE
from blog_api.database.post_store import (
    NewPost,
    PostChanges,
    PostNotFoundError,
    PostStore,
    StoreError,
    coerce_changes,
    coerce_new_post,
)
from blog_api.models.post import BlogPost
from blog_api.utils.helpers import ensure_utc, new_document_id, utc_now

logger = logging.getLogger(__name__)

TABLE_NAME = "blog_posts"

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id TEXT PRIMARY KEY,
    document JSONB NOT NULL,
    created TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""

SELECT_COLUMNS = "id, document, created"


async def _init_connection(conn) -> None:
    """Decode JSONB columns to dicts on every pooled connection"""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog"
    )


def _row_to_post(row: Any) -> BlogPost:
    return BlogPost.model_validate({
        "id": row["id"],
        "created": ensure_utc(row["created"]),
        **row["document"]
    })


class PostgresPostStore(PostStore):
    driver_name = "postgres"

    def __init__(
        self,
        database_url: str,
        min_size: int = DB_POOL_MIN_SIZE,
        max_size: int = DB_POOL_MAX_SIZE,
        command_timeout: float = DB_COMMAND_TIMEOUT
    ):
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self._pool = None

    def _get_pool(self):
        if self._pool is None:
            raise StoreError("Database pool not initialized")
        return self._pool

    async def connect(self) -> None:
        try:
            self._pool = await asyncpg.create_pool(
                self.database_url,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
                statement_cache_size=0,  # pgbouncer compatibility
                init=_init_connection
            )
            async with self._pool.acquire() as conn:
                await conn.execute(CREATE_TABLE_SQL)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise StoreError(f"Database connection failed: {e}") from e

        logger.info(f"PostgreSQL store ready (table: {TABLE_NAME})")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def ping(self) -> bool:
        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchval("SELECT 1") == 1
        except asyncpg.PostgresError as e:
            raise StoreError(f"Database ping failed: {e}") from e

    async def insert_many(self, items: Iterable[NewPost]) -> List[BlogPost]:
        validated = [coerce_new_post(item) for item in items]
        if not validated:
            return []

        query = f"INSERT INTO {TABLE_NAME} (id, document, created) VALUES ($1, $2, $3) RETURNING {SELECT_COLUMNS}"
        logger.debug(f"Executing INSERT x{len(validated)}: {query}")

        pool = self._get_pool()
        inserted = []
        try:
            async with pool.acquire() as conn:
                async with conn.transaction():
                    for post in validated:
                        row = await conn.fetchrow(
                            query,
                            new_document_id(),
                            post.model_dump(by_alias=True),
                            utc_now()
                        )
                        if row is None:
                            raise StoreError("INSERT returned no row")
                        inserted.append(_row_to_post(row))
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during INSERT: {e}")
            raise StoreError(f"Database INSERT failed: {e}") from e

        return inserted

    async def find_all(self) -> List[BlogPost]:
        query = f"SELECT {SELECT_COLUMNS} FROM {TABLE_NAME} ORDER BY created, id"
        logger.debug(f"Executing READ: {query}")

        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(query)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during READ: {e}")
            raise StoreError(f"Database query failed: {e}") from e

        return [_row_to_post(row) for row in rows]

    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        query = f"SELECT {SELECT_COLUMNS} FROM {TABLE_NAME} WHERE id = $1"
        logger.debug(f"Executing READ: {query} [{post_id}]")

        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(query, post_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during READ: {e}")
            raise StoreError(f"Database query failed: {e}") from e

        return _row_to_post(row) if row is not None else None

    async def update_by_id(self, post_id: str, changes: PostChanges) -> BlogPost:
        fields = coerce_changes(changes)
        query = (
            f"UPDATE {TABLE_NAME} SET document = document || $2::jsonb "
            f"WHERE id = $1 RETURNING {SELECT_COLUMNS}"
        )
        logger.debug(f"Executing UPDATE: {query} [{post_id}]")

        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(query, post_id, fields)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during UPDATE: {e}")
            raise StoreError(f"Database UPDATE failed: {e}") from e

        if row is None:
            raise PostNotFoundError(post_id)
        return _row_to_post(row)

    async def delete_by_id(self, post_id: str) -> None:
        query = f"DELETE FROM {TABLE_NAME} WHERE id = $1"
        logger.debug(f"Executing DELETE: {query} [{post_id}]")

        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                async with conn.transaction():
                    result = await conn.execute(query, post_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during DELETE: {e}")
            raise StoreError(f"Database DELETE failed: {e}") from e

        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        if deleted_count == 0:
            raise PostNotFoundError(post_id)

    async def count(self) -> int:
        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchval(f"SELECT count(*) FROM {TABLE_NAME}")
        except asyncpg.PostgresError as e:
            raise StoreError(f"Database query failed: {e}") from e

    async def drop_all(self) -> None:
        pool = self._get_pool()
        try:
            async with pool.acquire() as conn:
                await conn.execute(f"TRUNCATE {TABLE_NAME}")
        except asyncpg.PostgresError as e:
            raise StoreError(f"Database TRUNCATE failed: {e}") from e
        logger.warning(f"Dropped all rows from {TABLE_NAME}")
