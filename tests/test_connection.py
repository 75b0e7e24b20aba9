"""
Store selection and lifecycle tests
"""

import pytest

from blog_api.database import connection
from blog_api.database.connection import close_database, create_post_store, get_post_store, init_database
from blog_api.database.memory_store import InMemoryPostStore
from blog_api.database.post_store import StoreError
from blog_api.database.postgres_store import PostgresPostStore


@pytest.mark.parametrize("url,expected", [
    ("memory://test-blog-app", InMemoryPostStore),
    ("memory://", InMemoryPostStore),
    ("postgres://localhost/blog-app", PostgresPostStore),
    ("postgresql://user:secret@db:5432/blog-app", PostgresPostStore),
])
def test_driver_chosen_by_scheme(url, expected):
    assert isinstance(create_post_store(url), expected)


def test_memory_store_named_from_url():
    assert create_post_store("memory://test-blog-app").name == "test-blog-app"
    assert create_post_store("memory://").name == "blog-app"


@pytest.mark.parametrize("url", ["mongodb://localhost/blog-app", "sqlite:///posts.db", "not a url"])
def test_unsupported_scheme(url):
    with pytest.raises(ValueError, match="Unsupported database URL scheme"):
        create_post_store(url)


@pytest.mark.asyncio
async def test_init_and_close_database():
    store = await init_database("memory://lifecycle")

    assert get_post_store() is store
    assert await store.ping()

    await close_database()

    assert get_post_store() is None


@pytest.mark.asyncio
async def test_init_database_requires_url(monkeypatch):
    monkeypatch.setattr(connection, "DATABASE_URL", None)

    with pytest.raises(ValueError, match="DATABASE_URL"):
        await init_database()


@pytest.mark.asyncio
async def test_close_database_without_store_is_noop():
    await close_database()

    assert get_post_store() is None


@pytest.mark.asyncio
async def test_reinit_closes_previous_store():
    first = await init_database("memory://first")
    second = await init_database("memory://second")
    try:
        assert get_post_store() is second
        with pytest.raises(StoreError, match="not connected"):
            await first.ping()
    finally:
        await close_database()
