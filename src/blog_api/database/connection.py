"""
Database connection and store management
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from blog_api.config.settings import DATABASE_URL
from blog_api.database.memory_store import InMemoryPostStore
from blog_api.database.post_store import PostStore
from blog_api.database.postgres_store import PostgresPostStore

logger = logging.getLogger(__name__)

# Global store instance
post_store: Optional[PostStore] = None


def create_post_store(database_url: str) -> PostStore:
    """Pick a store driver from the database URL scheme"""
    parsed = urlparse(database_url)
    scheme = parsed.scheme.lower()

    if scheme == "memory":
        return InMemoryPostStore(name=(parsed.netloc + parsed.path).strip("/") or "blog-app")
    if scheme in ("postgres", "postgresql"):
        return PostgresPostStore(database_url)

    raise ValueError(f"Unsupported database URL scheme: '{scheme or database_url}'")


async def init_database(database_url: Optional[str] = None) -> PostStore:
    """Connect the store for the given URL (default: DATABASE_URL)"""
    global post_store

    url = database_url or DATABASE_URL
    if not url:
        raise ValueError("DATABASE_URL environment variable is required")

    if post_store is not None:
        logger.warning(f"Replacing connected {post_store.driver_name} store")
        await close_database()

    store = create_post_store(url)
    await store.connect()
    post_store = store

    logger.info(f"Database initialized successfully ({store.driver_name})")
    return store


async def close_database():
    """Close the store connection"""
    global post_store
    if post_store:
        await post_store.close()
        post_store = None
    logger.info("Database connections closed")


def get_post_store() -> Optional[PostStore]:
    """Get the store instance"""
    return post_store
