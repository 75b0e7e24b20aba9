"""
pytest configuration and fixtures for the Blog Posts API test suite
Each test gets a freshly connected store, optionally seeded, and dropped afterwards.
"""

from typing import Any, Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from blog_api.app import app
from blog_api.config.settings import TEST_DATABASE_URL
from blog_api.database.connection import close_database, init_database
from blog_api.models.post import BlogPost
from factories import fake, seed_blog_post_data


@pytest_asyncio.fixture
async def post_store():
    """Store connected to TEST_DATABASE_URL; emptied and closed after the test"""
    store = await init_database(TEST_DATABASE_URL)
    yield store
    await store.drop_all()
    await close_database()


@pytest_asyncio.fixture
async def seeded_posts(post_store) -> List[BlogPost]:
    return await seed_blog_post_data(post_store)


@pytest_asyncio.fixture
async def client(post_store):
    """HTTP client talking to the app in-process"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def new_post_data() -> Dict[str, Any]:
    return {
        "title": fake.sentence(),
        "author": {
            "firstName": fake.first_name(),
            "lastName": fake.last_name()
        },
        "content": fake.text()
    }
