"""
Lightweight test data factory
Generates realistic blog post documents with Faker
"""

from typing import Any, Dict, List

from faker import Faker

from blog_api.database.post_store import PostStore
from blog_api.models.post import BlogPost

fake = Faker()

SEED_POST_COUNT = 10


def generate_post_data(**overrides) -> Dict[str, Any]:
    """Blog post document in stored shape"""
    data = {
        "author": {
            "firstName": fake.first_name(),
            "lastName": fake.last_name()
        },
        "title": fake.sentence(),
        "content": fake.paragraph()
    }
    data.update(overrides)
    return data


async def seed_blog_post_data(store: PostStore, count: int = SEED_POST_COUNT) -> List[BlogPost]:
    return await store.insert_many([generate_post_data() for _ in range(count)])
