"""
In-memory store contract tests
"""

import pytest
import pytest_asyncio

from blog_api.database.memory_store import InMemoryPostStore
from blog_api.database.post_store import PostNotFoundError, PostValidationError, StoreError
from blog_api.models.post import BlogPostChanges, BlogPostCreate
from factories import generate_post_data


@pytest_asyncio.fixture
async def store():
    store = InMemoryPostStore(name="unit")
    await store.connect()
    yield store
    await store.close()


class TestInsert:

    @pytest.mark.asyncio
    async def test_insert_many_keeps_input_order(self, store):
        items = [generate_post_data(title=f"post {i}") for i in range(5)]

        inserted = await store.insert_many(items)

        assert [post.title for post in inserted] == [f"post {i}" for i in range(5)]
        assert len({post.id for post in inserted}) == 5
        assert [post.id for post in await store.find_all()] == [post.id for post in inserted]

    @pytest.mark.asyncio
    async def test_insert_assigns_created_timestamp(self, store):
        post = await store.insert_one(generate_post_data())

        assert post.created.tzinfo is not None

    @pytest.mark.asyncio
    async def test_insert_accepts_models(self, store):
        model = BlogPostCreate.model_validate(generate_post_data(title="from a model"))

        post = await store.insert_one(model)

        assert post.title == "from a model"
        assert post.author == model.author

    @pytest.mark.asyncio
    async def test_invalid_item_rejects_whole_batch(self, store):
        bad = generate_post_data()
        del bad["author"]["lastName"]

        with pytest.raises(PostValidationError) as exc_info:
            await store.insert_many([generate_post_data(), bad])

        assert exc_info.value.field == "author.lastName"
        assert await store.count() == 0


class TestReadUpdateDelete:

    @pytest.mark.asyncio
    async def test_find_by_id_missing_returns_none(self, store):
        assert await store.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_update_replaces_only_given_fields(self, store):
        post = await store.insert_one(generate_post_data(title="old", content="body"))

        updated = await store.update_by_id(post.id, {"title": "new"})

        assert updated.title == "new"
        assert updated.content == "body"
        assert updated.author == post.author
        assert updated.created == post.created

    @pytest.mark.asyncio
    async def test_update_replaces_author_as_a_whole(self, store):
        post = await store.insert_one(generate_post_data())

        updated = await store.update_by_id(
            post.id,
            BlogPostChanges.model_validate({"author": {"firstName": "Ada", "lastName": "Lovelace"}})
        )

        assert updated.author_name == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, store):
        post = await store.insert_one(generate_post_data())

        with pytest.raises(PostValidationError, match="cannot be updated"):
            await store.update_by_id(post.id, {"created": "2020-01-01T00:00:00Z"})

    @pytest.mark.asyncio
    async def test_update_with_no_fields_is_rejected(self, store):
        post = await store.insert_one(generate_post_data())

        with pytest.raises(PostValidationError):
            await store.update_by_id(post.id, {})

    @pytest.mark.asyncio
    async def test_update_missing_post(self, store):
        with pytest.raises(PostNotFoundError) as exc_info:
            await store.update_by_id("ghost", {"title": "x"})

        assert exc_info.value.post_id == "ghost"

    @pytest.mark.asyncio
    async def test_delete(self, store):
        post = await store.insert_one(generate_post_data())

        await store.delete_by_id(post.id)

        assert await store.find_by_id(post.id) is None
        with pytest.raises(PostNotFoundError):
            await store.delete_by_id(post.id)

    @pytest.mark.asyncio
    async def test_returned_posts_are_copies(self, store):
        post = await store.insert_one(generate_post_data(title="original"))

        post.title = "mutated locally"

        assert (await store.find_by_id(post.id)).title == "original"

    @pytest.mark.asyncio
    async def test_count_and_drop_all(self, store):
        await store.insert_many([generate_post_data() for _ in range(3)])
        assert await store.count() == 3

        await store.drop_all()

        assert await store.count() == 0


@pytest.mark.asyncio
async def test_operations_require_connect():
    store = InMemoryPostStore()

    with pytest.raises(StoreError, match="not connected"):
        await store.find_all()
    with pytest.raises(StoreError):
        await store.ping()
