"""
Blog post model and serialization tests
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from blog_api.models.post import AuthorName, BlogPost, BlogPostChanges, BlogPostUpdateRequest


def make_post(**overrides):
    data = {
        "id": "abc123",
        "author": {"firstName": "Grace", "lastName": "Hopper"},
        "title": "Compilers",
        "content": "A story about bugs",
        "created": datetime(2024, 3, 9, 10, 0, tzinfo=timezone.utc)
    }
    data.update(overrides)
    return BlogPost.model_validate(data)


def test_author_name_joins_first_and_last():
    assert make_post().author_name == "Grace Hopper"


def test_author_accepts_either_naming():
    assert AuthorName(first_name="A", last_name="B") == AuthorName.model_validate({"firstName": "A", "lastName": "B"})


def test_serialized_view_is_flat():
    view = make_post().serialize().model_dump()

    assert view == {
        "id": "abc123",
        "title": "Compilers",
        "author": "Grace Hopper",
        "content": "A story about bugs",
        "created": datetime(2024, 3, 9, 10, 0, tzinfo=timezone.utc)
    }


def test_changes_only_include_supplied_fields():
    changes = BlogPostUpdateRequest.model_validate({"id": "abc123", "content": "new"}).changes()

    assert changes.to_document() == {"content": "new"}


def test_changes_forbid_unknown_fields():
    with pytest.raises(ValidationError):
        BlogPostChanges.model_validate({"id": "abc123"})


def test_update_request_ignores_unknown_fields():
    request = BlogPostUpdateRequest.model_validate({"id": "x", "title": "t", "created": "yesterday"})

    assert request.changes().to_document() == {"title": "t"}
