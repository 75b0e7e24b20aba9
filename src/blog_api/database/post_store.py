"""
Blog post store contract

Every driver exposes the same narrow async interface so the service layer
never needs to know which database it is talking to.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from blog_api.models.post import BlogPost, BlogPostChanges, BlogPostCreate, UPDATABLE_FIELDS

logger = logging.getLogger(__name__)

NewPost = Union[BlogPostCreate, Mapping[str, Any]]
PostChanges = Union[BlogPostChanges, Mapping[str, Any]]


class StoreError(Exception):
    """Base class for store failures"""


class PostNotFoundError(StoreError):
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Blog post not found: {post_id}")


class PostValidationError(StoreError):
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


def _describe_validation_error(exc: ValidationError, noun: str) -> PostValidationError:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    if error.get("type") == "missing":
        return PostValidationError(f"Missing `{field}` in {noun}", field=field)
    if error.get("type") == "extra_forbidden":
        allowed = ", ".join(UPDATABLE_FIELDS)
        return PostValidationError(f"Field `{field}` cannot be updated (allowed: {allowed})", field=field)
    return PostValidationError(f"Invalid `{field}` in {noun}: {error.get('msg')}", field=field)


def coerce_new_post(data: NewPost) -> BlogPostCreate:
    """Validate an insert payload, raising PostValidationError on a bad document"""
    if isinstance(data, BlogPostCreate):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return BlogPostCreate.model_validate(data)
    except ValidationError as e:
        raise _describe_validation_error(e, "blog post document") from e


def coerce_changes(changes: PostChanges) -> Dict[str, Any]:
    """Validate an update payload and return it in stored document shape"""
    if not isinstance(changes, BlogPostChanges):
        try:
            changes = BlogPostChanges.model_validate(changes)
        except ValidationError as e:
            raise _describe_validation_error(e, "update") from e

    document = changes.to_document()
    if not document:
        raise PostValidationError("No updatable fields supplied")
    return document


class PostStore(ABC):
    """Async document collection of blog posts"""

    driver_name = "abstract"

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        ...

    @abstractmethod
    async def insert_many(self, items: Iterable[NewPost]) -> List[BlogPost]:
        """Insert every item or none of them; results keep input order"""

    async def insert_one(self, data: NewPost) -> BlogPost:
        inserted = await self.insert_many([data])
        return inserted[0]

    @abstractmethod
    async def find_all(self) -> List[BlogPost]:
        ...

    @abstractmethod
    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        ...

    @abstractmethod
    async def update_by_id(self, post_id: str, changes: PostChanges) -> BlogPost:
        ...

    @abstractmethod
    async def delete_by_id(self, post_id: str) -> None:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def drop_all(self) -> None:
        """Remove every post. Test teardown only."""
