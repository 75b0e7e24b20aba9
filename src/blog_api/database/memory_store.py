"""
In-process blog post store

Keeps documents in a dict keyed by id, in insertion order. Used by the test
suite and for running the API locally without PostgreSQL.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional

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
from blog_api.utils.helpers import new_document_id, utc_now

logger = logging.getLogger(__name__)


class InMemoryPostStore(PostStore):
    driver_name = "memory"

    def __init__(self, name: str = "blog-app"):
        self.name = name
        self._documents: Optional[Dict[str, Dict[str, Any]]] = None

    def _collection(self) -> Dict[str, Dict[str, Any]]:
        if self._documents is None:
            raise StoreError("Store is not connected")
        return self._documents

    @staticmethod
    def _to_post(document: Dict[str, Any]) -> BlogPost:
        return BlogPost.model_validate(copy.deepcopy(document))

    async def connect(self) -> None:
        if self._documents is None:
            self._documents = {}
        logger.info(f"In-memory store '{self.name}' ready")

    async def close(self) -> None:
        self._documents = None

    async def ping(self) -> bool:
        self._collection()
        return True

    async def insert_many(self, items: Iterable[NewPost]) -> List[BlogPost]:
        collection = self._collection()
        validated = [coerce_new_post(item) for item in items]

        inserted = []
        for post in validated:
            document = {
                "id": new_document_id(),
                "created": utc_now(),
                **post.model_dump(by_alias=True)
            }
            collection[document["id"]] = document
            inserted.append(self._to_post(document))

        logger.debug(f"Inserted {len(inserted)} blog post(s) into '{self.name}'")
        return inserted

    async def find_all(self) -> List[BlogPost]:
        return [self._to_post(document) for document in self._collection().values()]

    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        document = self._collection().get(post_id)
        if document is None:
            return None
        return self._to_post(document)

    async def update_by_id(self, post_id: str, changes: PostChanges) -> BlogPost:
        collection = self._collection()
        fields = coerce_changes(changes)
        document = collection.get(post_id)
        if document is None:
            raise PostNotFoundError(post_id)

        document.update(copy.deepcopy(fields))
        return self._to_post(document)

    async def delete_by_id(self, post_id: str) -> None:
        if self._collection().pop(post_id, None) is None:
            raise PostNotFoundError(post_id)

    async def count(self) -> int:
        return len(self._collection())

    async def drop_all(self) -> None:
        self._collection().clear()
