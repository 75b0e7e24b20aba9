"""
Posts service - business logic for blog post management
"""

import logging
from typing import Optional

from blog_api.models.post import BlogPostChanges, BlogPostCreate
from blog_api.services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class PostsService(BaseService):
    """Service for blog post operations"""

    def __init__(self):
        super().__init__("posts")

    async def list_posts(self) -> ServiceResult:
        """Get every stored post"""
        return await self.execute("read", lambda store: store.find_all())

    async def get_post(self, post_id: str) -> ServiceResult:
        """
        Get a post by its ID

        Args:
            post_id: Store-assigned post ID

        Returns:
            ServiceResult with the post, or NOT_FOUND
        """
        result = await self.execute("read", lambda store: store.find_by_id(post_id))
        if result.success and not result.data:
            return ServiceResult(
                success=False,
                error=f"Blog post not found: {post_id}",
                error_type="NOT_FOUND"
            )
        return result

    async def create_post(self, post: BlogPostCreate) -> ServiceResult:
        """
        Create a new post

        Args:
            post: Validated title, content and author

        Returns:
            ServiceResult with the stored post (id and created assigned)
        """
        logger.info(f"Creating blog post: {post.title}")
        result = await self.execute("create", lambda store: store.insert_one(post))
        if result.success:
            logger.info(f"Created blog post {result.data[0].id}")
        return result

    async def update_post(self, post_id: str, changes: BlogPostChanges) -> ServiceResult:
        """
        Replace the supplied fields of an existing post

        Args:
            post_id: Store-assigned post ID
            changes: Fields to replace; unset fields keep their stored value

        Returns:
            ServiceResult with the updated post, or NOT_FOUND
        """
        updated_fields = sorted(changes.to_document())
        logger.info(f"Updating blog post {post_id}: {', '.join(updated_fields) or 'no fields'}")
        return await self.execute("update", lambda store: store.update_by_id(post_id, changes))

    async def delete_post(self, post_id: str) -> ServiceResult:
        """
        Delete a post

        Deleting an absent post is reported as success; the caller cannot
        tell the two apart.
        """
        result = await self.execute("delete", lambda store: store.delete_by_id(post_id))
        if not result.success and result.error_type == "NOT_FOUND":
            logger.info(f"Delete requested for missing blog post {post_id}")
            return ServiceResult(success=True, data=[], count=0)
        if result.success:
            logger.info(f"Deleted blog post {post_id}")
        return result


# Global service instance
_posts_service: Optional[PostsService] = None


def get_posts_service() -> PostsService:
    """Get the global posts service instance"""
    global _posts_service
    if _posts_service is None:
        _posts_service = PostsService()
    return _posts_service
