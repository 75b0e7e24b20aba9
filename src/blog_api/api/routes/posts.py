"""
Blog post API routes
All data access goes through the posts service.
"""

import logging
from typing import List, NoReturn
from fastapi import APIRouter, HTTPException, Response, status

from blog_api.models.post import BlogPostCreate, BlogPostResponse, BlogPostUpdateRequest
from blog_api.services.base_service import ServiceResult
from blog_api.services.posts_service import get_posts_service
from blog_api.utils.error_handling import APIError

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_service_error(result: ServiceResult) -> NoReturn:
    if result.error_type == "NOT_FOUND":
        raise HTTPException(status_code=404, detail="Blog post not found")
    elif result.error_type == "VALIDATION_ERROR":
        raise APIError(status_code=400, detail=result.error, code="VALIDATION_ERROR")
    else:
        logger.error(f"Posts service failure ({result.error_type}): {result.error}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=List[BlogPostResponse])
async def list_posts():
    """Get all blog posts"""
    result = await get_posts_service().list_posts()
    if not result.success:
        _raise_service_error(result)

    return [post.serialize() for post in result.data]


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(post_id: str):
    """Get a single blog post"""
    result = await get_posts_service().get_post(post_id)
    if not result.success:
        _raise_service_error(result)

    return result.data[0].serialize()


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(request: BlogPostCreate):
    """Create a new blog post"""
    result = await get_posts_service().create_post(request)
    if not result.success:
        _raise_service_error(result)

    return result.data[0].serialize()


@router.put("/{post_id}", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def update_post(post_id: str, request: BlogPostUpdateRequest):
    """
    Update the fields supplied in the body

    The body ``id`` must match the path id. Responds 201 rather than 200;
    existing clients depend on it.
    """
    if request.id != post_id:
        message = (
            f"Request path id ({post_id}) and request body id "
            f"({request.id}) must match"
        )
        logger.warning(message)
        raise HTTPException(status_code=400, detail=message)

    changes = request.changes()
    if not changes.to_document():
        raise APIError(status_code=400, detail="No fields provided for update", code="VALIDATION_ERROR")

    result = await get_posts_service().update_post(post_id, changes)
    if not result.success:
        _raise_service_error(result)

    return result.data[0].serialize()


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_post(post_id: str):
    """Delete a blog post; deleting a missing post also answers 204"""
    result = await get_posts_service().delete_post(post_id)
    if not result.success:
        _raise_service_error(result)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
