"""
Blog posts API routes
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends, Response

from models.post import PostCreateRequest, PostUpdateRequest, PostResponse, PostData
from services.base_service import BaseService, ServiceResult
from services.posts_service import get_posts_service

router = APIRouter()
logger = logging.getLogger(__name__)


def raise_for_result(result: ServiceResult, not_found_detail: str = "Post not found"):
    """Translate a failed ServiceResult into the matching HTTP error"""
    if result.success:
        return
    if result.error_type == "RESOURCE_NOT_FOUND":
        raise HTTPException(status_code=404, detail=not_found_detail)
    elif result.error_type == "INVALID_QUERY":
        raise HTTPException(status_code=400, detail=result.error)
    else:
        raise HTTPException(status_code=500, detail=result.error)


def same_post_id(body_id: str, path_id: str) -> bool:
    """Compare ids by UUID value when both parse, otherwise by exact text"""
    body_uuid = BaseService.parse_id(body_id)
    path_uuid = BaseService.parse_id(path_id)
    if body_uuid is None or path_uuid is None:
        return body_id == path_id
    return body_uuid == path_uuid


@router.get("", response_model=List[PostResponse])
async def list_posts(posts_service=Depends(get_posts_service)):
    """List every blog post"""
    try:
        result = await posts_service.list_posts()
        raise_for_result(result)

        return [PostData(**post).serialize() for post in result.data]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list posts: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, posts_service=Depends(get_posts_service)):
    """Get blog post by ID"""
    try:
        result = await posts_service.get_post(post_id)
        raise_for_result(result)

        if not result.data:
            raise HTTPException(status_code=404, detail="Post not found")

        return PostData(**result.data[0]).serialize()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(request: PostCreateRequest, posts_service=Depends(get_posts_service)):
    """Create a new blog post"""
    try:
        result = await posts_service.create_post(request.model_dump())
        raise_for_result(result)

        return PostData(**result.data[0]).serialize()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create post: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.put("/{post_id}", status_code=204)
async def update_post(
    post_id: str,
    request: PostUpdateRequest,
    posts_service=Depends(get_posts_service)
):
    """Partially update a blog post (title, content)"""
    if request.id is not None and not same_post_id(request.id, post_id):
        message = f"Request path id ({post_id}) and request body id ({request.id}) must match"
        logger.warning(message)
        raise HTTPException(status_code=400, detail=message)

    update_data = request.updatable_fields()
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    try:
        result = await posts_service.update_post(post_id, update_data)
        raise_for_result(result)

        return Response(status_code=204)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.delete("/{post_id}", status_code=204)
async def delete_post(post_id: str, posts_service=Depends(get_posts_service)):
    """Delete a blog post; deleting an unknown id is not an error"""
    try:
        result = await posts_service.delete_post(post_id)
        raise_for_result(result)

        if result.count == 0:
            logger.warning(f"Delete requested for unknown post {post_id}")

        return Response(status_code=204)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")
