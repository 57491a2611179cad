"""
InkPost Backend: Blog Route Handlers
=====================================

What:  Post CRUD and image upload under /api/v1/blog.
How:   The whole router depends on require_user, so every handler runs with
       an authenticated user id. Handlers validate input, call BlogService
       or MediaService, and return the response model.

Route Inventory:
    POST   /api/v1/blog            create (411 on bad body)
    GET    /api/v1/blog/bulk       page of 10 posts (404 on empty page)
    POST   /api/v1/blog/upload     multipart `image` → media host
    GET    /api/v1/blog/{id}       single post
    PUT    /api/v1/blog/{id}       partial update by the author (400 on bad body)
    DELETE /api/v1/blog/{id}       delete by the author

Static paths (bulk, upload) are registered before /{post_id} so they are
never captured as ids.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from inkpost.database import get_db_session
from inkpost.exceptions import ValidationError
from inkpost.middleware.auth import require_user
from inkpost.routes.validation import parse_body
from inkpost.schemas.blog import (
    BlogListResponse,
    BlogResponse,
    CreateBlogInput,
    CreateBlogResponse,
    DeleteBlogResponse,
    UpdateBlogInput,
    UpdateBlogResponse,
    UploadResponse,
)
from inkpost.schemas.common import ErrorResponse
from inkpost.services.blog_service import blog_service
from inkpost.services.media_service import media_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/blog",
    tags=["Blog"],
    dependencies=[Depends(require_user)],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.post(
    "",
    response_model=CreateBlogResponse,
    responses={411: {"description": "Malformed body", "model": ErrorResponse}},
    summary="Create a blog post",
)
async def create_blog(
    request: Request,
    user_id: UUID = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> CreateBlogResponse:
    data = await parse_body(request, CreateBlogInput, status_code=411)
    post_id = await blog_service.create_post(db, author_id=user_id, data=data)
    return CreateBlogResponse(blog_id=post_id)


@router.get(
    "/bulk",
    response_model=BlogListResponse,
    responses={
        404: {"description": "Page is empty", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List blog posts, 10 per page",
)
async def list_blogs(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    db: AsyncSession = Depends(get_db_session),
) -> BlogListResponse:
    return await blog_service.list_posts(db, page=page)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"description": "Missing or invalid image", "model": ErrorResponse},
        500: {"description": "Media host failure", "model": ErrorResponse},
    },
    summary="Upload an image to the media host",
)
async def upload_image(request: Request) -> UploadResponse:
    """
    Expects multipart/form-data with a file field named `image`.

    A missing field and a plain text value are rejected the same way.
    """
    form = await request.form()
    image = form.get("image")
    if not isinstance(image, UploadFile):
        raise ValidationError(message="No image file provided", field="image")

    try:
        media_service.check_size(image.size)
        content = await image.read()
        return await media_service.upload_image(
            filename=image.filename or "upload",
            content=content,
            content_type=image.content_type,
        )
    finally:
        await image.close()


@router.get(
    "/{post_id}",
    response_model=BlogResponse,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a blog post by id",
)
async def get_blog(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.get_post(db, post_id)


@router.put(
    "/{post_id}",
    response_model=UpdateBlogResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        403: {"description": "Caller is not the author", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update title and/or content of a blog post",
)
async def update_blog(
    post_id: UUID,
    request: Request,
    user_id: UUID = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> UpdateBlogResponse:
    """Order: 404 for a missing post, then 400 for a bad body, then 403."""
    post = await blog_service.load_post(db, post_id)
    data = await parse_body(request, UpdateBlogInput, status_code=400, message="Invalid input")
    return await blog_service.update_post(db, post=post, user_id=user_id, data=data)


@router.delete(
    "/{post_id}",
    response_model=DeleteBlogResponse,
    responses={
        403: {"description": "Caller is not the author", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a blog post",
)
async def delete_blog(
    post_id: UUID,
    user_id: UUID = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteBlogResponse:
    return await blog_service.delete_post(db, post_id=post_id, user_id=user_id)
