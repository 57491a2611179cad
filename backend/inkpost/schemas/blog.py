"""
InkPost Backend: Blog Request/Response Schemas
===============================================

What:  Pydantic models defining the blog API contract.
How:   Input models are validated by the routes (411/400 on failure);
       response models serialize with camelCase keys via CamelModel.

Response shapes:
    POST   /blog          → {"blogId": "..."}
    PUT    /blog/{id}     → {"success", "message", "blog": UpdatedBlog}
    GET    /blog/bulk     → {"blogs": [BlogItem, ...]}
    GET    /blog/{id}     → {"blog": BlogItem}
    DELETE /blog/{id}     → {"success", "message"}
    POST   /blog/upload   → UploadResponse (snake_case, as the media host names them)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from inkpost.schemas.common import CamelModel


# ══════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════


class CreateBlogInput(BaseModel):
    """
    Body of POST /api/v1/blog.

    `published` stays None when omitted so the service can tell "omitted"
    (defaults to true) apart from an explicit false. `image` (URL) and
    `image_id` (media host public id) come as a pair.
    """
    title: str = Field(max_length=500)
    content: str
    published: Optional[bool] = None
    image: Optional[str] = Field(default=None, min_length=1)
    image_id: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @model_validator(mode="after")
    def check_image_pair(self) -> "CreateBlogInput":
        if (self.image is None) != (self.image_id is None):
            raise ValueError("image and image_id must be provided together")
        return self


class UpdateBlogInput(BaseModel):
    """Body of PUT /api/v1/blog/{id}. Omitted fields keep their current value."""
    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorSummary(CamelModel):
    name: Optional[str] = None


class ImageSummary(CamelModel):
    url: str
    key: str


class BlogItem(CamelModel):
    """A post as returned by the list and detail endpoints."""
    id: uuid.UUID
    title: str
    content: str
    published: bool
    author_id: uuid.UUID
    author: AuthorSummary
    image: Optional[ImageSummary] = None
    created_at: datetime
    updated_at: datetime


class BlogResponse(CamelModel):
    blog: BlogItem


class BlogListResponse(CamelModel):
    blogs: List[BlogItem]


class CreateBlogResponse(CamelModel):
    blog_id: uuid.UUID


class UpdatedBlog(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    published_date: str = Field(description="ISO-8601 creation timestamp")
    author_name: Optional[str] = None


class UpdateBlogResponse(CamelModel):
    success: bool = True
    message: str = "Blog updated successfully"
    blog: UpdatedBlog


class DeleteBlogResponse(CamelModel):
    success: bool = True
    message: str = "Blog post deleted successfully!"


class UploadResponse(BaseModel):
    """Relayed subset of the media host's upload answer."""
    success: bool = True
    secure_url: str
    public_id: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
