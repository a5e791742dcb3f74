"""Pydantic schemas for resources."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, HttpUrl

ResourceCategory = Literal["sermon", "worship", "book", "movie"]


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image_url: HttpUrl
    external_link: HttpUrl
    category: ResourceCategory
    featured: bool = False


class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    image_url: Optional[HttpUrl] = None
    external_link: Optional[HttpUrl] = None
    category: Optional[ResourceCategory] = None
    featured: Optional[bool] = None


class AuthorRead(BaseModel):
    """Public view of the account that created a resource."""

    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class ResourceRead(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    image_url: str
    external_link: str
    category: str
    featured: bool
    author_id: Optional[uuid.UUID] = None
    author: Optional[AuthorRead] = None
    view_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ResourcePageRead(BaseModel):
    """Paginated resource listing."""

    items: list[ResourceRead]
    total: int
    page: int
    limit: int
    pages: int
    has_next: bool
    has_prev: bool

    model_config = {"from_attributes": True}
