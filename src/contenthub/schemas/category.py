"""Pydantic schemas for categories.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
The slug is read-only: it is derived from the name server-side.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., min_length=1, max_length=32)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    description: Optional[str] = None


class CategoryRead(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    color: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
