"""Pydantic schemas for admin user management."""

from typing import Literal, Optional

from pydantic import BaseModel

from contenthub.schemas.auth import UserRead


class UserRoleUpdate(BaseModel):
    role: Optional[Literal["user", "admin"]] = None


class UserUpdated(BaseModel):
    message: str
    user: UserRead
