"""Pydantic schemas for registration, login, and token exchange.

Learn: Emails are validated with email-validator but kept exactly as the
client sent them (EmailStr would normalize the domain part), because
accounts are matched on the stored string.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from contenthub.auth.session import is_valid_email


def _check_email(value: str) -> str:
    if not is_valid_email(value):
        raise ValueError("Invalid email")
    return value


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = None
    password: str | None = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        return None if value is None else _check_email(value)


class UserRead(BaseModel):
    """Public view of an account — never includes password or refresh token."""

    id: uuid.UUID
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
