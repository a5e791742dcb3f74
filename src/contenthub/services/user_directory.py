"""User directory — account storage behind a small interface.

Learn: SessionAuthority never talks to SQLAlchemy directly. It depends on
the UserDirectory protocol (find/create/save/delete), so tests can run the
whole auth lifecycle against an in-memory directory, and the storage could
change without touching token logic.

Uniqueness of email is enforced by the users.email unique index; a racing
duplicate insert surfaces here as ConflictError.
"""

import uuid
from typing import Any, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from contenthub.db.models import User
from contenthub.errors import ConflictError


class UserDirectory(Protocol):
    """Storage contract for accounts."""

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: uuid.UUID) -> User | None: ...

    async def create(self, **fields: Any) -> User: ...

    async def save(self, user: User) -> None: ...

    async def delete(self, user_id: uuid.UUID) -> bool: ...

    async def list(self) -> list[User]: ...


class SqlUserDirectory:
    """UserDirectory backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        # Exact match: emails are compared as stored, no case folding.
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User already exists")
        return user

    async def save(self, user: User) -> None:
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already in use")

    async def delete(self, user_id: uuid.UUID) -> bool:
        result = await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        return result.rowcount > 0

    async def list(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())
