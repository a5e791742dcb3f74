"""User administration — admin-only account management.

Learn: Service layer separates business logic from HTTP routing.
Routes gate access (require_admin), the service only manipulates accounts.
Changing a role does not touch already-issued access tokens: they keep the
old role claim until they expire.
"""

import uuid

import structlog

from contenthub.db.models import ROLES, User
from contenthub.errors import BadRequestError, NotFoundError
from contenthub.services.user_directory import UserDirectory

logger = structlog.get_logger()


class UserService:
    """Business logic for account administration."""

    def __init__(self, directory: UserDirectory):
        self.directory = directory

    async def list_users(self) -> list[User]:
        return await self.directory.list()

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.directory.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_role(self, user_id: uuid.UUID, role: str | None) -> User:
        """Set an account's role. A missing role leaves the account unchanged."""
        user = await self.get_user(user_id)
        if role is None:
            return user
        if role not in ROLES:
            raise BadRequestError(f"Role must be one of: {', '.join(ROLES)}")
        user.role = role
        await self.directory.save(user)
        logger.info("user.role_updated", email=user.email, role=role)
        return user

    async def delete_user(self, user_id: uuid.UUID) -> None:
        user = await self.get_user(user_id)
        if not await self.directory.delete(user_id):
            raise NotFoundError("User not found")
        logger.info("user.deleted", email=user.email)
