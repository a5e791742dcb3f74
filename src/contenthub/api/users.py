"""User API — admin account management plus own-profile updates.

Learn: Admin routes declare require_admin; the profile route only needs a
valid access token. /users/profile is registered before /users/{user_id}
so the literal path wins.
"""

import uuid

from fastapi import APIRouter, Depends

from contenthub.auth.dependencies import (
    get_current_identity,
    get_session_authority,
    get_user_directory,
    require_admin,
)
from contenthub.auth.session import Identity, SessionAuthority
from contenthub.schemas.auth import MessageResponse, ProfileUpdate, UserRead
from contenthub.schemas.user import UserRoleUpdate, UserUpdated
from contenthub.services.user_directory import UserDirectory
from contenthub.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(directory: UserDirectory = Depends(get_user_directory)) -> UserService:
    return UserService(directory)


# ─── Own profile ────────────────────────────────────────

@router.put("/profile", response_model=UserUpdated)
async def update_profile(
    body: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    authority: SessionAuthority = Depends(get_session_authority),
):
    user = await authority.update_profile(
        identity, name=body.name, email=body.email, password=body.password
    )
    return UserUpdated(message="Profile updated", user=UserRead.model_validate(user))


# ─── Admin ──────────────────────────────────────────────

@router.get("", response_model=list[UserRead], dependencies=[Depends(require_admin)])
async def list_users(svc: UserService = Depends(_svc)):
    return await svc.list_users()


@router.get("/{user_id}", response_model=UserRead, dependencies=[Depends(require_admin)])
async def get_user(user_id: uuid.UUID, svc: UserService = Depends(_svc)):
    return await svc.get_user(user_id)


@router.put("/{user_id}", response_model=UserUpdated, dependencies=[Depends(require_admin)])
async def update_user(
    user_id: uuid.UUID,
    body: UserRoleUpdate,
    svc: UserService = Depends(_svc),
):
    """Change an account's role."""
    user = await svc.update_role(user_id, body.role)
    return UserUpdated(message="User updated", user=UserRead.model_validate(user))


@router.delete(
    "/{user_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)]
)
async def delete_user(user_id: uuid.UUID, svc: UserService = Depends(_svc)):
    await svc.delete_user(user_id)
    return MessageResponse(message="User deleted")
