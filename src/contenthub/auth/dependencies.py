"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to wire up the
SessionAuthority and to gate requests:

1. get_current_identity → Bearer access token → Identity (401 otherwise)
2. require_admin → Identity with role "admin" (403 otherwise)

The AuthConfig lives on app.state, built once by create_app(), so the
authority never reads the global settings object.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from contenthub.auth.session import AuthConfig, Identity, SessionAuthority
from contenthub.db.engine import get_db
from contenthub.db.models import ROLE_ADMIN
from contenthub.services.user_directory import SqlUserDirectory, UserDirectory


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return SqlUserDirectory(db)


def get_session_authority(
    directory: UserDirectory = Depends(get_user_directory),
    config: AuthConfig = Depends(get_auth_config),
) -> SessionAuthority:
    return SessionAuthority(directory, config)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_identity(
    authorization: Optional[str] = Header(None),
    authority: SessionAuthority = Depends(get_session_authority),
) -> Identity:
    """Extract the caller's identity from the Authorization header.

    Learn: This is the "hard" auth dependency — 401 when the header is
    missing or the token is malformed, expired, or wrongly signed.
    """
    return authority.authenticate(_bearer_token(authorization))


async def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Require an authenticated admin. 403 for any other role."""
    SessionAuthority.authorize(identity, ROLE_ADMIN)
    return identity
