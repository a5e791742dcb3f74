"""Auth API — registration, login, token refresh, logout, profile.

Learn: Routes for the account session lifecycle:
- POST /auth/register → create a `user` account, returns a token pair
- POST /auth/login → email/password → token pair (replaces any earlier session)
- POST /auth/refresh → live refresh token → new access token
- POST /auth/logout → revoke the refresh token (needs an access token)
- GET /auth/me → current account profile

Routes only translate HTTP ↔ SessionAuthority; every rule lives there.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from contenthub.auth.dependencies import get_current_identity, get_session_authority
from contenthub.auth.session import Identity, SessionAuthority
from contenthub.schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterRequest,
    authority: SessionAuthority = Depends(get_session_authority),
):
    """Create a new account and log it in."""
    tokens = await authority.register(body.email, body.password, body.name)
    return TokenResponse(
        access_token=tokens.access_token, refresh_token=tokens.refresh_token
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    authority: SessionAuthority = Depends(get_session_authority),
):
    """Login with email and password → JWT tokens."""
    tokens = await authority.login(body.email, body.password)
    return TokenResponse(
        access_token=tokens.access_token, refresh_token=tokens.refresh_token
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    body: Optional[RefreshRequest] = None,
    authority: SessionAuthority = Depends(get_session_authority),
):
    """Exchange the live refresh token for a new access token."""
    access_token = await authority.refresh(body.refresh_token if body else None)
    return AccessTokenResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(get_current_identity),
    authority: SessionAuthority = Depends(get_session_authority),
):
    """Revoke the caller's refresh token."""
    await authority.logout(identity)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    authority: SessionAuthority = Depends(get_session_authority),
):
    """Get the current account's profile."""
    return await authority.current_account(identity)
