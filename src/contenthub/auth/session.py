"""Session authority — issues, verifies, and revokes credentials.

Learn: Two kinds of bearer tokens, two different trust models:

- Access tokens are self-contained. authenticate() only checks signature,
  expiry, and type; it never reads the database. That keeps every request
  cheap, at the cost that a role change or deletion only takes effect once
  already-issued access tokens expire (1 hour).
- Refresh tokens must additionally equal the one value stored on the
  account. login/register overwrite it, logout clears it, so a refresh
  token is revocable even though its signature stays valid for 7 days.

Failures are raised as ServiceError subclasses (Conflict, Unauthorized,
Forbidden). Directory or hasher faults are not caught here; they reach
the caller unchanged.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import structlog
from email_validator import EmailNotValidError, validate_email

from contenthub.auth.jwt import ACCESS, REFRESH, JwtCodec, TokenError
from contenthub.auth.password import BcryptHasher
from contenthub.config import Settings
from contenthub.db.models import ROLE_ADMIN, ROLE_USER, ROLES, User
from contenthub.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from contenthub.services.user_directory import UserDirectory

logger = structlog.get_logger()

PASSWORD_MIN_LENGTH = 6

# One message for unknown email and wrong password alike.
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthConfig:
    """Signing secrets and lifetimes. Built once at startup, never mutated."""

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(hours=1)
    refresh_ttl: timedelta = timedelta(days=7)
    bcrypt_rounds: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
            bcrypt_rounds=settings.bcrypt_rounds,
        )


@dataclass(frozen=True)
class Identity:
    """Who is making the request, as claimed by a verified access token."""

    account_id: uuid.UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class SessionAuthority:
    """Registration, login, refresh, logout, and request gating."""

    def __init__(
        self,
        directory: UserDirectory,
        config: AuthConfig,
        hasher: Optional[BcryptHasher] = None,
        codec: Optional[JwtCodec] = None,
    ):
        self.directory = directory
        self.config = config
        self.hasher = hasher or BcryptHasher(rounds=config.bcrypt_rounds)
        self.codec = codec or JwtCodec(algorithm=config.algorithm)

    # ─── Password credential ────────────────────────────

    async def hash_password(self, password: str) -> str:
        # bcrypt is CPU-bound; keep it off the event loop.
        return await asyncio.to_thread(self.hasher.hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.hasher.verify, password, password_hash)

    # ─── Token issuance ─────────────────────────────────

    def issue_access_token(self, user: User) -> str:
        return self.codec.sign(
            {"sub": str(user.id), "role": user.role, "type": ACCESS},
            self.config.access_secret,
            self.config.access_ttl,
        )

    def issue_refresh_token(self, user: User) -> str:
        return self.codec.sign(
            {"sub": str(user.id), "type": REFRESH},
            self.config.refresh_secret,
            self.config.refresh_ttl,
        )

    async def _start_session(self, user: User) -> TokenPair:
        """Issue a token pair and make the new refresh token the only live one."""
        access_token = self.issue_access_token(user)
        refresh_token = self.issue_refresh_token(user)
        user.refresh_token = refresh_token
        await self.directory.save(user)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    # ─── Operations ─────────────────────────────────────

    async def register(self, email: str, password: str, name: str) -> TokenPair:
        """Create a `user` account and log it in."""
        _validate_email(email)
        _validate_password(password)
        if not name or not name.strip():
            raise BadRequestError("Name is required")

        if await self.directory.find_by_email(email) is not None:
            raise ConflictError("User already exists")

        user = await self.directory.create(
            email=email,
            name=name,
            password_hash=await self.hash_password(password),
            role=ROLE_USER,
        )
        tokens = await self._start_session(user)
        logger.info("auth.registered", email=email, user_id=str(user.id))
        return tokens

    async def login(self, email: str, password: str) -> TokenPair:
        """Exchange email/password for a new token pair.

        Any previously issued refresh token for the account stops working.
        """
        user = await self.directory.find_by_email(email)
        if user is None or not await self.verify_password(password, user.password_hash):
            logger.info("auth.login_failed", email=email)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        tokens = await self._start_session(user)
        logger.info("auth.logged_in", email=email, user_id=str(user.id))
        return tokens

    async def refresh(self, refresh_token: Optional[str]) -> str:
        """Exchange the live refresh token for a new access token.

        The refresh token itself is not rotated.
        """
        if not refresh_token:
            raise UnauthorizedError("Refresh token required")

        try:
            claims = self.codec.verify(
                refresh_token, self.config.refresh_secret, expected_type=REFRESH
            )
            user_id = uuid.UUID(claims["sub"])
        except (TokenError, ValueError):
            raise UnauthorizedError("Invalid refresh token")

        user = await self.directory.find_by_id(user_id)
        if user is None or user.refresh_token != refresh_token:
            raise UnauthorizedError("Invalid refresh token")

        return self.issue_access_token(user)

    async def logout(self, identity: Identity) -> None:
        """Revoke the account's refresh token."""
        user = await self.directory.find_by_id(identity.account_id)
        if user is not None:
            user.refresh_token = None
            await self.directory.save(user)
        logger.info("auth.logged_out", user_id=str(identity.account_id))

    def authenticate(self, access_token: Optional[str]) -> Identity:
        """Verify an access token. Pure computation, no directory lookup."""
        if not access_token:
            raise UnauthorizedError("No token provided")
        try:
            claims = self.codec.verify(
                access_token, self.config.access_secret, expected_type=ACCESS
            )
            account_id = uuid.UUID(claims["sub"])
            role = claims["role"]
        except (TokenError, KeyError, ValueError):
            raise UnauthorizedError("Invalid token")
        if role not in ROLES:
            raise UnauthorizedError("Invalid token")
        return Identity(account_id=account_id, role=role)

    @staticmethod
    def authorize(identity: Identity, required_role: str) -> None:
        if identity.role != required_role:
            raise ForbiddenError("Access denied")

    # ─── Own profile ────────────────────────────────────

    async def current_account(self, identity: Identity) -> User:
        user = await self.directory.find_by_id(identity.account_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self,
        identity: Identity,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """Change own name, email, or password. A new password is re-hashed."""
        user = await self.current_account(identity)

        if name is not None:
            if not name.strip():
                raise BadRequestError("Name is required")
            user.name = name
        if email is not None and email != user.email:
            _validate_email(email)
            if await self.directory.find_by_email(email) is not None:
                raise ConflictError("Email already in use")
            user.email = email
        if password is not None:
            _validate_password(password)
            user.password_hash = await self.hash_password(password)

        await self.directory.save(user)
        logger.info("auth.profile_updated", user_id=str(user.id))
        return user


def is_valid_email(email: str) -> bool:
    """Syntax check only. The address is never normalized or rewritten."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _validate_email(email: str) -> None:
    if not is_valid_email(email):
        raise BadRequestError("Invalid email")


def _validate_password(password: str) -> None:
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise BadRequestError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        )
