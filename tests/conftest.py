"""Test fixtures — in-memory account storage and an app wired to it.

Learn: Testing pattern for the auth layer without Postgres:

1. InMemoryUserDirectory implements the UserDirectory protocol with a dict.
2. The app is built by create_app() with test Settings (cheap bcrypt
   rounds, fixed secrets) and get_user_directory overridden, so every
   route that needs accounts sees the in-memory store.
3. Content routes (categories/resources) are tested by overriding their
   `_svc` dependency with fakes — see test_categories_api.py and
   test_resources_api.py.

Redis is never initialized here (httpx's ASGITransport does not run the
lifespan), so rate limiting is skipped.
"""

import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from contenthub.auth.dependencies import get_user_directory
from contenthub.auth.session import AuthConfig, SessionAuthority
from contenthub.config import Settings
from contenthub.db.models import ROLE_ADMIN, User
from contenthub.errors import ConflictError
from contenthub.main import create_app

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


class InMemoryUserDirectory:
    """UserDirectory backed by a dict. Mirrors the unique-email rule."""

    def __init__(self):
        self.users: dict[uuid.UUID, User] = {}

    async def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.users.get(user_id)

    async def create(self, **fields) -> User:
        if await self.find_by_email(fields["email"]) is not None:
            raise ConflictError("User already exists")
        now = datetime.now(timezone.utc)
        user = User(id=uuid.uuid4(), created_at=now, updated_at=now, **fields)
        self.users[user.id] = user
        return user

    async def save(self, user: User) -> None:
        user.updated_at = datetime.now(timezone.utc)
        self.users[user.id] = user

    async def delete(self, user_id: uuid.UUID) -> bool:
        return self.users.pop(user_id, None) is not None

    async def list(self) -> list[User]:
        return sorted(self.users.values(), key=lambda u: u.created_at)


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        jwt_secret=ACCESS_SECRET,
        jwt_refresh_secret=REFRESH_SECRET,
        bcrypt_rounds=4,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture()
def auth_config(test_settings) -> AuthConfig:
    return AuthConfig.from_settings(test_settings)


@pytest.fixture()
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture()
def authority(directory, auth_config) -> SessionAuthority:
    return SessionAuthority(directory, auth_config)


@pytest.fixture()
def app(test_settings, directory):
    application = create_app(test_settings)
    application.dependency_overrides[get_user_directory] = lambda: directory
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ─── Accounts with tokens ───────────────────────────────


@pytest_asyncio.fixture()
async def user_headers(authority) -> dict[str, str]:
    """Authorization header for a freshly registered `user` account."""
    tokens = await authority.register("member@example.com", "member-pass", "Member")
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest_asyncio.fixture()
async def admin_headers(authority, directory) -> dict[str, str]:
    """Authorization header for an `admin` account.

    Registration always creates `user` accounts, so the role is promoted in
    the directory before logging in again to get an admin access token.
    """
    await authority.register("admin@example.com", "admin-pass", "Admin")
    admin = await directory.find_by_email("admin@example.com")
    admin.role = ROLE_ADMIN
    await directory.save(admin)
    tokens = await authority.login("admin@example.com", "admin-pass")
    return {"Authorization": f"Bearer {tokens.access_token}"}
