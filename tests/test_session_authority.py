"""SessionAuthority tests — the account/session contract without HTTP.

Learn: Tests cover:
1. Register → Login round trip, duplicate email, input validation
2. Generic rejection for unknown email and wrong password
3. Refresh, logout revocation, single live refresh token
4. Authenticate: wrong secret, malformed, expired, wrong type
5. Authorize by role
6. Password hashing round trip
"""

import uuid
from dataclasses import replace
from datetime import timedelta

import pytest

from contenthub.auth.jwt import ACCESS
from contenthub.auth.session import Identity, SessionAuthority, is_valid_email
from contenthub.db.models import ROLE_ADMIN, ROLE_USER
from contenthub.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)

EMAIL = "ada@example.com"
PASSWORD = "analytical"


# ═══════════════════════════════════════════════════════════
# Register / Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_then_login(authority):
    """A freshly registered account can log in and use its access token."""
    await authority.register(EMAIL, PASSWORD, "Ada")
    tokens = await authority.login(EMAIL, PASSWORD)

    identity = authority.authenticate(tokens.access_token)
    assert identity.role == ROLE_USER
    user = await authority.current_account(identity)
    assert user.email == EMAIL


@pytest.mark.asyncio
async def test_register_stores_refresh_token(authority, directory):
    tokens = await authority.register(EMAIL, PASSWORD, "Ada")
    user = await directory.find_by_email(EMAIL)
    assert user.refresh_token == tokens.refresh_token
    assert user.role == ROLE_USER


@pytest.mark.asyncio
async def test_register_duplicate_does_not_touch_existing(authority, directory):
    """Conflict on a second registration; the first account is unchanged."""
    await authority.register(EMAIL, PASSWORD, "Ada")
    before = await directory.find_by_email(EMAIL)
    snapshot = (before.id, before.name, before.password_hash, before.refresh_token)

    with pytest.raises(ConflictError) as exc:
        await authority.register(EMAIL, "other-password", "Impostor")
    assert exc.value.detail == "User already exists"

    after = await directory.find_by_email(EMAIL)
    assert (after.id, after.name, after.password_hash, after.refresh_token) == snapshot
    assert len(directory.users) == 1


@pytest.mark.asyncio
async def test_email_is_compared_exactly(authority):
    """No case folding: a differently-cased email is a different account."""
    await authority.register(EMAIL, PASSWORD, "Ada")
    await authority.register(EMAIL.upper(), PASSWORD, "ADA")

    with pytest.raises(UnauthorizedError):
        await authority.login("Ada@example.com", PASSWORD)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email, password, name",
    [
        ("not-an-email", PASSWORD, "Ada"),
        (EMAIL, "short", "Ada"),
        (EMAIL, PASSWORD, "   "),
    ],
)
async def test_register_rejects_invalid_input(authority, directory, email, password, name):
    with pytest.raises(BadRequestError):
        await authority.register(email, password, name)
    assert directory.users == {}


@pytest.mark.asyncio
async def test_login_rejections_are_indistinguishable(authority):
    """Wrong password and unknown email produce the same error."""
    await authority.register(EMAIL, PASSWORD, "Ada")

    with pytest.raises(UnauthorizedError) as wrong_password:
        await authority.login(EMAIL, "not-the-password")
    with pytest.raises(UnauthorizedError) as unknown_email:
        await authority.login("nobody@example.com", PASSWORD)

    assert type(wrong_password.value) is type(unknown_email.value)
    assert wrong_password.value.detail == unknown_email.value.detail == "Invalid credentials"


# ═══════════════════════════════════════════════════════════
# Refresh / Logout
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_refresh_returns_new_access_token(authority):
    tokens = await authority.login(*await _registered(authority))
    access_token = await authority.refresh(tokens.refresh_token)

    identity = authority.authenticate(access_token)
    assert identity == authority.authenticate(tokens.access_token)


@pytest.mark.asyncio
async def test_refresh_does_not_rotate(authority, directory):
    tokens = await authority.login(*await _registered(authority))
    await authority.refresh(tokens.refresh_token)
    await authority.refresh(tokens.refresh_token)

    user = await directory.find_by_email(EMAIL)
    assert user.refresh_token == tokens.refresh_token


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(authority, directory):
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)

    await authority.logout(identity)

    assert (await directory.find_by_email(EMAIL)).refresh_token is None
    with pytest.raises(UnauthorizedError):
        await authority.refresh(tokens.refresh_token)


@pytest.mark.asyncio
async def test_access_token_survives_logout(authority):
    """Access tokens are stateless: they stay valid until they expire."""
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)
    await authority.logout(identity)

    assert authority.authenticate(tokens.access_token) == identity


@pytest.mark.asyncio
async def test_logout_of_deleted_account_still_confirms(authority, directory):
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)
    await directory.delete(identity.account_id)

    await authority.logout(identity)


@pytest.mark.asyncio
async def test_second_login_invalidates_first_refresh_token(authority):
    credentials = await _registered(authority)
    first = await authority.login(*credentials)
    second = await authority.login(*credentials)

    assert first.refresh_token != second.refresh_token
    with pytest.raises(UnauthorizedError):
        await authority.refresh(first.refresh_token)
    assert await authority.refresh(second.refresh_token)


@pytest.mark.asyncio
async def test_refresh_rejections(authority, directory):
    tokens = await authority.login(*await _registered(authority))

    with pytest.raises(UnauthorizedError) as missing:
        await authority.refresh(None)
    assert missing.value.detail == "Refresh token required"

    # An access token is signed with the other secret and has the wrong type.
    with pytest.raises(UnauthorizedError) as wrong_kind:
        await authority.refresh(tokens.access_token)
    assert wrong_kind.value.detail == "Invalid refresh token"

    with pytest.raises(UnauthorizedError):
        await authority.refresh("not.a.jwt")

    user = await directory.find_by_email(EMAIL)
    await directory.delete(user.id)
    with pytest.raises(UnauthorizedError):
        await authority.refresh(tokens.refresh_token)


@pytest.mark.asyncio
async def test_refresh_token_typed_access_is_rejected(authority, auth_config):
    """A token signed with the refresh secret but typed "access" is refused."""
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)
    forged = authority.codec.sign(
        {"sub": str(identity.account_id), "type": ACCESS},
        auth_config.refresh_secret,
        timedelta(minutes=5),
    )
    with pytest.raises(UnauthorizedError):
        await authority.refresh(forged)


@pytest.mark.asyncio
async def test_refresh_rejects_expired_token(directory, auth_config):
    """Expiry is checked even though the token still matches the stored one."""
    expired = SessionAuthority(
        directory, replace(auth_config, refresh_ttl=timedelta(seconds=-5))
    )
    tokens = await expired.register(EMAIL, PASSWORD, "Ada")
    assert (await directory.find_by_email(EMAIL)).refresh_token == tokens.refresh_token

    with pytest.raises(UnauthorizedError) as exc:
        await expired.refresh(tokens.refresh_token)
    assert exc.value.detail == "Invalid refresh token"


@pytest.mark.asyncio
async def test_refresh_rejects_foreign_secret(authority, directory):
    """A refresh token signed elsewhere fails even if stored on the account."""
    await _registered(authority)
    user = await directory.find_by_email(EMAIL)
    forged = authority.codec.sign(
        {"sub": str(user.id), "type": "refresh"},
        "someone-elses-refresh-secret",
        timedelta(days=7),
    )
    user.refresh_token = forged
    await directory.save(user)

    with pytest.raises(UnauthorizedError) as exc:
        await authority.refresh(forged)
    assert exc.value.detail == "Invalid refresh token"


@pytest.mark.parametrize(
    "email, valid",
    [("ada@example.com", True), ("Ada@Example.COM", True), ("ada@", False), ("ada", False)],
)
def test_email_syntax_check(email, valid):
    assert is_valid_email(email) is valid


# ═══════════════════════════════════════════════════════════
# Authenticate / Authorize
# ═══════════════════════════════════════════════════════════


def test_authenticate_requires_token(authority):
    with pytest.raises(UnauthorizedError) as exc:
        authority.authenticate(None)
    assert exc.value.detail == "No token provided"


@pytest.mark.asyncio
async def test_authenticate_rejects_other_secret(authority):
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)
    forged = authority.codec.sign(
        {"sub": str(identity.account_id), "role": ROLE_ADMIN, "type": ACCESS},
        "someone-elses-secret",
        timedelta(minutes=5),
    )
    with pytest.raises(UnauthorizedError):
        authority.authenticate(forged)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer x.y.z"])
def test_authenticate_rejects_malformed(authority, token):
    with pytest.raises(UnauthorizedError):
        authority.authenticate(token)


@pytest.mark.asyncio
async def test_authenticate_rejects_expired(directory, auth_config):
    expired = SessionAuthority(
        directory, replace(auth_config, access_ttl=timedelta(seconds=-5))
    )
    tokens = await expired.register(EMAIL, PASSWORD, "Ada")
    with pytest.raises(UnauthorizedError):
        expired.authenticate(tokens.access_token)


@pytest.mark.asyncio
async def test_authenticate_rejects_refresh_token(authority):
    tokens = await authority.login(*await _registered(authority))
    with pytest.raises(UnauthorizedError):
        authority.authenticate(tokens.refresh_token)


def test_authenticate_rejects_unknown_role(authority, auth_config):
    token = authority.codec.sign(
        {"sub": str(uuid.uuid4()), "role": "superuser", "type": ACCESS},
        auth_config.access_secret,
        timedelta(minutes=5),
    )
    with pytest.raises(UnauthorizedError):
        authority.authenticate(token)


def test_authorize_by_role():
    admin = Identity(account_id=uuid.uuid4(), role=ROLE_ADMIN)
    user = Identity(account_id=uuid.uuid4(), role=ROLE_USER)

    SessionAuthority.authorize(admin, ROLE_ADMIN)
    with pytest.raises(ForbiddenError) as exc:
        SessionAuthority.authorize(user, ROLE_ADMIN)
    assert exc.value.detail == "Access denied"


@pytest.mark.asyncio
async def test_stale_role_claim_persists(authority, directory):
    """Promoting an account does not change already-issued access tokens."""
    tokens = await authority.login(*await _registered(authority))
    user = await directory.find_by_email(EMAIL)
    user.role = ROLE_ADMIN
    await directory.save(user)

    assert authority.authenticate(tokens.access_token).role == ROLE_USER
    refreshed = await authority.refresh(tokens.refresh_token)
    assert authority.authenticate(refreshed).role == ROLE_ADMIN


# ═══════════════════════════════════════════════════════════
# Passwords / Profile
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_password_hash_round_trip(authority, directory):
    await authority.register(EMAIL, PASSWORD, "Ada")
    user = await directory.find_by_email(EMAIL)

    assert user.password_hash != PASSWORD
    assert user.password_hash.startswith("$2b$")
    assert await authority.verify_password(PASSWORD, user.password_hash)
    assert not await authority.verify_password("wrong", user.password_hash)


@pytest.mark.asyncio
async def test_update_profile_rehashes_password(authority, directory):
    tokens = await authority.login(*await _registered(authority))
    identity = authority.authenticate(tokens.access_token)

    await authority.update_profile(identity, name="Countess", password="new-secret")

    user = await directory.find_by_email(EMAIL)
    assert user.name == "Countess"
    assert user.password_hash != "new-secret"
    with pytest.raises(UnauthorizedError):
        await authority.login(EMAIL, PASSWORD)
    assert await authority.login(EMAIL, "new-secret")


@pytest.mark.asyncio
async def test_update_profile_email_conflict(authority):
    tokens = await authority.login(*await _registered(authority))
    await authority.register("taken@example.com", PASSWORD, "Other")
    identity = authority.authenticate(tokens.access_token)

    with pytest.raises(ConflictError):
        await authority.update_profile(identity, email="taken@example.com")


@pytest.mark.asyncio
async def test_current_account_missing(authority):
    identity = Identity(account_id=uuid.uuid4(), role=ROLE_USER)
    with pytest.raises(NotFoundError):
        await authority.current_account(identity)


async def _registered(authority) -> tuple[str, str]:
    await authority.register(EMAIL, PASSWORD, "Ada")
    return EMAIL, PASSWORD
