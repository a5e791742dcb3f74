"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (60min), carries account id + role
- Refresh token: long-lived (7 days), carries only the account id

Each token type is signed with its own secret and also tagged with a
"type" claim, so one can never be replayed as the other.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Raised when token verification fails (bad signature, expired, malformed)."""


def sign_token(
    claims: dict[str, Any],
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
) -> str:
    """Sign a claim set, adding iat/exp and a unique jti.

    The jti makes two tokens issued in the same second for the same
    account distinct, which refresh-token revocation relies on.
    """
    now = datetime.now(timezone.utc)
    payload = {**claims, "jti": uuid.uuid4().hex, "iat": now, "exp": now + ttl}
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    expected_type: str | None = None,
) -> dict[str, Any]:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    if expected_type is not None and payload.get("type") != expected_type:
        raise TokenError("Invalid token type")
    return payload


class JwtCodec:
    """Token codec with a fixed signing algorithm."""

    def __init__(self, algorithm: str = "HS256"):
        self.algorithm = algorithm

    def sign(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        return sign_token(claims, secret, ttl, algorithm=self.algorithm)

    def verify(
        self, token: str, secret: str, expected_type: str | None = None
    ) -> dict[str, Any]:
        return verify_token(
            token, secret, algorithm=self.algorithm, expected_type=expected_type
        )
