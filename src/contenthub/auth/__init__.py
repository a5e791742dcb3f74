"""Authentication and authorization.

Learn: Accounts log in with email/password and receive two JWTs:
1. Access token → short-lived, stateless, carries the account id and role
2. Refresh token → long-lived, also stored on the account so it can be revoked

SessionAuthority owns the whole lifecycle; FastAPI dependencies in
dependencies.py turn it into request gates (authenticate, require_admin).
"""

from contenthub.auth.session import AuthConfig, Identity, SessionAuthority, TokenPair

__all__ = ["AuthConfig", "Identity", "SessionAuthority", "TokenPair"]
