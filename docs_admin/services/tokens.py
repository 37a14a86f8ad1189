"""Session token codec.

``verify_session_token`` checks the signature and expiry and is the only
path trusted for access decisions. ``peek_session_token`` decodes and checks
expiry without the signing secret; it agrees with the full path on every
valid token but accepts forged ones, so it is used for logging only.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from docs_admin.config import Settings
from docs_admin.schemas.tokens import SessionClaim, TokenError
from docs_admin.schemas.users import Account

LOGGER = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ("sub", "email", "name", "role", "iat", "exp")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mint_session_token(account: Account, settings: Settings) -> str:
    if not settings.jwt_secret:
        raise TokenError("JWT secret is not configured")
    now = _utcnow()
    expires_at = now + timedelta(days=settings.session_ttl_days)
    payload = {
        "sub": account.id,
        "email": account.email,
        "name": account.name,
        "role": account.role,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: Optional[str], settings: Settings) -> Optional[SessionClaim]:
    if not token or not settings.jwt_secret:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": list(_REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError:
        LOGGER.info("Rejected expired session token")
        return None
    except jwt.InvalidTokenError:
        LOGGER.info("Rejected invalid session token")
        return None
    return _claim_from_payload(payload)


def peek_session_token(token: Optional[str]) -> Optional[SessionClaim]:
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            options={
                "verify_signature": False,
                "verify_exp": True,
                "require": list(_REQUIRED_CLAIMS),
            },
        )
    except jwt.InvalidTokenError:
        return None
    return _claim_from_payload(payload)


def _claim_from_payload(payload: dict[str, Any]) -> Optional[SessionClaim]:
    try:
        return SessionClaim(
            id=str(payload["sub"]),
            email=str(payload["email"]),
            name=str(payload["name"]),
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
