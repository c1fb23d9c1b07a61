############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# tokens.py: Signed bearer token issue and verification (JWT)
#
############################################################

"""Role-carrying bearer tokens.

Tokens are HS256 JWTs signed with ``settings.secret_key``. The key is read
through the cached settings object, so it is fixed for the life of the process;
changing it invalidates every outstanding token (there is no revocation list).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from backend.app.core.access import ADMIN_SUBJECT, Principal, Role
from backend.app.core.errors import TokenExpired, TokenInvalid
from backend.app.settings import get_settings

_REQUIRED_CLAIMS = ["sub", "email", "role", "iat", "exp"]


@dataclass(frozen=True)
class TokenClaims:
    """Verified token contents."""

    subject: str
    email: str
    role: Role
    display_name: Optional[str]
    issued_at: datetime
    expires_at: datetime


def issue_token(
    principal: Principal,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Sign a token binding the principal's id, email, role and display name."""
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    expires = issued + (expires_delta or timedelta(hours=settings.jwt_expiration_hours))

    payload = {
        "sub": principal.id,
        "email": principal.email,
        "role": principal.role.value,
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    if principal.role is Role.AUTHOR and principal.display_name:
        payload["display_name"] = principal.display_name

    return jwt.encode(payload, secret_key or settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, secret_key: Optional[str] = None) -> TokenClaims:
    """
    Verify a token's signature, expiry and shape.

    Raises:
        TokenExpired: ``exp`` is in the past
        TokenInvalid: bad signature, malformed token, missing claims or unknown role
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            secret_key or settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.InvalidTokenError as e:
        raise TokenInvalid(reason=str(e))

    try:
        role = Role(payload["role"])
    except ValueError:
        raise TokenInvalid(reason="unknown role")

    subject = str(payload["sub"])
    if role is Role.ADMIN and subject != ADMIN_SUBJECT:
        raise TokenInvalid(reason="admin token with non-admin subject")
    if role is Role.AUTHOR and not subject.isdigit():
        raise TokenInvalid(reason="author token with malformed subject")

    return TokenClaims(
        subject=subject,
        email=str(payload["email"]),
        role=role,
        display_name=payload.get("display_name"),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
