############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# auth.py: API authentication and authorization dependencies
#
############################################################

"""API authentication and authorization.

One verification path serves all three guards; the only difference between
them is the ``AccessLevel`` they are built with:

    no/malformed header  -> 401 TokenMissing
    bad or expired token -> 401 TokenInvalid / TokenExpired
    role not permitted   -> 403 Forbidden
    author row gone      -> 401 Unauthorized

The checks run top to bottom. The role check uses only the token claims, so a
deleted author calling an admin-only route gets 403 before the row lookup
would have produced 401.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.access import AccessLevel, Principal, Role
from backend.app.core.errors import Forbidden, TokenMissing, Unauthorized
from backend.app.db import crud
from backend.app.db.session import get_async_db
from backend.app.logging_config import bind_request_context, get_logger
from backend.app.security.tokens import TokenClaims, decode_token
from backend.app.settings import get_settings

logger = get_logger(__name__)

# Security scheme; missing credentials are reported by the guard, not FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Extract the token from ``Authorization: Bearer <token>``."""
    if credentials is None or not credentials.credentials:
        raise TokenMissing()
    return credentials.credentials


async def resolve_principal(db: AsyncSession, claims: TokenClaims) -> Principal:
    """Build the request principal from verified claims.

    Admin claims are trusted as-is. Author claims are re-checked against the
    live row so a deleted author is locked out even with an unexpired token.
    """
    if claims.role is Role.ADMIN:
        return Principal.for_admin(get_settings().admin_email)

    author = await crud.get_author_by_id(db, int(claims.subject))
    if author is None:
        logger.warning("token_for_missing_author", author_id=claims.subject)
        raise Unauthorized("Not authorized, author account no longer exists")
    return Principal.for_author(author)


class RequireRole:
    """Dependency that authenticates the bearer token and checks its role."""

    def __init__(self, access: AccessLevel):
        self.access = access

    async def __call__(
        self,
        request: Request,
        token: str = Depends(get_bearer_token),
        db: AsyncSession = Depends(get_async_db),
    ) -> Principal:
        try:
            claims = decode_token(token)
        except Unauthorized as e:
            logger.warning("token_rejected", path=request.url.path, reason=e.error_type, detail=e.message)
            raise

        if not self.access.permits(claims.role):
            logger.warning(
                "role_forbidden",
                path=request.url.path,
                role=claims.role.value,
                required=self.access.value,
            )
            raise Forbidden(f"Requires {self.access.value} role")

        principal = await resolve_principal(db, claims)
        bind_request_context(principal_id=principal.id, role=principal.role.value)
        return principal


# Convenience dependencies
require_admin = RequireRole(AccessLevel.ADMIN)
require_author = RequireRole(AccessLevel.AUTHOR)
require_admin_or_author = RequireRole(AccessLevel.EITHER)
