############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# account_api.py: Unified admin/author login and session identity
#
############################################################

"""Login and current-identity endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import require_admin_or_author
from backend.app.api.schemas import AuthorResponse, LoginRequest, LoginResponse, LoginUser, MeResponse
from backend.app.core.access import Principal
from backend.app.db.session import get_async_db
from backend.app.security.tokens import issue_token
from backend.app.services import credentials

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Log in as the configured admin or as an author.

    404 when no account uses the email, 401 when the password is wrong.
    """
    principal = await credentials.login(db, request.email, request.password)
    return LoginResponse(
        token=issue_token(principal),
        user=LoginUser(
            id=principal.id,
            email=principal.email,
            name=principal.display_name,
            role=principal.role.value,
        ),
    )


@router.get("/me", response_model=MeResponse)
async def whoami(principal: Principal = Depends(require_admin_or_author)):
    """Return the authenticated principal."""
    return MeResponse(
        id=principal.id,
        email=principal.email,
        role=principal.role.value,
        display_name=principal.display_name,
        author=AuthorResponse.from_author(principal.author) if principal.author else None,
    )
