############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: API endpoints package and router configuration
#
############################################################

"""API endpoints for the Xarwiz CMS."""

from fastapi import APIRouter

from backend.app.api.account_api import router as account_router
from backend.app.api.authors_api import router as authors_router
from backend.app.api.blog_api import router as blog_router
from backend.app.api.health import router as health_router
from backend.app.api.posts_api import router as posts_router
from backend.app.api.taxonomy_api import router as taxonomy_router

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health_router)
api_router.include_router(blog_router)
api_router.include_router(account_router, prefix="/admin", tags=["account"])
api_router.include_router(authors_router, prefix="/admin", tags=["authors"])
api_router.include_router(posts_router, prefix="/admin", tags=["posts"])
api_router.include_router(taxonomy_router, prefix="/admin", tags=["taxonomy"])

__all__ = ["api_router"]
