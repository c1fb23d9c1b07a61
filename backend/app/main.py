############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# main.py: FastAPI application entry point and configuration
#
############################################################

"""FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.app.api import api_router
from backend.app.core.errors import CMSError, InternalError
from backend.app.db.session import check_database_connection, create_all_tables, engine
from backend.app.logging_config import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from backend.app.settings import DEFAULT_SECRET_KEY, get_settings

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting Xarwiz CMS...", version=settings.app_version)

    # Refuse to serve without a database
    try:
        await check_database_connection()
    except (SQLAlchemyError, OSError) as e:
        logger.critical("database_unreachable", error=str(e))
        raise

    if settings.database_auto_create:
        await create_all_tables()
        logger.info("database_tables_created")

    if settings.secret_key == DEFAULT_SECRET_KEY and not settings.debug:
        logger.warning("default_secret_key_in_use")
    if not settings.admin_login_enabled:
        logger.warning("admin_login_disabled", reason="ADMIN_PASSWORD is not set")

    logger.info("Xarwiz CMS started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Xarwiz CMS...")
    await engine.dispose()
    logger.info("Xarwiz CMS shutdown complete")


class RequestIDMiddleware:
    """Raw ASGI middleware for request ID injection.

    Unlike @app.middleware("http") which wraps in BaseHTTPMiddleware,
    this does NOT run the handler in a separate task, so client disconnects
    won't cancel in-flight DB operations and leak connections.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = (
            headers.get(b"x-request-id", b"").decode()
            or str(uuid.uuid4())
        )

        bind_request_context(request_id=request_id)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append(
                    (b"x-request-id", request_id.encode())
                )
                message = {**message, "headers": response_headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            clear_request_context()


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure onto the ``{"error": {"message", "type"}}`` envelope."""

    @app.exception_handler(CMSError)
    async def cms_error_handler(request: Request, exc: CMSError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message, **exc.context)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else "Invalid request"
        return JSONResponse(
            status_code=400,
            content={
                "error": {
                    "message": message,
                    "type": "validation_error",
                    "details": [
                        {"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors
                    ],
                }
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error("database_error", path=request.url.path, error=str(exc))
        error = InternalError("Database error")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("unhandled_exception", error=str(exc))
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Content backend for the Xarwiz marketing site blog",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware, raw ASGI so client disconnects don't cancel
    # in-flight DB work
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app


# Create application instance
app = create_app()


def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
