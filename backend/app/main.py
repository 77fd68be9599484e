"""
FastAPI application entry point.

Uses structured logging from devconnector.logging module.
"""

import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from devconnector.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .config import get_settings
from .database import db
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import profile as profile_router


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app, max_size_mb: int = 1):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024  # Convert to bytes
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > self.max_size:
                    return JSONResponse(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        content={
                            "errors": [
                                {"msg": f"Maximum request size is {self.max_size_mb}MB"}
                            ]
                        },
                    )
            except ValueError:
                pass

        return await call_next(request)


# Configure structured logging
settings = get_settings()
log_level = "DEBUG" if settings.debug else "INFO"
configure_logging(level=log_level)
logger = get_logger("api")


def check_database_health(max_retries: int = 3, retry_delay: float = 2.0) -> bool:
    """
    Check database connectivity with retry logic.

    Raises:
        RuntimeError: If database is unreachable after all retries
    """
    for attempt in range(max_retries):
        result = db.health_check()
        if result["healthy"]:
            logger.info("database_health_check_passed", attempt=attempt + 1, latency_ms=result["latency_ms"])
            return True
        logger.warning(
            "database_health_check_failed",
            attempt=attempt + 1,
            max_retries=max_retries,
            error=result["error"],
        )
        if attempt < max_retries - 1:
            time.sleep(retry_delay * (attempt + 1))

    raise RuntimeError(
        f"Database unreachable after {max_retries} attempts. "
        "Check DATABASE_URL configuration and database server status."
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database on startup; log shutdown."""
    logger.info("app_startup", app_name=settings.app_name)

    db.initialize(settings.database_url)
    check_database_health()
    db.create_all_tables()
    logger.info("database_initialized")

    yield

    logger.info("app_shutdown")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Accept-Encoding",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
            "x-auth-token",
        ],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Structured request logging, inside the request id scope
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe. Returns minimal information to avoid exposing infrastructure details."""
        return {"status": "ok"}

    app.include_router(profile_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
