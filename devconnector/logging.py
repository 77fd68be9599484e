"""
Structured logging for DevConnector Profiles.

Every entry carries the request id (bound by the request id middleware), the
authenticated ``user_id`` once the auth gate has run, and the ``operation``
of the ProfileService call in progress. Console output in development, JSON
lines otherwise.

Usage:
    from devconnector.logging import get_logger, operation_context

    logger = get_logger("profile.service")
    with operation_context("upsert_profile"):
        logger.info("profile_updated", profile_id=3)
"""

import logging
import sys
import time
from collections.abc import Callable, Iterator, MutableMapping
from contextlib import contextmanager
from functools import lru_cache, wraps
from typing import Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "devconnector-profiles"

# Event keys whose values must never reach the logs
REDACTED_KEYS = frozenset({"token", "x_auth_token", "authorization", "pat_token", "jwt_secret_key"})


def _use_console() -> bool:
    from .config import get_settings

    settings = get_settings()
    return settings.debug or not settings.is_production


def _add_service(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> EventDict:
    event_dict["service"] = SERVICE_NAME
    return event_dict  # type: ignore[return-value]


def _redact_credentials(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> EventDict:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict  # type: ignore[return-value]


def get_processors() -> list[Processor]:
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service,
        _redact_credentials,
    ]

    if _use_console():
        return shared + [
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        ]
    return shared + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging. Repeated calls are no-ops."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


# =============================================================================
# Request-scoped context
# =============================================================================


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def bind_user(user_id: int) -> None:
    """Attach the authenticated caller to every later entry of this request."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_context_value(key: str, default: Any = None) -> Any:
    """Read a bound context variable (e.g. the current request id)."""
    return structlog.contextvars.get_contextvars().get(key, default)


@contextmanager
def operation_context(name: str, **extra: Any) -> Iterator[None]:
    """Tag entries logged inside the block with ``operation=name``."""
    with structlog.contextvars.bound_contextvars(operation=name, **extra):
        yield


def log_timing(target: str, logger: structlog.stdlib.BoundLogger | None = None) -> Callable[[F], F]:
    """
    Log the duration of a call to an external system.

    Successful calls log ``external_call`` at debug; failures log
    ``external_call_failed`` with the error type and re-raise.
    """

    def decorator(func: F) -> F:
        _logger = logger or get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _logger.warning(
                    "external_call_failed",
                    target=target,
                    duration_ms=round((time.perf_counter() - start) * 1000, 1),
                    error_type=type(e).__name__,
                )
                raise
            _logger.debug(
                "external_call",
                target=target,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            return result

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# ASGI request logging
# =============================================================================


class RequestLoggingMiddleware:
    """
    Log one entry per HTTP request when its response starts.

    2xx/3xx log ``request_complete``; 4xx (missing token, validation, unknown
    profile) are expected and log ``request_rejected`` at info; 5xx log
    ``request_failed`` at error. The request context is cleared afterwards.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            fields = {
                "method": scope.get("method", ""),
                "path": scope.get("path", ""),
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            }
            if status_code >= 500:
                self.logger.error("request_failed", **fields)
            elif status_code >= 400:
                self.logger.info("request_rejected", **fields)
            else:
                self.logger.info("request_complete", **fields)
            clear_context()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "bind_user",
    "clear_context",
    "get_context_value",
    "operation_context",
    "log_timing",
    "RequestLoggingMiddleware",
]
