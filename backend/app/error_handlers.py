"""
Custom exception handlers for FastAPI.

Translates the core's tagged errors into HTTP responses. Every handled error
uses the ``{"errors": [{"msg": ...}]}`` envelope; unexpected failures return a
plain-text 500.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- ``reason`` and ``context`` of domain errors are logged, never returned
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from devconnector.constants import MSG_SERVER_ERROR
from devconnector.errors import DevConnectorError, ErrorCode
from devconnector.logging import get_context_value, get_logger
from devconnector.schemas import field_errors

logger = get_logger("backend.errors")

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.MISSING_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROFILE_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EXTERNAL_LOOKUP_FAILED: status.HTTP_404_NOT_FOUND,
    ErrorCode.INTERNAL_FAULT: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(code: ErrorCode) -> int:
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _server_error() -> PlainTextResponse:
    return PlainTextResponse(MSG_SERVER_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DevConnectorError)
    async def domain_error_handler(request: Request, exc: DevConnectorError):
        status_code = status_for(exc.code)
        request_id = get_context_value("request_id", "-")

        if status_code >= 500:
            logger.error(
                "internal_fault",
                reason=exc.reason,
                path=request.url.path,
                request_id=request_id,
            )
            return _server_error()

        logger.warning(
            "domain_error",
            code=exc.code.value,
            reason=exc.reason,
            status_code=status_code,
            path=request.url.path,
            request_id=request_id,
            **exc.context,
        )
        return JSONResponse(status_code=status_code, content={"errors": exc.errors})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc.errors())
        logger.warning(
            "validation_error",
            params=[error["param"] for error in errors],
            path=request.url.path,
            request_id=get_context_value("request_id", "-"),
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Log full details server-side; the client only gets a generic body
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            request_id=get_context_value("request_id", "-"),
        )
        return _server_error()
