"""
Domain errors for the profile core.

Every failure the core reports is a ``DevConnectorError`` tagged with an
``ErrorCode``. The core knows nothing about HTTP; the web layer maps codes to
status codes (see ``backend/app/error_handlers.py``).

``messages`` are safe to show to clients. ``reason`` and ``context`` carry the
finer-grained diagnosis (e.g. malformed id vs. absent profile) and are only
logged.
"""

from enum import Enum
from typing import Any

from .constants import (
    MSG_INVALID_TOKEN,
    MSG_NO_GITHUB_PROFILE,
    MSG_NO_TOKEN,
    MSG_PROFILE_NOT_FOUND,
    MSG_SERVER_ERROR,
)


class ErrorCode(str, Enum):
    """Tag identifying the kind of a domain error."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    VALIDATION_FAILED = "validation_failed"
    PROFILE_NOT_FOUND = "profile_not_found"
    EXTERNAL_LOOKUP_FAILED = "external_lookup_failed"
    INTERNAL_FAULT = "internal_fault"


class DevConnectorError(Exception):
    """Base class for all errors raised by the profile core."""

    code: ErrorCode = ErrorCode.INTERNAL_FAULT
    default_message: str = MSG_SERVER_ERROR

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: list[dict[str, Any]] | None = None,
        reason: str | None = None,
        **context: Any,
    ):
        if errors is None:
            errors = [{"msg": message or self.default_message}]
        self.errors = errors
        self.reason = reason
        self.context = context
        super().__init__(self.messages[0] if self.messages else self.default_message)

    @property
    def messages(self) -> list[str]:
        return [str(error.get("msg", "")) for error in self.errors]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, reason={self.reason!r}, errors={self.errors!r})"


class MissingCredential(DevConnectorError):
    code = ErrorCode.MISSING_CREDENTIAL
    default_message = MSG_NO_TOKEN


class InvalidCredential(DevConnectorError):
    code = ErrorCode.INVALID_CREDENTIAL
    default_message = MSG_INVALID_TOKEN


class ValidationFailed(DevConnectorError):
    """Input precondition violated. ``errors`` holds one entry per field."""

    code = ErrorCode.VALIDATION_FAILED
    default_message = "Invalid input"


class ProfileNotFound(DevConnectorError):
    """
    No profile for the requested key.

    ``reason`` is ``"absent"`` or ``"malformed_id"``; both render identically.
    """

    code = ErrorCode.PROFILE_NOT_FOUND
    default_message = MSG_PROFILE_NOT_FOUND


class ExternalLookupFailed(DevConnectorError):
    """
    GitHub lookup failed.

    ``reason`` is one of ``"upstream_status"``, ``"transport_error"`` or
    ``"invalid_body"``; the client always sees the same message.
    """

    code = ErrorCode.EXTERNAL_LOOKUP_FAILED
    default_message = MSG_NO_GITHUB_PROFILE


class InternalFault(DevConnectorError):
    code = ErrorCode.INTERNAL_FAULT
    default_message = MSG_SERVER_ERROR


__all__ = [
    "ErrorCode",
    "DevConnectorError",
    "MissingCredential",
    "InvalidCredential",
    "ValidationFailed",
    "ProfileNotFound",
    "ExternalLookupFailed",
    "InternalFault",
]
