"""
Authentication dependencies for FastAPI routes.

Protected routes declare ``identity: Identity = Depends(get_identity)`` as
their first parameter so the gate runs before any other dependency (and
therefore before a database session is used).

The token travels in the ``x-auth-token`` header.
"""

from fastapi import Depends
from fastapi.security import APIKeyHeader

from devconnector.constants import AUTH_HEADER
from devconnector.errors import MissingCredential
from devconnector.logging import bind_user
from devconnector.security import Identity

from .jwt import TokenVerifier

token_header_scheme = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def get_token_verifier() -> TokenVerifier:
    return TokenVerifier()


def get_token_from_request(token: str | None = Depends(token_header_scheme)) -> str:
    """Extract the raw token, failing with MissingCredential when absent."""
    if not token:
        raise MissingCredential(reason="header_absent")
    return token


def get_identity(
    token: str = Depends(get_token_from_request),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """
    Resolve the caller's identity from the request token.

    Steps:
    1) Extract the token from the header (MissingCredential if absent)
    2) Verify signature and expiry (InvalidCredential on failure)
    3) Bind the user id to the logging context for this request
    """
    identity = verifier.verify(token)
    bind_user(identity.user_id)
    return identity
