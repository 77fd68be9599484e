"""
JWT helper utilities.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from devconnector.constants import MAX_USER_ID
from devconnector.errors import InvalidCredential
from devconnector.security import Identity

from ..config import get_settings


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token for a user.

    Args:
        user_id: Id of the user the token identifies (stored as ``sub``).
        expires_minutes: Optional override for expiration window in minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    )
    expire = datetime.now(timezone.utc) + expire_delta
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        # JWT ID, useful for tracing a token in logs
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Args:
        token: Encoded JWT string.

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid or signature/expiry check fails.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc


class TokenVerifier:
    """Pure signature + expiry check turning a token into an Identity."""

    def verify(self, token: str) -> Identity:
        """
        Raises:
            InvalidCredential: malformed, unsigned, expired, wrongly signed,
                or missing an integer ``sub`` claim.
        """
        try:
            payload = decode_access_token(token)
        except ValueError:
            raise InvalidCredential(reason="bad_signature_or_expired") from None

        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise InvalidCredential(reason="bad_subject") from None
        if not 0 < user_id <= MAX_USER_ID:
            raise InvalidCredential(reason="bad_subject")

        return Identity(user_id=user_id)
