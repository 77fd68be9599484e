"""Authenticated caller identity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    Identity claim extracted from a verified token.

    Built per request by the auth gate and never persisted.
    """

    user_id: int
