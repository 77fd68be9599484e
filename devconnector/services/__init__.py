"""
Core services with business logic.

Services operate on a caller-owned session and raise DevConnectorError
subclasses; they never deal with HTTP.
"""

from devconnector.services.profile_service import (
    ProfileService,
    account_cleanup_hooks,
    register_account_cleanup,
)

__all__ = [
    "ProfileService",
    "account_cleanup_hooks",
    "register_account_cleanup",
]
