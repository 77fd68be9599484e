"""
SQLAlchemy models for DevConnector Profiles.

Single source of truth for all database models.

Usage:
    from devconnector.models import User, Profile, Experience, Education
"""

from .base import Base
from .profile import Education, Experience, Profile, new_entry_id
from .user import User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    # Profile
    "Profile",
    "Experience",
    "Education",
    "new_entry_id",
]
