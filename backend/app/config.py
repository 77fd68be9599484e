"""
Application configuration using Pydantic settings.

Re-exports from devconnector.config so the web layer and the core read the
same cached settings:
    from devconnector.config import get_settings, Settings
"""

from devconnector.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
