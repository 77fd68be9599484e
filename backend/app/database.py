"""
Database session dependency for the web layer.

Re-exports from devconnector.db. Database initialization is handled
explicitly in the application lifespan (main.py), not at import time.
"""

from devconnector.db import Base, db, get_db

__all__ = ["Base", "db", "get_db"]
