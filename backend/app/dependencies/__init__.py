"""
FastAPI dependency injection module.

Provides centralized dependencies for services. The database session comes
from ``get_db`` and lives for exactly one request.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from devconnector.api import GitHubRepoFetcher, get_github_fetcher
from devconnector.services import ProfileService

from ..database import get_db


def get_profile_service(
    db: Session = Depends(get_db),
    fetcher: GitHubRepoFetcher = Depends(get_github_fetcher),
) -> ProfileService:
    """Get a ProfileService bound to the request's session."""
    return ProfileService(db, fetcher=fetcher)
