"""Base repository class with common lookups."""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from devconnector.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository bound to a caller-owned session.

    Usage:
        class UserRepository(BaseRepository[User]):
            model = User

        repo = UserRepository(session)
        user = repo.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by primary key."""
        return self.session.get(self.model, id)

    def delete(self, id: int) -> bool:
        """Delete a record by ID. Returns False when nothing was deleted."""
        instance = self.get_by_id(id)
        if instance is None:
            return False
        self.session.delete(instance)
        self.session.flush()
        return True
