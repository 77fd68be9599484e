"""User repository."""

from devconnector.logging import get_logger
from devconnector.models import User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def delete_by_id(self, user_id: int) -> bool:
        """Delete a user record. Missing users are not an error."""
        deleted = self.delete(user_id)
        if not deleted:
            logger.info("user_already_absent", user_id=user_id)
        return deleted
