"""Profile repository."""

from typing import Any

from sqlalchemy.orm import joinedload, selectinload

from devconnector.models import Profile, User

from .base import BaseRepository


def _with_children(query):
    """Eager-load everything a profile response needs."""
    return query.options(
        joinedload(Profile.user),
        selectinload(Profile.experience),
        selectinload(Profile.education),
    )


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile operations."""

    model = Profile

    def get_by_user_id(self, user_id: int) -> Profile | None:
        """Get profile by owning user ID, with user and history loaded."""
        return _with_children(self.session.query(Profile)).filter(Profile.user_id == user_id).first()

    def list_all(self) -> list[Profile]:
        """Get every profile, oldest first."""
        return _with_children(self.session.query(Profile)).order_by(Profile.id).all()

    def create_for_user(self, user: User, **fields: Any) -> Profile:
        """
        Create a profile owned by ``user`` holding exactly ``fields``.

        Attributes not supplied stay NULL.
        """
        profile = Profile(user=user, **fields)
        self.session.add(profile)
        self.session.flush()
        return profile

    def save(self, profile: Profile) -> Profile:
        """Flush pending changes of a loaded profile."""
        self.session.add(profile)
        self.session.flush()
        return profile

    def delete_by_user_id(self, user_id: int) -> bool:
        """Delete the profile of a user, including its history entries."""
        profile = self.get_by_user_id(user_id)
        if profile is None:
            return False
        owner = profile.user
        self.session.delete(profile)
        self.session.flush()
        if owner is not None:
            # Drop the in-memory back reference to the deleted row
            self.session.expire(owner, ["profile"])
        return True
