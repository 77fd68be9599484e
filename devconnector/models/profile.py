"""
Profile SQLAlchemy models.

A profile owns two ordered sub-collections, experience and education. Both
are kept newest-first: ``position`` 0 is the most recently added entry and
``ordering_list`` renumbers the column whenever the collection changes.
"""

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


def new_entry_id() -> str:
    """Generate the stable key of an experience/education entry."""
    return uuid.uuid4().hex


class Profile(Base):
    """
    Developer profile, one per user.

    Attributes:
        status: Professional status (e.g. "Developer"), always non-empty
        skills: Ordered list of skill names
        social: Mapping of network name to URL (see constants.SOCIAL_NETWORKS)
        experience: Work history, newest first
        education: Education history, newest first
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, index=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(255))
    githubusername: Mapped[str | None] = mapped_column(String(255), nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    social: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="profile")
    experience: Mapped[list["Experience"]] = relationship(
        "Experience",
        order_by="Experience.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    education: Mapped[list["Education"]] = relationship(
        "Education",
        order_by="Education.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Experience(Base):
    """Work history entry owned by a profile."""

    __tablename__ = "profile_experience"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_entry_id)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    title: Mapped[str] = mapped_column(String(255))
    company: Mapped[str] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    from_date: Mapped[date] = mapped_column(Date)
    to_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current: Mapped[bool] = mapped_column(Boolean, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Education(Base):
    """Education history entry owned by a profile."""

    __tablename__ = "profile_education"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_entry_id)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    school: Mapped[str] = mapped_column(String(255))
    degree: Mapped[str] = mapped_column(String(255))
    fieldofstudy: Mapped[str] = mapped_column(String(255))
    from_date: Mapped[date] = mapped_column(Date)
    to_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current: Mapped[bool] = mapped_column(Boolean, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
