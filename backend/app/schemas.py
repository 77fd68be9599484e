"""
Pydantic schemas for request and response validation.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from devconnector.schemas import EducationFields, ExperienceFields, ProfileFields


class ProfileUpsertRequest(ProfileFields):
    """Body of POST /profile: status and skills are always required."""

    status: str = Field(min_length=1)
    skills: str = Field(min_length=1, description="Comma separated skill names")


class ExperienceRequest(ExperienceFields):
    pass


class EducationRequest(EducationFields):
    pass


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: str | None = None


class _HistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    from_date: date = Field(serialization_alias="from")
    to_date: date | None = Field(default=None, serialization_alias="to")
    current: bool = False
    description: str | None = None


class ExperienceResponse(_HistoryResponse):
    title: str
    company: str
    location: str | None = None


class EducationResponse(_HistoryResponse):
    school: str
    degree: str
    fieldofstudy: str


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user: UserSummary
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: list[str] = Field(default_factory=list)
    social: dict[str, Any] = Field(default_factory=dict)
    experience: list[ExperienceResponse] = Field(default_factory=list)
    education: list[EducationResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    msg: str


class ErrorItem(BaseModel):
    msg: str
    param: str | None = None
    location: str | None = None


class ErrorResponse(BaseModel):
    """Envelope of every non-500 error response."""

    errors: list[ErrorItem]
