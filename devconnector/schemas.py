"""
Input models for the profile core.

``ProfileFields`` is a sparse update: every attribute is optional and the
model's ``model_fields_set`` records which ones the caller actually supplied.
An attribute that was supplied is applied even if its value is empty or null;
an attribute that was not supplied is never touched.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    PROFILE_SCALAR_FIELDS,
    REQUIRED_FIELD_MESSAGES,
    SKILLS_DELIMITER,
    SOCIAL_NETWORKS,
)
from .errors import ValidationFailed


def parse_skills(raw: str) -> list[str]:
    """Split a comma separated skill string, trimming each item and keeping order."""
    return [skill.strip() for skill in raw.split(SKILLS_DELIMITER)]


class ProfileFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: str | None = Field(default=None, description="Comma separated skill names")

    # Social links arrive flat and are stored under profile.social
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None

    def supplied(self, name: str) -> bool:
        return name in self.model_fields_set

    def scalar_updates(self) -> dict[str, Any]:
        """Scalar attributes the caller supplied, by column name."""
        return {name: getattr(self, name) for name in PROFILE_SCALAR_FIELDS if self.supplied(name)}

    def social_updates(self) -> dict[str, Any]:
        """Social links the caller supplied, by network name."""
        return {name: getattr(self, name) for name in SOCIAL_NETWORKS if self.supplied(name)}

    def skill_list(self) -> list[str] | None:
        """Parsed skills, or None when skills were not supplied."""
        if not self.supplied("skills") or self.skills is None:
            return None
        return parse_skills(self.skills)


class _HistoryFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    from_date: date = Field(alias="from")
    to_date: date | None = Field(default=None, alias="to")
    current: bool = False
    description: str | None = None

    @field_validator("to_date", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        # Forms post an empty "to" for ongoing entries
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def column_values(self) -> dict[str, Any]:
        return self.model_dump(by_alias=False)


class ExperienceFields(_HistoryFields):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str | None = None


class EducationFields(_HistoryFields):
    school: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    fieldofstudy: str = Field(min_length=1)


# =============================================================================
# Validation messages
# =============================================================================

_LOCATIONS = {"body", "query", "path", "header"}


def field_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """
    Convert pydantic error dicts to ``{"msg", "param", "location"}`` entries.

    Missing or blank required fields get their human message
    (e.g. "Title is required"); other errors keep pydantic's message.
    Only the first error per field is kept.
    """
    result: list[dict[str, str]] = []
    seen: set[str] = set()
    for error in errors:
        loc = list(error.get("loc", ()))
        location = "body"
        if loc and loc[0] in _LOCATIONS:
            location = str(loc.pop(0))
        param = str(loc[0]) if loc else ""
        if param in seen:
            continue
        seen.add(param)

        msg = str(error.get("msg", "Invalid value"))
        blank = error.get("type") == "missing" or error.get("input") in (None, "")
        if blank and param in REQUIRED_FIELD_MESSAGES:
            msg = REQUIRED_FIELD_MESSAGES[param]
        result.append({"msg": msg, "param": param, "location": location})
    return result


def validate_input(model: type[BaseModel], data: BaseModel | Mapping[str, Any]) -> Any:
    """Validate ``data`` into ``model``, raising ValidationFailed with field errors."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_unset=True)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(errors=field_errors(exc.errors()), reason="invalid_input") from None


__all__ = [
    "ProfileFields",
    "ExperienceFields",
    "EducationFields",
    "parse_skills",
    "field_errors",
    "validate_input",
]
