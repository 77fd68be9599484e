"""
Profile business logic.

ProfileService implements the create-or-update merge, the experience and
education history operations, account deletion and the GitHub read-through.

Usage:
    with db.session() as session:
        service = ProfileService(session)
        profile = service.upsert_profile(identity, {"status": "Developer", "skills": "python, sql"})
"""

from collections.abc import Callable, Mapping
from functools import wraps
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from devconnector.api.github_api import GitHubRepoFetcher
from devconnector.constants import (
    GITHUB_REPO_DIRECTION,
    GITHUB_REPO_PAGE_SIZE,
    GITHUB_REPO_SORT,
    MAX_USER_ID,
    MSG_NO_PROFILE_FOR_USER,
    MSG_PROFILE_NOT_FOUND,
    REQUIRED_FIELD_MESSAGES,
)
from devconnector.errors import (
    DevConnectorError,
    InternalFault,
    InvalidCredential,
    ProfileNotFound,
    ValidationFailed,
)
from devconnector.logging import get_logger, operation_context
from devconnector.models import Education, Experience, Profile
from devconnector.repositories import ProfileRepository, UserRepository
from devconnector.schemas import EducationFields, ExperienceFields, ProfileFields, validate_input
from devconnector.security import Identity

logger = get_logger("profile.service")

F = TypeVar("F", bound=Callable[..., Any])

# Called as hook(session, user_id) before a profile and its user are deleted
AccountCleanupHook = Callable[[Session, int], None]

_account_cleanup_hooks: list[AccountCleanupHook] = []


def register_account_cleanup(hook: AccountCleanupHook) -> AccountCleanupHook:
    """
    Register a hook that removes other resources owned by a deleted account.

    Subsystems that store per-user data (posts, comments, ...) register here so
    that account deletion cascades to them. Usable as a decorator.
    """
    if hook not in _account_cleanup_hooks:
        _account_cleanup_hooks.append(hook)
    return hook


def account_cleanup_hooks() -> list[AccountCleanupHook]:
    return list(_account_cleanup_hooks)


def _operation(name: str) -> Callable[[F], F]:
    """
    Mark a public service operation.

    Domain errors propagate unchanged. Anything else is logged with its
    traceback and surfaced as InternalFault.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            with operation_context(name):
                try:
                    return func(self, *args, **kwargs)
                except DevConnectorError as e:
                    logger.info("operation_rejected", code=e.code.value, reason=e.reason)
                    raise
                except Exception as e:
                    logger.exception("operation_fault", error=str(e), error_type=type(e).__name__)
                    raise InternalFault(reason=type(e).__name__) from e

        return wrapper  # type: ignore

    return decorator


def _merge_social(current: Mapping[str, Any] | None, updates: Mapping[str, Any]) -> dict[str, Any]:
    """Apply supplied social links; a null value removes the link."""
    merged = dict(current or {})
    for network, url in updates.items():
        if url is None:
            merged.pop(network, None)
        else:
            merged[network] = url
    return merged


def _required_errors(names: list[str]) -> list[dict[str, str]]:
    return [
        {"msg": REQUIRED_FIELD_MESSAGES[name], "param": name, "location": "body"}
        for name in names
    ]


class ProfileService:
    """Profile operations for one unit of work (one request)."""

    def __init__(
        self,
        session: Session,
        fetcher: GitHubRepoFetcher | None = None,
        cleanup_hooks: list[AccountCleanupHook] | None = None,
    ):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.users = UserRepository(session)
        self._fetcher = fetcher
        self.cleanup_hooks = cleanup_hooks if cleanup_hooks is not None else account_cleanup_hooks()

    @property
    def fetcher(self) -> GitHubRepoFetcher:
        if self._fetcher is None:
            self._fetcher = GitHubRepoFetcher()
        return self._fetcher

    def _require_profile(self, identity: Identity) -> Profile:
        profile = self.profiles.get_by_user_id(identity.user_id)
        if profile is None:
            raise ProfileNotFound(MSG_NO_PROFILE_FOR_USER, reason="absent", user_id=identity.user_id)
        return profile

    # Reads

    @_operation("get_own_profile")
    def get_own_profile(self, identity: Identity) -> Profile:
        return self._require_profile(identity)

    @_operation("list_profiles")
    def list_profiles(self) -> list[Profile]:
        return self.profiles.list_all()

    @_operation("get_profile_by_user_id")
    def get_profile_by_user_id(self, user_id: str | int) -> Profile:
        """
        Public profile lookup by user id.

        A malformed id is reported exactly like a missing profile; only the
        error's ``reason`` tells them apart.
        """
        try:
            key = int(str(user_id).strip())
        except ValueError:
            key = 0
        if not 0 < key <= MAX_USER_ID:
            raise ProfileNotFound(MSG_PROFILE_NOT_FOUND, reason="malformed_id", raw_id=str(user_id))

        profile = self.profiles.get_by_user_id(key)
        if profile is None:
            raise ProfileNotFound(MSG_PROFILE_NOT_FOUND, reason="absent", user_id=key)
        return profile

    # Create / update

    @_operation("upsert_profile")
    def upsert_profile(
        self, identity: Identity, fields: ProfileFields | Mapping[str, Any]
    ) -> Profile:
        """
        Create the caller's profile or merge ``fields`` into it.

        Only supplied attributes are written. ``skills`` is split on commas and
        trimmed; social links are merged key by key into ``profile.social``.
        """
        fields = validate_input(ProfileFields, fields)

        invalid = []
        if fields.supplied("status") and not fields.status:
            invalid.append("status")
        if fields.supplied("skills") and not (fields.skills or "").strip():
            invalid.append("skills")
        if invalid:
            raise ValidationFailed(errors=_required_errors(invalid), reason="blank_required_field")

        scalars = fields.scalar_updates()
        skills = fields.skill_list()
        social = fields.social_updates()

        profile = self.profiles.get_by_user_id(identity.user_id)
        if profile is None:
            missing = [name for name in ("status", "skills") if not fields.supplied(name)]
            if missing:
                raise ValidationFailed(errors=_required_errors(missing), reason="incomplete_profile")

            user = self.users.get_by_id(identity.user_id)
            if user is None:
                # Valid signature, but the account no longer exists
                raise InvalidCredential(reason="unknown_user", user_id=identity.user_id)

            links = _merge_social({}, social)
            if links:
                scalars["social"] = links
            profile = self.profiles.create_for_user(user, **scalars, skills=skills)
            logger.info("profile_created", user_id=identity.user_id, profile_id=profile.id)
            return profile

        for name, value in scalars.items():
            setattr(profile, name, value)
        if skills is not None:
            profile.skills = skills
        if social:
            profile.social = _merge_social(profile.social, social)
        self.profiles.save(profile)

        logger.info(
            "profile_updated",
            user_id=identity.user_id,
            profile_id=profile.id,
            fields=sorted(fields.model_fields_set),
        )
        return profile

    # Delete

    @_operation("delete_own_profile_and_account")
    def delete_own_profile_and_account(self, identity: Identity) -> None:
        """
        Delete the caller's profile, then the caller's user record.

        Registered account cleanup hooks run first so other owned resources go
        with the account. Records that are already gone are skipped.
        """
        user_id = identity.user_id
        for hook in self.cleanup_hooks:
            hook(self.session, user_id)

        profile_deleted = self.profiles.delete_by_user_id(user_id)
        user_deleted = self.users.delete_by_id(user_id)
        logger.info(
            "account_deleted",
            user_id=user_id,
            profile_deleted=profile_deleted,
            user_deleted=user_deleted,
            cleanup_hooks=len(self.cleanup_hooks),
        )

    # Experience / education

    @_operation("add_experience")
    def add_experience(
        self, identity: Identity, experience: ExperienceFields | Mapping[str, Any]
    ) -> Profile:
        """Validate and insert an experience entry as the newest one."""
        fields = validate_input(ExperienceFields, experience)
        profile = self._require_profile(identity)

        entry = Experience(**fields.column_values())
        profile.experience.insert(0, entry)
        self.profiles.save(profile)

        logger.info("experience_added", profile_id=profile.id, entry_id=entry.id)
        return profile

    @_operation("remove_experience")
    def remove_experience(self, identity: Identity, exp_id: str) -> Profile:
        profile = self._require_profile(identity)
        self._remove_entry(profile, profile.experience, exp_id, "experience")
        return profile

    @_operation("add_education")
    def add_education(
        self, identity: Identity, education: EducationFields | Mapping[str, Any]
    ) -> Profile:
        """Validate and insert an education entry as the newest one."""
        fields = validate_input(EducationFields, education)
        profile = self._require_profile(identity)

        entry = Education(**fields.column_values())
        profile.education.insert(0, entry)
        self.profiles.save(profile)

        logger.info("education_added", profile_id=profile.id, entry_id=entry.id)
        return profile

    @_operation("remove_education")
    def remove_education(self, identity: Identity, edu_id: str) -> Profile:
        profile = self._require_profile(identity)
        self._remove_entry(profile, profile.education, edu_id, "education")
        return profile

    def _remove_entry(self, profile: Profile, entries: list, entry_id: str, kind: str) -> None:
        entry = next((e for e in entries if e.id == entry_id), None)
        if entry is None:
            logger.info("history_entry_absent", kind=kind, profile_id=profile.id, entry_id=entry_id)
            return
        entries.remove(entry)
        self.profiles.save(profile)
        logger.info("history_entry_removed", kind=kind, profile_id=profile.id, entry_id=entry_id)

    # GitHub

    @_operation("fetch_external_repos")
    def fetch_external_repos(self, username: str) -> list[dict[str, Any]]:
        """Up to five public repositories of a GitHub user, oldest creation first."""
        return self.fetcher.list_repos(
            username,
            per_page=GITHUB_REPO_PAGE_SIZE,
            sort=GITHUB_REPO_SORT,
            direction=GITHUB_REPO_DIRECTION,
        )


__all__ = [
    "AccountCleanupHook",
    "ProfileService",
    "account_cleanup_hooks",
    "register_account_cleanup",
]
