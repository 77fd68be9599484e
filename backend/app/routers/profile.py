"""
Profile management endpoints.

Protected routes take the caller's Identity from the auth gate as their
first dependency; public routes (listing, lookup by user, GitHub repos) take
none. All business rules live in ProfileService.
"""

from typing import Any

from fastapi import APIRouter, Depends

from devconnector.constants import MSG_ACCOUNT_DELETED
from devconnector.security import Identity
from devconnector.services import ProfileService

from ..auth.dependencies import get_identity
from ..dependencies import get_profile_service
from ..schemas import (
    EducationRequest,
    ErrorResponse,
    ExperienceRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpsertRequest,
)

router = APIRouter(prefix="/profile", tags=["profile"])

AUTH_ERRORS: dict[int | str, dict[str, Any]] = {401: {"model": ErrorResponse}}
CLIENT_ERRORS: dict[int | str, dict[str, Any]] = {400: {"model": ErrorResponse}}


@router.get(
    "/me",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def get_my_profile(
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Get current user's profile."""
    return service.get_own_profile(identity)


@router.post(
    "",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def upsert_profile(
    payload: ProfileUpsertRequest,
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """
    Create or update the current user's profile.

    Only the fields present in the body are written; everything else keeps
    its stored value.
    """
    return service.upsert_profile(identity, payload)


@router.get("", response_model=list[ProfileResponse], response_model_exclude_none=True)
def list_profiles(service: ProfileService = Depends(get_profile_service)):
    """Get all profiles."""
    return service.list_profiles()


@router.get(
    "/user/{user_id}",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses=CLIENT_ERRORS,
)
def get_profile_by_user(user_id: str, service: ProfileService = Depends(get_profile_service)):
    """Get a profile by user ID. Malformed IDs are reported as not found."""
    return service.get_profile_by_user_id(user_id)


@router.delete("", response_model=MessageResponse, responses=AUTH_ERRORS)
def delete_account(
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Delete the current user's profile, owned resources and user record."""
    service.delete_own_profile_and_account(identity)
    return MessageResponse(msg=MSG_ACCOUNT_DELETED)


@router.put(
    "/experience",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def add_experience(
    payload: ExperienceRequest,
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Add an experience entry; it becomes the first (newest) item."""
    return service.add_experience(identity, payload)


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def remove_experience(
    exp_id: str,
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Remove an experience entry. Unknown IDs leave the profile unchanged."""
    return service.remove_experience(identity, exp_id)


@router.put(
    "/education",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def add_education(
    payload: EducationRequest,
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Add an education entry; it becomes the first (newest) item."""
    return service.add_education(identity, payload)


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileResponse,
    response_model_exclude_none=True,
    responses={**AUTH_ERRORS, **CLIENT_ERRORS},
)
def remove_education(
    edu_id: str,
    identity: Identity = Depends(get_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Remove an education entry. Unknown IDs leave the profile unchanged."""
    return service.remove_education(identity, edu_id)


@router.get("/github/{username}", responses={404: {"model": ErrorResponse}})
def get_github_repos(username: str, service: ProfileService = Depends(get_profile_service)):
    """Proxy GitHub's public repository listing for ``username`` (5 oldest-created first)."""
    return service.fetch_external_repos(username)
