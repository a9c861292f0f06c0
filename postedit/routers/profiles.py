"""Profile management endpoints.

Profiles can be addressed through their owner's name (``/users/{name}/profile``)
or as "my profile" (``/profile``). Both forms resolve the acting user first,
so an admin passing ``actingAsUserId`` manages the target user's profile.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_acting_user, require_ownership
from ..db import get_db
from ..errors import BadRequest
from ..queries import commit, fetch_one
from ..services.accounts import get_user_by_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profiles"])


def _get_profile(db: Session, user: models.User) -> models.Profile:
    return fetch_one(
        db.query(models.Profile).filter(models.Profile.user_id == user.id),
        detail=f"No profile found for user {user.name}",
    )


def _create_profile(
    db: Session, user: models.User, payload: schemas.ProfileCreate
) -> schemas.ProfileResponse:
    profile = models.Profile(
        user_id=user.id,
        display_name=payload.display_name,
        bio=payload.bio,
        about=payload.about,
        profile_picture_url=payload.profile_picture_url,
    )
    db.add(profile)
    commit(db, conflict_detail=f"User {user.name} already has a profile")
    db.refresh(profile)
    return schemas.ProfileResponse(
        message=f"Profile for user {user.name} created",
        profile=schemas.Profile.model_validate(profile),
    )


def _edit_profile(
    db: Session, user: models.User, payload: schemas.ProfileUpdate
) -> schemas.ProfileResponse:
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise BadRequest("No fields to update")
    if "display_name" in changes and changes["display_name"] is None:
        raise BadRequest("displayName cannot be null")

    profile = _get_profile(db, user)
    for field, value in changes.items():
        setattr(profile, field, value)
    commit(db)
    db.refresh(profile)
    return schemas.ProfileResponse(
        message=f"Profile for user {user.name} updated",
        profile=schemas.Profile.model_validate(profile),
    )


def _delete_profile(db: Session, user: models.User) -> schemas.Message:
    profile = _get_profile(db, user)
    db.delete(profile)
    commit(db)
    logger.info(f"Deleted profile of user {user.id}")
    return schemas.Message(message=f"Profile for user {user.name} deleted")


# ============================================================================
# /users/{name}/profile
# ============================================================================


@router.post(
    "/users/{name}/profile/create",
    response_model=schemas.ProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user_profile(
    name: str,
    payload: schemas.ProfileCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ProfileResponse:
    """Create a profile. Returns 400 if the user already has one."""
    user = get_user_by_name(db, name)
    require_ownership(user.id, actor, "create a profile for yourself")
    return _create_profile(db, user, payload)


@router.get("/users/{name}/profile", response_model=schemas.ProfileResponse)
def get_user_profile(name: str, db: Session = Depends(get_db)) -> schemas.ProfileResponse:
    user = get_user_by_name(db, name)
    profile = _get_profile(db, user)
    return schemas.ProfileResponse(
        message=f"Profile for user {name} found",
        profile=schemas.Profile.model_validate(profile),
    )


@router.put("/users/{name}/profile/edit", response_model=schemas.ProfileResponse)
def edit_user_profile(
    name: str,
    payload: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ProfileResponse:
    """Update only the fields present in the body."""
    user = get_user_by_name(db, name)
    require_ownership(user.id, actor, "update your own profile")
    return _edit_profile(db, user, payload)


@router.delete("/users/{name}/profile/delete", response_model=schemas.Message)
def delete_user_profile(
    name: str,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    user = get_user_by_name(db, name)
    require_ownership(user.id, actor, "delete your own profile")
    return _delete_profile(db, user)


# ============================================================================
# /profile (the acting user's own profile)
# ============================================================================


@router.get("/profile", response_model=schemas.ProfileResponse)
def get_my_profile(
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ProfileResponse:
    profile = _get_profile(db, actor)
    return schemas.ProfileResponse(
        message=f"Profile for user {actor.name} found",
        profile=schemas.Profile.model_validate(profile),
    )


@router.post(
    "/profile/create",
    response_model=schemas.ProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_my_profile(
    payload: schemas.ProfileCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ProfileResponse:
    return _create_profile(db, actor, payload)


@router.put("/profile/edit", response_model=schemas.ProfileResponse)
def edit_my_profile(
    payload: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ProfileResponse:
    return _edit_profile(db, actor, payload)


@router.delete("/profile/delete", response_model=schemas.Message)
def delete_my_profile(
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    return _delete_profile(db, actor)
