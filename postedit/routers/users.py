"""User account endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import issue_token, public_key_pem
from ..db import get_db
from ..queries import commit, fetch_all
from ..services.accounts import (
    authenticate,
    get_user_by_name,
    register_user,
    update_email,
    update_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=schemas.UserListResponse)
def list_users(db: Session = Depends(get_db)) -> schemas.UserListResponse:
    users = fetch_all(db.query(models.User).order_by(models.User.id.asc()))
    return schemas.UserListResponse(
        message="List of users",
        users=[schemas.UserPublic.model_validate(u) for u in users],
    )


@router.post(
    "/register",
    response_model=schemas.TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: schemas.RegisterRequest,
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    """
    Register a new account and log it in.

    Returns 400 if the name or the email is already taken.
    """
    user = register_user(db, payload.name, payload.email, payload.password)
    return schemas.TokenResponse(
        message=f"User with name {user.name} and email {user.email} registered",
        id=user.id,
        token=issue_token(user),
        public_key=public_key_pem(),
    )


@router.post("/login", response_model=schemas.TokenResponse)
def login(
    payload: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    """Log in with name and password."""
    user = authenticate(db, payload.name, payload.password)
    logger.info(f"User {user.id} logged in")
    return schemas.TokenResponse(
        message=f"User with name {user.name} logged in",
        id=user.id,
        token=issue_token(user),
        public_key=public_key_pem(),
    )


@router.get("/{name}", response_model=schemas.UserResponse)
def get_user(name: str, db: Session = Depends(get_db)) -> schemas.UserResponse:
    user = get_user_by_name(db, name)
    return schemas.UserResponse(
        message=f"User with name {name} found",
        user=schemas.UserPublic.model_validate(user),
    )


@router.post("/{name}/set-password", response_model=schemas.Message)
def set_password(
    name: str,
    payload: schemas.SetPasswordRequest,
    db: Session = Depends(get_db),
) -> schemas.Message:
    """Change a password. The old password is the credential."""
    user = authenticate(db, name, payload.old_password)
    update_password(db, user, payload.new_password)
    logger.info(f"Password changed for user {user.id}")
    return schemas.Message(message=f"Password for user {name} updated")


@router.post("/{name}/set-email", response_model=schemas.UserResponse)
def set_email(
    name: str,
    payload: schemas.SetEmailRequest,
    db: Session = Depends(get_db),
) -> schemas.UserResponse:
    user = authenticate(db, name, payload.password)
    update_email(db, user, payload.new_email)
    return schemas.UserResponse(
        message=f"Email for user {name} updated",
        user=schemas.UserPublic.model_validate(user),
    )


@router.delete("/{name}/delete", response_model=schemas.Message)
def delete_user(
    name: str,
    payload: schemas.DeleteAccountRequest,
    db: Session = Depends(get_db),
) -> schemas.Message:
    """
    Delete an account after confirming its password.

    The profile, posts and comments of the user go with it.
    """
    user = authenticate(db, name, payload.password)
    user_id = user.id
    db.delete(user)
    commit(db)
    logger.info(f"Deleted user {user_id} ({name})")
    return schemas.Message(message=f"User with name {name} deleted")


@router.get("/{name}/posts", response_model=schemas.PostListResponse)
def list_user_posts(name: str, db: Session = Depends(get_db)) -> schemas.PostListResponse:
    user = get_user_by_name(db, name)
    posts = fetch_all(
        db.query(models.Post)
        .filter(models.Post.user_id == user.id)
        .order_by(models.Post.created_at.desc(), models.Post.id.desc())
    )
    return schemas.PostListResponse(
        message=f"Posts for user {name} found",
        posts=[schemas.Post.model_validate(p) for p in posts],
    )
