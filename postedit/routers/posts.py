"""Post endpoints.

Posts are reachable directly by id (``/posts/{id}``) and under their
author (``/users/{name}/posts/{id}``). In the second form a post that
belongs to somebody else is reported as missing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_acting_user, require_ownership
from ..db import get_db
from ..errors import BadRequest
from ..queries import commit, fetch_all, fetch_one
from ..services.accounts import get_user_by_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])


def get_post(db: Session, post_id: int) -> models.Post:
    return fetch_one(
        db.query(models.Post).filter(models.Post.id == post_id),
        detail=f"No post found with ID {post_id}",
    )


def get_user_post(db: Session, user: models.User, post_id: int) -> models.Post:
    return fetch_one(
        db.query(models.Post).filter(
            models.Post.id == post_id, models.Post.user_id == user.id
        ),
        detail=f"No post found with ID {post_id} for user {user.name}",
    )


def _create_post(
    db: Session, author: models.User, payload: schemas.PostCreate
) -> schemas.PostResponse:
    post = models.Post(user_id=author.id, title=payload.title, content=payload.content)
    db.add(post)
    commit(db)
    db.refresh(post)
    logger.info(f"User {author.id} created post {post.id}")
    return schemas.PostResponse(
        message=f"Created post with title {post.title}",
        post=schemas.Post.model_validate(post),
    )


def _edit_post(
    db: Session, post: models.Post, actor: models.User, payload: schemas.PostUpdate
) -> schemas.PostResponse:
    require_ownership(post.user_id, actor, "edit your own posts")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequest("No fields to update")
    for field, value in changes.items():
        setattr(post, field, value)
    post.edited_at = datetime.now(timezone.utc)
    commit(db)
    db.refresh(post)
    return schemas.PostResponse(
        message=f"Updated post with ID {post.id}",
        post=schemas.Post.model_validate(post),
    )


def _delete_post(db: Session, post: models.Post, actor: models.User) -> schemas.Message:
    require_ownership(post.user_id, actor, "delete your own posts")
    post_id = post.id
    db.delete(post)
    commit(db)
    logger.info(f"User {actor.id} deleted post {post_id}")
    return schemas.Message(message=f"Deleted post with ID {post_id}")


# ============================================================================
# /posts
# ============================================================================


@router.get("/posts", response_model=schemas.PostListResponse)
def list_posts(db: Session = Depends(get_db)) -> schemas.PostListResponse:
    posts = fetch_all(
        db.query(models.Post).order_by(models.Post.created_at.desc(), models.Post.id.desc())
    )
    return schemas.PostListResponse(
        message="List of posts",
        posts=[schemas.Post.model_validate(p) for p in posts],
    )


@router.get("/posts/{id}", response_model=schemas.PostResponse)
def read_post(id: int, db: Session = Depends(get_db)) -> schemas.PostResponse:
    post = get_post(db, id)
    return schemas.PostResponse(
        message=f"Post with ID {id} found",
        post=schemas.Post.model_validate(post),
    )


@router.post(
    "/posts/create",
    response_model=schemas.PostResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_post(
    payload: schemas.PostCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.PostResponse:
    """Create a post authored by the acting user."""
    return _create_post(db, actor, payload)


@router.put("/posts/{id}/edit", response_model=schemas.PostResponse)
def edit_post(
    id: int,
    payload: schemas.PostUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.PostResponse:
    return _edit_post(db, get_post(db, id), actor, payload)


@router.delete("/posts/{id}/delete", response_model=schemas.Message)
def delete_post(
    id: int,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    """Delete a post together with its comments."""
    return _delete_post(db, get_post(db, id), actor)


# ============================================================================
# /users/{name}/posts
# ============================================================================


@router.post(
    "/users/{name}/posts/create",
    response_model=schemas.PostResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user_post(
    name: str,
    payload: schemas.PostCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.PostResponse:
    user = get_user_by_name(db, name)
    require_ownership(user.id, actor, "create posts as yourself")
    return _create_post(db, user, payload)


@router.get("/users/{name}/posts/{id}", response_model=schemas.PostResponse)
def read_user_post(name: str, id: int, db: Session = Depends(get_db)) -> schemas.PostResponse:
    user = get_user_by_name(db, name)
    post = get_user_post(db, user, id)
    return schemas.PostResponse(
        message=f"Post with ID {id} for user {name} found",
        post=schemas.Post.model_validate(post),
    )


@router.put("/users/{name}/posts/{id}/edit", response_model=schemas.PostResponse)
def edit_user_post(
    name: str,
    id: int,
    payload: schemas.PostUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.PostResponse:
    user = get_user_by_name(db, name)
    return _edit_post(db, get_user_post(db, user, id), actor, payload)


@router.delete("/users/{name}/posts/{id}/delete", response_model=schemas.Message)
def delete_user_post(
    name: str,
    id: int,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    user = get_user_by_name(db, name)
    return _delete_post(db, get_user_post(db, user, id), actor)
