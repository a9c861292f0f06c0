"""User page ("guestbook") comment endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from ..auth import get_acting_user, require_ownership
from ..db import get_db
from ..errors import BadRequest
from ..queries import commit, fetch_all, fetch_one
from ..services.accounts import get_user_by_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{name}/user-comments", tags=["User comments"])


def _get_page_comment(db: Session, page_owner: models.User, comment_id: int) -> models.UserComment:
    return fetch_one(
        db.query(models.UserComment).filter(
            models.UserComment.id == comment_id,
            models.UserComment.user_page_id == page_owner.id,
        ),
        detail=f"No comment found with ID {comment_id} for user {page_owner.name}",
    )


@router.get("", response_model=schemas.UserCommentThreadListResponse)
def list_page_comments(
    name: str,
    db: Session = Depends(get_db),
) -> schemas.UserCommentThreadListResponse:
    page_owner = get_user_by_name(db, name)
    comments = fetch_all(
        db.query(models.UserComment)
        .options(selectinload(models.UserComment.replies))
        .filter(
            models.UserComment.user_page_id == page_owner.id,
            models.UserComment.parent_id.is_(None),
        )
        .order_by(models.UserComment.id.asc())
    )
    return schemas.UserCommentThreadListResponse(
        message=f"Comments for user {name} found",
        comments=[schemas.UserCommentThread.model_validate(c) for c in comments],
    )


@router.post(
    "/create",
    response_model=schemas.UserCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_page_comment(
    name: str,
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.UserCommentResponse:
    """Leave a comment on a user's page as the acting user."""
    page_owner = get_user_by_name(db, name)
    comment = models.UserComment(
        user_page_id=page_owner.id, user_id=actor.id, content=payload.content
    )
    db.add(comment)
    commit(db)
    db.refresh(comment)
    return schemas.UserCommentResponse(
        message=f"Comment added to user {name}",
        comment=schemas.UserComment.model_validate(comment),
    )


@router.get("/{id}", response_model=schemas.UserCommentResponse)
def read_page_comment(
    name: str,
    id: int,
    db: Session = Depends(get_db),
) -> schemas.UserCommentResponse:
    comment = _get_page_comment(db, get_user_by_name(db, name), id)
    return schemas.UserCommentResponse(
        message=f"Comment with ID {id} for user {name} found",
        comment=schemas.UserComment.model_validate(comment),
    )


@router.post(
    "/{id}/reply",
    response_model=schemas.UserReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
def reply_to_page_comment(
    name: str,
    id: int,
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.UserReplyResponse:
    page_owner = get_user_by_name(db, name)
    parent = _get_page_comment(db, page_owner, id)
    if parent.parent_id is not None:
        raise BadRequest("Replies can only be made to top-level comments")

    reply = models.UserComment(
        user_page_id=page_owner.id,
        user_id=actor.id,
        parent_id=parent.id,
        content=payload.content,
    )
    db.add(reply)
    commit(db)
    db.refresh(reply)
    return schemas.UserReplyResponse(
        message=f"Reply added to comment with ID {id} for user {name}",
        reply=schemas.UserComment.model_validate(reply),
    )


@router.get("/{id}/replies", response_model=schemas.UserReplyListResponse)
def list_page_comment_replies(
    name: str,
    id: int,
    db: Session = Depends(get_db),
) -> schemas.UserReplyListResponse:
    parent = _get_page_comment(db, get_user_by_name(db, name), id)
    replies = fetch_all(
        db.query(models.UserComment)
        .filter(models.UserComment.parent_id == parent.id)
        .order_by(models.UserComment.id.asc())
    )
    return schemas.UserReplyListResponse(
        message=f"Replies for comment with ID {id} for user {name}",
        replies=[schemas.UserComment.model_validate(r) for r in replies],
    )


@router.put("/{id}/edit", response_model=schemas.UserCommentResponse)
def edit_page_comment(
    name: str,
    id: int,
    payload: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.UserCommentResponse:
    comment = _get_page_comment(db, get_user_by_name(db, name), id)
    require_ownership(comment.user_id, actor, "edit your own comments")

    comment.content = payload.content
    comment.edited_at = datetime.now(timezone.utc)
    commit(db)
    db.refresh(comment)
    return schemas.UserCommentResponse(
        message=f"Comment with ID {id} for user {name} updated",
        comment=schemas.UserComment.model_validate(comment),
    )


@router.delete("/{id}/delete", response_model=schemas.Message)
def delete_page_comment(
    name: str,
    id: int,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    comment = _get_page_comment(db, get_user_by_name(db, name), id)
    require_ownership(comment.user_id, actor, "delete your own comments")

    db.delete(comment)
    commit(db)
    logger.info(f"User {actor.id} deleted comment {id} on the page of {name}")
    return schemas.Message(message=f"Deleted comment with ID {id} and user {name}")
