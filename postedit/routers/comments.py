"""Post comment endpoints.

Threads are one level deep: a reply must point at a top-level comment on
the same post.
"""

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
from .posts import get_user_post

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{name}", tags=["Comments"])


def _get_comment(db: Session, post: models.Post, comment_id: int) -> models.Comment:
    return fetch_one(
        db.query(models.Comment).filter(
            models.Comment.id == comment_id, models.Comment.post_id == post.id
        ),
        detail=f"No comment found with ID {comment_id} for post with ID {post.id}",
    )


@router.get("/posts/{id}/comments", response_model=schemas.CommentThreadListResponse)
def list_comments(
    name: str,
    id: int,
    db: Session = Depends(get_db),
) -> schemas.CommentThreadListResponse:
    """Top-level comments of a post, oldest first, each with its replies."""
    post = get_user_post(db, get_user_by_name(db, name), id)
    comments = fetch_all(
        db.query(models.Comment)
        .options(selectinload(models.Comment.replies))
        .filter(models.Comment.post_id == post.id, models.Comment.parent_id.is_(None))
        .order_by(models.Comment.id.asc())
    )
    return schemas.CommentThreadListResponse(
        message=f"Comments for post with ID {id} and user {name}",
        comments=[schemas.CommentThread.model_validate(c) for c in comments],
    )


@router.post(
    "/posts/{id}/comments/create",
    response_model=schemas.CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    name: str,
    id: int,
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.CommentResponse:
    """Comment on a post as the acting user."""
    post = get_user_post(db, get_user_by_name(db, name), id)
    comment = models.Comment(post_id=post.id, user_id=actor.id, content=payload.content)
    db.add(comment)
    commit(db)
    db.refresh(comment)
    return schemas.CommentResponse(
        message=f"Comment added to post with ID {id} and user {name}",
        comment=schemas.Comment.model_validate(comment),
    )


@router.get("/posts/{id}/comments/{commentId}", response_model=schemas.CommentResponse)
def read_comment(
    name: str,
    id: int,
    commentId: int,
    db: Session = Depends(get_db),
) -> schemas.CommentResponse:
    """Get a comment by its ID (also applies to replies)."""
    post = get_user_post(db, get_user_by_name(db, name), id)
    comment = _get_comment(db, post, commentId)
    return schemas.CommentResponse(
        message=f"Comment with ID {commentId} for post with ID {id} and user {name} found",
        comment=schemas.Comment.model_validate(comment),
    )


@router.post(
    "/posts/{id}/comments/{commentId}/reply",
    response_model=schemas.ReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
def reply_to_comment(
    name: str,
    id: int,
    commentId: int,
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.ReplyResponse:
    post = get_user_post(db, get_user_by_name(db, name), id)
    parent = _get_comment(db, post, commentId)
    if parent.parent_id is not None:
        raise BadRequest("Replies can only be made to top-level comments")

    reply = models.Comment(
        post_id=post.id, user_id=actor.id, parent_id=parent.id, content=payload.content
    )
    db.add(reply)
    commit(db)
    db.refresh(reply)
    return schemas.ReplyResponse(
        message=f"Reply added to comment with ID {commentId} for post with ID {id} and user {name}",
        reply=schemas.Comment.model_validate(reply),
    )


@router.get(
    "/posts/{id}/comments/{commentId}/replies",
    response_model=schemas.ReplyListResponse,
)
def list_replies(
    name: str,
    id: int,
    commentId: int,
    db: Session = Depends(get_db),
) -> schemas.ReplyListResponse:
    post = get_user_post(db, get_user_by_name(db, name), id)
    parent = _get_comment(db, post, commentId)
    replies = fetch_all(
        db.query(models.Comment)
        .filter(models.Comment.parent_id == parent.id)
        .order_by(models.Comment.id.asc())
    )
    return schemas.ReplyListResponse(
        message=f"Replies for comment with ID {commentId} for post with ID {id} and user {name}",
        replies=[schemas.Comment.model_validate(r) for r in replies],
    )


@router.put(
    "/posts/{id}/comments/{commentId}/edit",
    response_model=schemas.CommentResponse,
)
def edit_comment(
    name: str,
    id: int,
    commentId: int,
    payload: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.CommentResponse:
    post = get_user_post(db, get_user_by_name(db, name), id)
    comment = _get_comment(db, post, commentId)
    require_ownership(comment.user_id, actor, "edit your own comments")

    comment.content = payload.content
    comment.edited_at = datetime.now(timezone.utc)
    commit(db)
    db.refresh(comment)
    return schemas.CommentResponse(
        message=f"Updated comment with ID {commentId} for post with ID {id} and user {name}",
        comment=schemas.Comment.model_validate(comment),
    )


@router.delete(
    "/posts/{id}/comments/{commentId}/delete",
    response_model=schemas.Message,
)
def delete_comment(
    name: str,
    id: int,
    commentId: int,
    db: Session = Depends(get_db),
    actor: models.User = Depends(get_acting_user),
) -> schemas.Message:
    """Delete a comment and its replies."""
    post = get_user_post(db, get_user_by_name(db, name), id)
    comment = _get_comment(db, post, commentId)
    require_ownership(comment.user_id, actor, "delete your own comments")

    db.delete(comment)
    commit(db)
    return schemas.Message(
        message=f"Deleted comment with ID {commentId} for post with ID {id} and user {name}"
    )


# ============================================================================
# Comments written by a user, across all posts
# ============================================================================


@router.get("/post-comments", response_model=schemas.CommentListResponse)
def list_user_post_comments(
    name: str,
    db: Session = Depends(get_db),
) -> schemas.CommentListResponse:
    user = get_user_by_name(db, name)
    comments = fetch_all(
        db.query(models.Comment)
        .filter(models.Comment.user_id == user.id)
        .order_by(models.Comment.id.asc())
    )
    return schemas.CommentListResponse(
        message=f"Comments by user {name} found",
        comments=[schemas.Comment.model_validate(c) for c in comments],
    )


@router.get("/post-comments/{id}", response_model=schemas.CommentResponse)
def read_user_post_comment(
    name: str,
    id: int,
    db: Session = Depends(get_db),
) -> schemas.CommentResponse:
    user = get_user_by_name(db, name)
    comment = fetch_one(
        db.query(models.Comment).filter(
            models.Comment.id == id, models.Comment.user_id == user.id
        ),
        detail=f"No comment found with ID {id} by user {name}",
    )
    return schemas.CommentResponse(
        message=f"Comment with ID {id} by user {name} found",
        comment=schemas.Comment.model_validate(comment),
    )
