from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(ApiModel):
    message: str


# ============================================================================
# HEALTH & SYSTEM
# ============================================================================


class HealthResponse(ApiModel):
    """Health check response."""

    status: Literal["ok"] = "ok"
    uptime_s: float | None = None


class PublicKeyResponse(ApiModel):
    message: str
    public_key: str


# ============================================================================
# USER SCHEMAS
# ============================================================================


class UserPublic(ApiModel):
    """Public user fields. Never includes the email or the password hash."""

    id: int
    name: str
    is_admin: bool = False
    created_at: datetime | None = None


class UserFull(UserPublic):
    """Full user record, shown to the user themselves."""

    email: str
    is_active: bool = True
    permissions: list[str] = Field(default_factory=list)


class UserResponse(ApiModel):
    message: str
    user: UserPublic


class UserListResponse(ApiModel):
    message: str
    users: list[UserPublic]


class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=72)


class LoginRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(ApiModel):
    """Issued token plus the key that verifies it."""

    message: str
    id: int
    token: str
    public_key: str


class SetPasswordRequest(ApiModel):
    old_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)


class SetEmailRequest(ApiModel):
    password: str = Field(..., min_length=1, max_length=72)
    new_email: str = Field(..., min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+$")


class DeleteAccountRequest(ApiModel):
    password: str = Field(..., min_length=1, max_length=72)


class MeResponse(ApiModel):
    message: str
    user: UserFull
    acting_as: UserPublic


# ============================================================================
# PROFILE SCHEMAS
# ============================================================================


class ProfileCreate(ApiModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    bio: str | None = None
    about: str | None = None
    profile_picture_url: str | None = Field(None, max_length=2083)


class ProfileUpdate(ApiModel):
    """Partial update: only the fields present in the body are written."""

    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = None
    about: str | None = None
    profile_picture_url: str | None = Field(None, max_length=2083)


class Profile(ApiModel):
    id: int
    user_id: int
    display_name: str
    bio: str | None = None
    about: str | None = None
    profile_picture_url: str | None = None
    created_at: datetime | None = None


class ProfileResponse(ApiModel):
    message: str
    profile: Profile


# ============================================================================
# POST SCHEMAS
# ============================================================================


class PostCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class PostUpdate(ApiModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)


class Post(ApiModel):
    id: int
    user_id: int
    title: str
    content: str
    created_at: datetime | None = None
    edited_at: datetime | None = None


class PostResponse(ApiModel):
    message: str
    post: Post


class PostListResponse(ApiModel):
    message: str
    posts: list[Post]


# ============================================================================
# COMMENT SCHEMAS
# ============================================================================


class CommentCreate(ApiModel):
    content: str = Field(..., min_length=1, max_length=10000)


class CommentUpdate(ApiModel):
    content: str = Field(..., min_length=1, max_length=10000)


class Comment(ApiModel):
    """Comment on a post."""

    id: int
    post_id: int
    user_id: int
    parent_id: int | None = None
    content: str
    created_at: datetime | None = None
    edited_at: datetime | None = None


class CommentThread(Comment):
    """Top-level comment with its replies."""

    replies: list[Comment] = Field(default_factory=list)


class CommentResponse(ApiModel):
    message: str
    comment: Comment


class ReplyResponse(ApiModel):
    message: str
    reply: Comment


class CommentListResponse(ApiModel):
    message: str
    comments: list[Comment]


class CommentThreadListResponse(ApiModel):
    message: str
    comments: list[CommentThread]


class ReplyListResponse(ApiModel):
    message: str
    replies: list[Comment]


class UserComment(ApiModel):
    """Comment on a user's page."""

    id: int
    user_page_id: int
    user_id: int
    parent_id: int | None = None
    content: str
    created_at: datetime | None = None
    edited_at: datetime | None = None


class UserCommentThread(UserComment):
    replies: list[UserComment] = Field(default_factory=list)


class UserCommentResponse(ApiModel):
    message: str
    comment: UserComment


class UserReplyResponse(ApiModel):
    message: str
    reply: UserComment


class UserCommentThreadListResponse(ApiModel):
    message: str
    comments: list[UserCommentThread]


class UserReplyListResponse(ApiModel):
    message: str
    replies: list[UserComment]
