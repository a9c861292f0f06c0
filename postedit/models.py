from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .db import Base


# ============================================================================
# ACCOUNTS
# ============================================================================


class User(Base):
    """User account with credentials and access flags."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(100), nullable=False)

    # Access flags
    is_admin = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    permissions = Column(JSON, nullable=False, default=list)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships. The database cascades too; passive_deletes lets it do the work.
    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all",
        passive_deletes=True,
    )
    posts = relationship(
        "Post", back_populates="author", cascade="all", passive_deletes=True
    )
    comments = relationship(
        "Comment",
        back_populates="author",
        cascade="all",
        passive_deletes=True,
    )
    authored_user_comments = relationship(
        "UserComment",
        back_populates="author",
        foreign_keys="UserComment.user_id",
        cascade="all",
        passive_deletes=True,
    )
    page_comments = relationship(
        "UserComment",
        back_populates="user_page",
        foreign_keys="UserComment.user_page_id",
        cascade="all",
        passive_deletes=True,
    )


class Profile(Base):
    """Public profile, at most one per user."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    display_name = Column(String(100), nullable=False)
    bio = Column(Text, nullable=True)
    about = Column(Text, nullable=True)
    profile_picture_url = Column(String(2083), nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    user = relationship("User", back_populates="profile")


# ============================================================================
# CONTENT
# ============================================================================


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)

    author = relationship("User", back_populates="posts")
    comments = relationship(
        "Comment", back_populates="post", cascade="all", passive_deletes=True
    )


class Comment(Base):
    """Comment on a post. Replies point at a top-level comment through parent_id."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id = Column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)

    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        cascade="all",
        passive_deletes=True,
        order_by="Comment.id",
    )

    __table_args__ = (Index("ix_comments_post_parent", post_id, parent_id),)


class UserComment(Base):
    """Guestbook comment left on a user's page."""

    __tablename__ = "user_comments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_page_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id = Column(
        Integer,
        ForeignKey("user_comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)

    user_page = relationship(
        "User", back_populates="page_comments", foreign_keys=[user_page_id]
    )
    author = relationship(
        "User", back_populates="authored_user_comments", foreign_keys=[user_id]
    )
    parent = relationship("UserComment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "UserComment",
        back_populates="parent",
        cascade="all",
        passive_deletes=True,
        order_by="UserComment.id",
    )

    __table_args__ = (Index("ix_user_comments_page_parent", user_page_id, parent_id),)
