from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path

import jwt
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import models
from .db import get_db
from .errors import BEARER_CHALLENGE, Forbidden, InvalidToken, NotFound, Unauthorized
from .queries import fetch_optional
from .services.accounts import check_user_can_authenticate
from .settings import (
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_PRIVATE_KEY_PATH,
    JWT_PUBLIC_KEY_PATH,
)

logger = logging.getLogger(__name__)

# Security scheme for Bearer token
oauth2_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# SIGNING KEYS
# ============================================================================


def _read_key(env_name: str, path: str) -> str:
    inline = os.getenv(env_name)
    if inline:
        return inline
    key_path = Path(path)
    if not key_path.is_file():
        raise RuntimeError(
            f"{env_name} is not set and no key file exists at {key_path}. "
            "Generate a key pair with: python scripts/generate_keys.py"
        )
    return key_path.read_text(encoding="utf8")


@lru_cache(maxsize=1)
def _private_key() -> str:
    # Only this module signs tokens; the private key never leaves it.
    return _read_key("JWT_PRIVATE_KEY", JWT_PRIVATE_KEY_PATH)


@lru_cache(maxsize=1)
def public_key_pem() -> str:
    """The PEM public key clients can use to verify tokens themselves."""
    return _read_key("JWT_PUBLIC_KEY", JWT_PUBLIC_KEY_PATH)


# ============================================================================
# TOKENS
# ============================================================================


@dataclass(frozen=True)
class TokenClaims:
    """Verified token payload identifying the requester."""

    user_id: int
    name: str


def issue_token(user: models.User, expires_in_seconds: int | None = None) -> str:
    """
    Create a signed access token for a user.

    The payload carries the user's name and id and expires after
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES unless told otherwise.
    """
    if expires_in_seconds is None:
        expires_in_seconds = JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60

    now = datetime.now(timezone.utc)
    payload = {
        "name": user.name,
        "id": user.id,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in_seconds),
    }
    return jwt.encode(payload, _private_key(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> TokenClaims:
    """
    Verify a token's signature and expiry and return its claims.

    Raises InvalidToken for anything that does not check out.
    """
    try:
        payload = jwt.decode(
            token,
            public_key_pem(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError:
        raise InvalidToken("Invalid token")

    user_id = payload.get("id")
    name = payload.get("name")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(name, str):
        raise InvalidToken("Invalid token")
    return TokenClaims(user_id=user_id, name=name)


# ============================================================================
# REQUEST IDENTITY
# ============================================================================


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
) -> TokenClaims:
    """Claims from the request's bearer token."""
    if not credentials:
        raise Unauthorized("Missing token")
    return decode_token(credentials.credentials)


def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> models.User:
    """The verified user behind the bearer token."""
    user = fetch_optional(db.query(models.User).filter(models.User.id == claims.user_id))
    if not user:
        raise InvalidToken("User not found")
    check_user_can_authenticate(user, challenge=BEARER_CHALLENGE)
    return user


def resolve_acting_identity(
    db: Session,
    user: models.User,
    acting_as_user_id: int | None,
) -> models.User:
    """
    Decide who a request acts as.

    An admin who passes ``acting_as_user_id`` acts as that user. Everyone
    else, and an admin who passes nothing, acts as themselves. The parameter
    is ignored for non-admins.
    """
    if acting_as_user_id is None or not user.is_admin:
        return user
    if acting_as_user_id == user.id:
        return user

    target = fetch_optional(db.query(models.User).filter(models.User.id == acting_as_user_id))
    if not target:
        raise NotFound(f"No user found with ID {acting_as_user_id}")
    logger.info(f"Admin {user.id} ({user.name}) acting as user {target.id} ({target.name})")
    return target


def get_acting_user(
    acting_as_user_id: int | None = Query(
        None,
        alias="actingAsUserId",
        description="Admins only: perform the request as this user",
    ),
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> models.User:
    """The identity the request acts as, after impersonation is resolved."""
    return resolve_acting_identity(db, user, acting_as_user_id)


def require_ownership(owner_id: int, actor: models.User, action: str) -> None:
    """
    Require that the acting user owns the resource.

    Raises 403 Forbidden with "You can only <action>" otherwise.
    """
    if owner_id != actor.id:
        raise Forbidden(f"You can only {action}")
