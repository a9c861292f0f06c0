"""Account service: password hashing, credential checks and registration."""

from __future__ import annotations

import logging

from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .. import models
from ..errors import BASIC_CHALLENGE, BadRequest, Unauthorized
from ..queries import commit, fetch_one, fetch_optional
from ..settings import BCRYPT_ROUNDS

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_user_by_name(db: Session, name: str) -> models.User:
    """Look up a user by name, 404 if there is none."""
    return fetch_one(
        db.query(models.User).filter(models.User.name == name),
        detail=f"No user found with name {name}",
    )


def check_user_can_authenticate(
    user: models.User, challenge: dict[str, str] = BASIC_CHALLENGE
) -> None:
    """
    Raise 401 if the account has been deactivated.

    The challenge matches how the caller was asked for credentials: Basic for
    name/password checks, Bearer for token-authenticated requests.
    """
    if not user.is_active:
        raise Unauthorized("Account deactivated", headers=challenge)


def authenticate(db: Session, name: str, password: str) -> models.User:
    """
    Verify a name/password pair and return the user.

    Raises:
        NotFound: no user has that name
        Unauthorized: wrong password (Basic challenge) or deactivated account
    """
    user = get_user_by_name(db, name)
    if not verify_password(password, user.password_hash):
        logger.info(f"Failed password check for user {name}")
        raise Unauthorized("Incorrect password", headers=BASIC_CHALLENGE)
    check_user_can_authenticate(user)
    return user


def register_user(db: Session, name: str, email: str, password: str) -> models.User:
    """
    Create a new account.

    Raises:
        BadRequest: the name or the email is already registered
    """
    duplicate_detail = f"User with name {name} or email {email} already exists"
    existing = fetch_optional(
        db.query(models.User).filter(
            or_(models.User.name == name, models.User.email == email)
        )
    )
    if existing:
        raise BadRequest(duplicate_detail)

    user = models.User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_admin=False,
        is_active=True,
        permissions=[],
    )
    db.add(user)
    # A concurrent registration can still win the race; the unique constraints catch it
    commit(db, conflict_detail=duplicate_detail)
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({name})")
    return user


def update_password(db: Session, user: models.User, new_password: str) -> None:
    user.password_hash = hash_password(new_password)
    commit(db)


def update_email(db: Session, user: models.User, new_email: str) -> None:
    """Change a user's email; 400 if another account already uses it."""
    taken_detail = f"Email {new_email} is already in use"
    existing = fetch_optional(
        db.query(models.User).filter(
            models.User.email == new_email, models.User.id != user.id
        )
    )
    if existing:
        raise BadRequest(taken_detail)
    user.email = new_email
    commit(db, conflict_detail=taken_detail)
