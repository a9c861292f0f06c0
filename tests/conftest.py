from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

# Settings are read at import time, so the environment goes first.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="postedit-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["JWT_PRIVATE_KEY_PATH"] = str(_TMP_DIR / "private.key")
os.environ["JWT_PUBLIC_KEY_PATH"] = str(_TMP_DIR / "public.key")
for _name in ("JWT_PRIVATE_KEY", "JWT_PUBLIC_KEY", "ADMIN_NAME", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
    os.environ.pop(_name, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from postedit.keys import write_key_pair  # noqa: E402

write_key_pair(os.environ["JWT_PRIVATE_KEY_PATH"], os.environ["JWT_PUBLIC_KEY_PATH"])

from postedit import models  # noqa: E402
from postedit.auth import issue_token  # noqa: E402
from postedit.db import Base, SessionLocal, engine  # noqa: E402
from postedit.main import app  # noqa: E402
from postedit.services.accounts import hash_password  # noqa: E402

PASSWORD = "correct-horse"


@pytest.fixture(autouse=True)
def fresh_schema() -> Generator[None, None, None]:
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture()
def client() -> TestClient:
    # No context manager: the lifespan would run migrations against the test database
    return TestClient(app)


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    """Create a database session for testing."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def make_user(db: Session) -> Callable[..., models.User]:
    def _make_user(name: str, is_admin: bool = False, is_active: bool = True) -> models.User:
        user = models.User(
            name=name,
            email=f"{name}@example.com",
            password_hash=hash_password(PASSWORD),
            is_admin=is_admin,
            is_active=is_active,
            permissions=[],
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user) -> models.User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user) -> models.User:
    return make_user("bob")


@pytest.fixture()
def admin(make_user) -> models.User:
    return make_user("root", is_admin=True)


@pytest.fixture()
def auth_headers() -> Callable[[models.User], dict[str, str]]:
    """Bearer header for a user."""

    def _auth_headers(user: models.User) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _auth_headers


@pytest.fixture()
def password() -> str:
    """Password of every user made by make_user."""
    return PASSWORD
