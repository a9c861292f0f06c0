from __future__ import annotations

import logging

from . import models
from .db import SessionLocal
from .queries import commit, fetch_optional
from .services.accounts import hash_password
from .settings import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD

logger = logging.getLogger(__name__)


def ensure_seed_data() -> None:
    """
    Make sure the configured admin account exists.

    Driven by ADMIN_NAME, ADMIN_EMAIL and ADMIN_PASSWORD. When the account
    already exists it is promoted to admin; its password is left alone.
    Does nothing unless all three are set. Raises RuntimeError when the email
    is already taken by a differently named account.
    """
    if not (ADMIN_NAME and ADMIN_EMAIL and ADMIN_PASSWORD):
        logger.info("ensure_seed_data: No admin account configured, nothing to seed.")
        return

    db = SessionLocal()
    try:
        user = fetch_optional(db.query(models.User).filter(models.User.name == ADMIN_NAME))
        if user is None:
            email_owner = fetch_optional(
                db.query(models.User).filter(models.User.email == ADMIN_EMAIL)
            )
            if email_owner is not None:
                message = (
                    f"ADMIN_EMAIL {ADMIN_EMAIL} already belongs to user {email_owner.name}; "
                    f"set ADMIN_NAME to {email_owner.name} or pick another email"
                )
                logger.error(f"ensure_seed_data: {message}")
                raise RuntimeError(message)

            user = models.User(
                name=ADMIN_NAME,
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                is_admin=True,
                is_active=True,
                permissions=[],
            )
            db.add(user)
            commit(db)
            logger.info(f"ensure_seed_data: Created admin account {ADMIN_NAME}.")
        elif not user.is_admin:
            user.is_admin = True
            commit(db)
            logger.info(f"ensure_seed_data: Promoted {ADMIN_NAME} to admin.")
        else:
            logger.info(f"ensure_seed_data: Admin account {ADMIN_NAME} already present.")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level="INFO")
    ensure_seed_data()
