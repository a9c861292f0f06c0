"""Authentication endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_acting_user, get_current_user, issue_token, public_key_pem
from ..db import get_db
from ..services.accounts import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/token", response_model=schemas.TokenResponse)
def create_token(
    payload: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    """
    Exchange a name and password for an access token.

    Same checks as /users/login: 404 for an unknown name, 401 with a Basic
    challenge for a wrong password.
    """
    user = authenticate(db, payload.name, payload.password)
    logger.info(f"Issued token for user {user.id} via /auth/token")
    return schemas.TokenResponse(
        message=f"Token issued for user {user.name}",
        id=user.id,
        token=issue_token(user),
        public_key=public_key_pem(),
    )


@router.post("/refresh", response_model=schemas.TokenResponse)
def refresh_token(
    current_user: models.User = Depends(get_current_user),
) -> schemas.TokenResponse:
    """Trade a still-valid token for a fresh one."""
    return schemas.TokenResponse(
        message=f"Token refreshed for user {current_user.name}",
        id=current_user.id,
        token=issue_token(current_user),
        public_key=public_key_pem(),
    )


@router.get("/me", response_model=schemas.MeResponse)
def get_me(
    current_user: models.User = Depends(get_current_user),
    acting_user: models.User = Depends(get_acting_user),
) -> schemas.MeResponse:
    """The verified user and the identity this request would act as."""
    return schemas.MeResponse(
        message=f"Authenticated as {current_user.name}",
        user=schemas.UserFull.model_validate(current_user),
        acting_as=schemas.UserPublic.model_validate(acting_user),
    )
