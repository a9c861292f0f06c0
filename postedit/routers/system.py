"""System endpoints (root, health, public key)."""

from __future__ import annotations

import time

from fastapi import APIRouter

from .. import schemas
from ..auth import public_key_pem

router = APIRouter(prefix="", tags=["System"])

# Global startup time for uptime calculation
_STARTUP_TIME = time.time()


@router.get("/", response_model=schemas.Message)
def api_root() -> schemas.Message:
    return schemas.Message(message="API Root")


@router.get("/health", response_model=schemas.HealthResponse)
def get_health() -> schemas.HealthResponse:
    """Liveness check."""
    uptime_s = time.time() - _STARTUP_TIME
    return schemas.HealthResponse(status="ok", uptime_s=uptime_s)


@router.get("/public-key", response_model=schemas.PublicKeyResponse)
def get_public_key() -> schemas.PublicKeyResponse:
    """The PEM key that verifies every token this API issues."""
    return schemas.PublicKeyResponse(message="Public key retrieved", public_key=public_key_pem())
