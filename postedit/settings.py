"""Centralized environment-driven settings.

Keep this module lightweight: no app imports, to avoid circular deps.
A .env file in the working directory is loaded before anything is read.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

# Token signing. Inline PEM values win over the key files.
JWT_ALGORITHM = "RS256"
JWT_PRIVATE_KEY_PATH: str = os.getenv("JWT_PRIVATE_KEY_PATH", "private.key")
JWT_PUBLIC_KEY_PATH: str = os.getenv("JWT_PUBLIC_KEY_PATH", "public.key")
JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = _int_env("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", 60)

# bcrypt cost factor for password hashes
BCRYPT_ROUNDS: int = _int_env("BCRYPT_ROUNDS", 10)

CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost").split(",")
    if origin.strip()
]

RUN_MIGRATIONS: bool = _bool_env("RUN_MIGRATIONS", True)

# Optional admin account created (or promoted) at startup
ADMIN_NAME: str | None = os.getenv("ADMIN_NAME") or None
ADMIN_EMAIL: str | None = os.getenv("ADMIN_EMAIL") or None
ADMIN_PASSWORD: str | None = os.getenv("ADMIN_PASSWORD") or None
