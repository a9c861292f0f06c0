"""HTTP error types raised by handlers and helpers.

Each one is an ``HTTPException`` so FastAPI renders it as ``{"detail": ...}``
without extra handlers. ``InternalError`` always carries the same generic
detail; the real cause goes to the log, never to the client.
"""

from __future__ import annotations

from fastapi import HTTPException, status

BEARER_CHALLENGE = {"WWW-Authenticate": 'Bearer realm="User Visible Realm"'}
BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="User Visible Realm"'}


class BadRequest(HTTPException):
    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    """Credentials are missing or wrong."""

    def __init__(
        self,
        detail: str = "Missing token",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers=headers if headers is not None else BEARER_CHALLENGE,
        )


class InvalidToken(Unauthorized):
    """A bearer token was supplied but failed verification."""

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(detail=detail, headers=BEARER_CHALLENGE)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InternalError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
