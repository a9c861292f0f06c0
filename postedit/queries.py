"""Query execution helpers with uniform error-to-HTTP mapping.

Route handlers build ORM queries and hand them here. A lookup that finds
nothing becomes a ``NotFound`` (or whatever status/detail the caller asks
for); a driver failure is logged with its traceback and becomes an
``InternalError``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from .errors import BadRequest, InternalError, NotFound

logger = logging.getLogger(__name__)


def db_error(exc: Exception) -> InternalError:
    """Log a driver error and return the exception to raise in its place."""
    logger.error(f"Error executing query: {exc}", exc_info=exc)
    return InternalError()


def fetch_one(
    query: Query,
    detail: str = "Not found",
    status_code: int | None = None,
) -> Any:
    """Return the first row of ``query`` or fail.

    An empty result raises ``NotFound`` with ``detail``, or a plain
    ``HTTPException`` when the caller passes its own ``status_code``.
    """
    try:
        row = query.first()
    except SQLAlchemyError as exc:
        raise db_error(exc) from exc

    if row is None:
        if status_code is None:
            raise NotFound(detail)
        raise HTTPException(status_code=status_code, detail=detail)
    return row


def fetch_optional(query: Query) -> Any | None:
    """Return the first row of ``query`` or ``None``."""
    try:
        return query.first()
    except SQLAlchemyError as exc:
        raise db_error(exc) from exc


def fetch_all(query: Query) -> list[Any]:
    try:
        return query.all()
    except SQLAlchemyError as exc:
        raise db_error(exc) from exc


def commit(db: Session, conflict_detail: str | None = None) -> None:
    """Commit the session.

    A constraint violation becomes a 400 with ``conflict_detail`` when the
    caller expects one (duplicate names, existing profile); any other failure
    is a 500.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_detail is not None:
            logger.info(f"Constraint violation: {exc.orig}")
            raise BadRequest(conflict_detail) from exc
        raise db_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise db_error(exc) from exc
