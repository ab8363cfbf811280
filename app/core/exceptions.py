# app/core/exceptions.py
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError


class CRMError(HTTPException):
    """Base for the outcomes a service operation may report to its caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(CRMError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class ConflictError(CRMError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InternalFailure(CRMError):
    """
    Unexpected storage or transaction error.

    The client only ever sees the generic detail; `reason` keeps the
    underlying message for the logs and for development mode responses.
    """

    default_detail = "Internal server error"

    def __init__(self, reason: str = ""):
        super().__init__()
        self.reason = reason


UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION or getattr(orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    message = str(orig if orig is not None else exc).lower()
    return "unique" in message or "duplicate" in message


def storage_failure(exc: Exception, action: str, logger, conflict_detail: str | None = None) -> CRMError:
    """
    Map an error caught at a service boundary onto the error taxonomy.

    A unique violation raised by the store itself (a lost check-then-insert
    race) becomes the same Conflict the pre-check would have reported.
    """
    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        logger.info("Unique constraint rejected %s: %s", action, exc.orig)
        return ConflictError(conflict_detail)
    logger.exception("Failed to %s", action)
    return InternalFailure(str(getattr(exc, "orig", None) or exc))
