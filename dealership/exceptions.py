import enum
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND_OR_FORBIDDEN = "not_found_or_forbidden"
    GUARD_VIOLATED = "guard_violated"
    CONFLICT = "conflict"
    OPERATION_FAILED = "operation_failed"
    VALIDATION = "validation"


STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND_OR_FORBIDDEN: status.HTTP_404_NOT_FOUND,
    ErrorKind.GUARD_VIOLATED: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.OPERATION_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.VALIDATION: 422,
}


class DealershipError(Exception):
    """Base class for all domain errors raised by repositories and routers."""
    kind: ErrorKind = ErrorKind.OPERATION_FAILED

    def __init__(self, message: str = "Operation failed."):
        super().__init__(message)
        self.message = message


class NotFoundOrForbiddenError(DealershipError):
    """A scoped lookup returned no row: the id is wrong or the caller has no rights on it."""
    kind = ErrorKind.NOT_FOUND_OR_FORBIDDEN


class GuardViolatedError(DealershipError):
    """A guarded UPDATE matched no row (wrong owner or status not editable)."""
    kind = ErrorKind.GUARD_VIOLATED


class ConflictError(DealershipError):
    """A unique or foreign-key constraint rejected the statement."""
    kind = ErrorKind.CONFLICT


class OperationFailedError(DealershipError):
    """The database could not be reached or failed for a reason outside the domain."""
    kind = ErrorKind.OPERATION_FAILED


class DomainValidationError(DealershipError):
    """Input was well formed but broke a business rule."""
    kind = ErrorKind.VALIDATION


async def dealership_exception_handler(request: Request, exc: DealershipError):
    if exc.kind == ErrorKind.OPERATION_FAILED:
        logger.error("Operation failed on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content={"error": exc.kind.value, "message": exc.message},
    )
