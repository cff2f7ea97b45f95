import logging
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dealership.exceptions import ConflictError, OperationFailedError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(db: Session, action: str, conflict_message: str = "The operation conflicts with existing data."):
    """
    Maps driver failures to domain errors after rolling the session back.

    IntegrityError (unique / foreign key) -> ConflictError
    any other SQLAlchemyError              -> OperationFailedError
    Nothing is retried.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.info("Constraint violation during %s: %s", action, e.orig)
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database failure during %s", action)
        raise OperationFailedError(f"Could not {action}.") from e


def normalized(column):
    """SQL form of UPPER(TRIM(column)) used for every status/role comparison."""
    return func.upper(func.trim(column))
