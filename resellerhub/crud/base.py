import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from resellerhub.core.exceptions import ConflictError, GatewayError

logger = logging.getLogger(__name__)

@contextmanager
def gateway_errors(db: Session, action: str):
    """
    Roll back and translate database failures for a write.
    Unique/foreign-key violations become ConflictError, anything else GatewayError.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity violation while trying to {action}: {e.orig}")
        raise ConflictError(f"Could not {action}: conflicting row") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database failure while trying to {action}", exc_info=True)
        raise GatewayError(f"Could not {action}: storage unavailable") from e

def persist(db: Session, db_obj, *, commit: bool = True):
    """
    Add a new row. With commit=False the row is only flushed so it gets its id
    and stays part of the caller's open transaction.
    """
    db.add(db_obj)
    if commit:
        db.commit()
        db.refresh(db_obj)
    else:
        db.flush()
    return db_obj
