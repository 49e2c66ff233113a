from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from src.extensions import db
from src.exceptions import ConflictError, StorageError
from src.logger import get_logger

logger = get_logger("Persistence")


def commit(conflict_message="Record conflicts with an existing one"):
    """Commit the current session, translating database errors for the caller."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", e.orig)
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Commit failed")
        raise StorageError(f"Database error: {e}") from e


def save(instance, conflict_message="Record conflicts with an existing one"):
    db.session.add(instance)
    commit(conflict_message)
    return instance


def delete(instance):
    db.session.delete(instance)
    commit()
