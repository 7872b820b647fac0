import logging
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import InternalError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class BaseService:
    def __init__(self, db: Session):
        self.db = db

    def _database_failure(self, exc: SQLAlchemyError, action: str) -> Exception:
        """Roll back and translate a store failure into an API error."""
        self.db.rollback()
        logger.exception(f"Database error while {action}: {exc}")
        if isinstance(exc, OperationalError):
            return ServiceUnavailableError()
        return InternalError()
