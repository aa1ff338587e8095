from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from cryptozoo.domain.errors import ConflictError, RecordStoreError

logger = logging.getLogger(__name__)


class BaseRepository:
    """Shared session handling: commit or roll back and raise a domain error."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Record store constraint violation: {e.orig}")
            raise ConflictError("Record conflicts with an existing record") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Record store error: {e}")
            raise RecordStoreError("Record store operation failed") from e
    
    def _flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Record store constraint violation: {e.orig}")
            raise ConflictError("Record conflicts with an existing record") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Record store error: {e}")
            raise RecordStoreError("Record store operation failed") from e
    
    def _save(self, entity=None, commit: bool = True) -> None:
        """Commit (and refresh) or only flush when the caller commits later."""
        if commit:
            self._commit()
            if entity is not None:
                self.db.refresh(entity)
        else:
            self._flush()
