import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .. import models
from ..schemas import AppSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Key-addressed storage for the whole app snapshot.

    Loading never fails: an absent row, unreadable JSON or a DB error all
    yield an empty ``AppSnapshot``. Saving never raises either; a dropped
    write is retried implicitly by the next mutation, which writes the
    full snapshot again.
    """

    def __init__(self, session_factory: sessionmaker, key: str):
        self.session_factory = session_factory
        self.key = key

    def load(self) -> AppSnapshot:
        db: Session = self.session_factory()
        try:
            row = db.get(models.Snapshot, self.key)
            if row is None:
                return AppSnapshot()
            return AppSnapshot.model_validate_json(row.payload)
        except (SQLAlchemyError, ValidationError, ValueError) as e:
            logger.warning("[snapshot] load of %r failed, starting empty: %s", self.key, e)
            return AppSnapshot()
        finally:
            db.close()

    def save(self, snapshot: AppSnapshot) -> bool:
        db: Session = self.session_factory()
        try:
            payload = snapshot.model_dump_json()
            row = db.get(models.Snapshot, self.key)
            if row is None:
                db.add(models.Snapshot(key=self.key, payload=payload))
            else:
                row.payload = payload
                row.updated_at = datetime.utcnow()
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("[snapshot] save of %r dropped: %s", self.key, e)
            return False
        finally:
            db.close()
