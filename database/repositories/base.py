from typing import Any
import uuid

from sqlalchemy.orm import Session

from core.errors import NotFoundError


def parse_uuid(value: Any, kind: str) -> uuid.UUID:
    """Convert an id to UUID; malformed ids are reported as not found."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise NotFoundError(f"{kind} {value} not found")


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
