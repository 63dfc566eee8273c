import contextlib
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from database.database import SessionLocal, get_engine
from database.repositories import (
    CastingRepository,
    NotificationRepository,
    ProfileRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchingRepositories:
    """Repositories sharing one Session."""
    profiles: ProfileRepository
    castings: CastingRepository
    users: UserRepository
    notifications: NotificationRepository

    @classmethod
    def bind(cls, session: Session) -> "MatchingRepositories":
        return cls(
            profiles=ProfileRepository(session),
            castings=CastingRepository(session),
            users=UserRepository(session),
            notifications=NotificationRepository(session),
        )


@contextlib.contextmanager
def matching_uow():
    """Per-unit-of-work transaction scope.

    Yields MatchingRepositories bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with matching_uow() as repos:
            service = context.matching_service(repos)
            results = service.find_matching_models(posting_id)
        # commit happens automatically on successful exit
    """
    get_engine()
    session = SessionLocal()
    try:
        yield MatchingRepositories.bind(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
