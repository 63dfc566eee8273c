import logging
from typing import Optional

from sqlalchemy.engine import Engine
from tenacity import retry, stop_after_attempt, wait_fixed

from database.database import get_engine
from database.models import Base

logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def init_db(bind: Optional[Engine] = None) -> None:
    """Create missing CastMatch tables; retried while the database starts up."""
    bind = bind or get_engine()
    try:
        Base.metadata.create_all(bind=bind)
    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise
    logger.info(f"Tables verified: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
