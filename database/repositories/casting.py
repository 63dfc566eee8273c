import json
import logging
from typing import Any, List

from sqlalchemy import select

from core.errors import NotFoundError
from core.matching import interfaces
from core.matching.models import Posting
from database.models import Casting, CASTING_STATUS_ACTIVE
from database.repositories.base import BaseRepository, parse_uuid

logger = logging.getLogger(__name__)


def _json_tags(value: Any) -> List[str]:
    """Read a JSONB tag column; tolerate a JSON-encoded string or a null."""
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return [value]
    if isinstance(value, list):
        return value
    logger.warning(f"Ignoring non-list tag value of type {type(value).__name__}")
    return []


def to_posting(casting: Casting) -> Posting:
    return Posting(
        id=str(casting.id),
        title=casting.title or "",
        employer_id=str(casting.employer_id) if casting.employer_id else None,
        city=casting.city,
        gender=casting.gender,
        age_min=casting.age_min,
        age_max=casting.age_max,
        height_min=casting.height_min,
        height_max=casting.height_max,
        weight_min=casting.weight_min,
        weight_max=casting.weight_max,
        categories=_json_tags(casting.categories),
        languages=_json_tags(casting.languages),
        job_type=casting.job_type,
        status=casting.status,
    )


class CastingRepository(BaseRepository, interfaces.PostingRepository):

    def find_by_id(self, posting_id: str) -> Posting:
        stmt = select(Casting).where(Casting.id == parse_uuid(posting_id, "casting"))
        casting = self.db.execute(stmt).scalar_one_or_none()
        if casting is None:
            raise NotFoundError(f"casting {posting_id} not found")
        return to_posting(casting)

    def list_active_ids(self) -> List[str]:
        """Ids of active castings, oldest first (input for batch matching)."""
        stmt = (
            select(Casting.id)
            .where(Casting.status == CASTING_STATUS_ACTIVE)
            .order_by(Casting.created_at)
        )
        return [str(cid) for cid in self.db.execute(stmt).scalars().all()]
