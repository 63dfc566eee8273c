import logging
from typing import Any, Dict

from sqlalchemy import select, func
from sqlalchemy.sql import Select

from core.errors import NotFoundError
from core.matching import interfaces
from core.matching.criteria import to_search_filters
from core.matching.models import Candidate, Criteria, SearchPage
from database.models import ModelProfile
from database.repositories.base import BaseRepository, parse_uuid

logger = logging.getLogger(__name__)


def to_candidate(profile: ModelProfile) -> Candidate:
    """Detach an ORM row into a scoring snapshot."""
    return Candidate(
        id=str(profile.id),
        name=profile.name or "",
        gender=profile.gender,
        age=profile.age,
        city=profile.city,
        height=profile.height,
        weight=profile.weight,
        experience=profile.experience,
        rating=profile.rating,
        categories=profile.categories or [],
        languages=profile.languages or [],
        is_public=bool(profile.is_public),
        description=profile.description,
        hourly_rate=profile.hourly_rate,
    )


def build_search_statement(filters: Dict[str, Any], public_only: bool = True) -> Select:
    """
    Unpaged, unordered profile query for a filter mapping.

    Categories and languages match when the profile has any of the
    requested values.
    """
    stmt = select(ModelProfile)

    if public_only:
        stmt = stmt.where(ModelProfile.is_public.is_(True))
    if 'city' in filters:
        stmt = stmt.where(ModelProfile.city == filters['city'])
    if 'gender' in filters:
        stmt = stmt.where(ModelProfile.gender == filters['gender'])
    if 'age_min' in filters:
        stmt = stmt.where(ModelProfile.age >= filters['age_min'])
    if 'age_max' in filters:
        stmt = stmt.where(ModelProfile.age <= filters['age_max'])
    if 'height_min' in filters:
        stmt = stmt.where(ModelProfile.height >= filters['height_min'])
    if 'height_max' in filters:
        stmt = stmt.where(ModelProfile.height <= filters['height_max'])
    if 'weight_min' in filters:
        stmt = stmt.where(ModelProfile.weight >= filters['weight_min'])
    if 'weight_max' in filters:
        stmt = stmt.where(ModelProfile.weight <= filters['weight_max'])
    if 'min_rating' in filters:
        stmt = stmt.where(ModelProfile.rating >= filters['min_rating'])
    if filters.get('categories'):
        stmt = stmt.where(ModelProfile.categories.overlap(filters['categories']))
    if filters.get('languages'):
        stmt = stmt.where(ModelProfile.languages.overlap(filters['languages']))

    return stmt


class ProfileRepository(BaseRepository, interfaces.CandidateRetriever, interfaces.ProfileRepository):
    """Model profile reads: candidate search and single-profile lookup."""

    def search(
        self,
        criteria: Criteria,
        page: int = 1,
        page_size: int = 10,
        public_only: bool = True
    ) -> SearchPage:
        filters = to_search_filters(criteria)
        stmt = build_search_statement(filters, public_only)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = self.db.execute(count_stmt).scalar_one()

        stmt = stmt.order_by(ModelProfile.rating.desc(), ModelProfile.id)
        if page_size > 0:
            stmt = stmt.offset((max(1, page) - 1) * page_size).limit(page_size)

        profiles = self.db.execute(stmt).scalars().all()
        logger.debug(f"Profile search {filters} matched {total}, page {page} returned {len(profiles)}")
        return SearchPage(candidates=[to_candidate(p) for p in profiles], total=total)

    def find_by_id(self, candidate_id: str) -> Candidate:
        stmt = select(ModelProfile).where(ModelProfile.id == parse_uuid(candidate_id, "model profile"))
        profile = self.db.execute(stmt).scalar_one_or_none()
        if profile is None:
            raise NotFoundError(f"model profile {candidate_id} not found")
        return to_candidate(profile)

