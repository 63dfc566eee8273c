#!/usr/bin/env python3
"""
Matching Models - Value objects shared by scorers, ranking and repositories.

Candidates and postings are read-only snapshots taken per request; ORM rows
are converted into these before scoring so nothing here touches a session.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.errors import InvalidArgumentError


def normalize_tags(values: Optional[Iterable[Any]]) -> FrozenSet[str]:
    """Strip tag values, drop blanks and duplicates."""
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    cleaned = set()
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            cleaned.add(text)
    return frozenset(cleaned)


def normalize_text(value: Optional[Any]) -> Optional[str]:
    """Return a stripped string, or None for missing/blank input."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_float(value: Any) -> Optional[float]:
    """Coerce int/float/Decimal/numeric text to float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def to_int(value: Any) -> Optional[int]:
    number = to_float(value)
    return int(number) if number is not None else None


@dataclass(frozen=True)
class Candidate:
    """Public model profile snapshot used for scoring."""
    id: str
    name: str = ""
    gender: Optional[str] = None
    age: Optional[int] = None
    city: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    experience: Optional[int] = None
    rating: Optional[float] = None
    categories: FrozenSet[str] = field(default_factory=frozenset)
    languages: FrozenSet[str] = field(default_factory=frozenset)
    is_public: bool = True
    description: Optional[str] = None
    hourly_rate: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "gender", normalize_text(self.gender))
        object.__setattr__(self, "city", normalize_text(self.city))
        object.__setattr__(self, "categories", normalize_tags(self.categories))
        object.__setattr__(self, "languages", normalize_tags(self.languages))


@dataclass(frozen=True)
class Posting:
    """Casting snapshot; range bounds may arrive as int, float or Decimal."""
    id: str
    title: str = ""
    employer_id: Optional[str] = None
    city: Optional[str] = None
    gender: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    height_min: Optional[Any] = None
    height_max: Optional[Any] = None
    weight_min: Optional[Any] = None
    weight_max: Optional[Any] = None
    categories: FrozenSet[str] = field(default_factory=frozenset)
    languages: FrozenSet[str] = field(default_factory=frozenset)
    job_type: Optional[str] = None
    status: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "categories", normalize_tags(self.categories))
        object.__setattr__(self, "languages", normalize_tags(self.languages))


@dataclass(frozen=True)
class Criteria:
    """
    Canonical matching target used by every factor scorer.

    Every field is optional; None or an empty set means "do not constrain".
    Fields are normalized on construction, so hand-built criteria score the
    same as those from core.matching.criteria.
    """
    city: Optional[str] = None
    gender: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    height_min: Optional[float] = None
    height_max: Optional[float] = None
    weight_min: Optional[float] = None
    weight_max: Optional[float] = None
    categories: FrozenSet[str] = field(default_factory=frozenset)
    languages: FrozenSet[str] = field(default_factory=frozenset)
    job_type: Optional[str] = None
    min_rating: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("city", "gender", "job_type"):
            object.__setattr__(self, name, normalize_text(getattr(self, name)))
        for name in ("age_min", "age_max"):
            object.__setattr__(self, name, to_int(getattr(self, name)))
        for name in ("height_min", "height_max", "weight_min", "weight_max", "min_rating"):
            object.__setattr__(self, name, to_float(getattr(self, name)))
        object.__setattr__(self, "categories", normalize_tags(self.categories))
        object.__setattr__(self, "languages", normalize_tags(self.languages))

    def validate(self) -> None:
        """Raise InvalidArgumentError for negative bounds or min > max."""
        pairs = (
            ("age", self.age_min, self.age_max),
            ("height", self.height_min, self.height_max),
            ("weight", self.weight_min, self.weight_max),
        )
        for name, low, high in pairs:
            for bound in (low, high):
                if bound is not None and bound < 0:
                    raise InvalidArgumentError(f"{name} bounds must be non-negative")
            if low is not None and high is not None and low > high:
                raise InvalidArgumentError(f"{name} min ({low}) is greater than max ({high})")
        if self.min_rating is not None and not 0 <= self.min_rating <= 5:
            raise InvalidArgumentError("min_rating must be within 0..5")


class MatchFilters(BaseModel):
    """Explicit search request: criteria fields plus ranking controls."""
    model_config = ConfigDict(extra='ignore')

    city: Optional[str] = None
    gender: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    min_age: Optional[int] = Field(default=None, ge=0)
    max_age: Optional[int] = Field(default=None, ge=0)
    min_height: Optional[float] = Field(default=None, ge=0)
    max_height: Optional[float] = Field(default=None, ge=0)
    min_weight: Optional[float] = Field(default=None, ge=0)
    max_weight: Optional[float] = Field(default=None, ge=0)
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    job_type: Optional[str] = None
    limit: int = Field(default=10, ge=0, le=100)
    min_score: float = Field(default=0.0, ge=0, le=100)


class MatchingWeights(BaseModel):
    """Coefficients combining the five factor scores into a total."""
    model_config = ConfigDict(frozen=True)

    demographics: float = Field(default=0.20, ge=0)
    physical: float = Field(default=0.25, ge=0)
    professional: float = Field(default=0.20, ge=0)
    geographic: float = Field(default=0.15, ge=0)
    specialized: float = Field(default=0.20, ge=0)

    def total(self) -> float:
        return (
            self.demographics + self.physical + self.professional
            + self.geographic + self.specialized
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """Five factor scores in [0, 100] and their weighted total."""
    demographics: float
    physical: float
    professional: float
    geographic: float
    specialized: float
    total_score: float

    def category_scores(self) -> Dict[str, float]:
        return {
            'demographics': self.demographics,
            'physical': self.physical,
            'professional': self.professional,
            'geographic': self.geographic,
            'specialized': self.specialized,
        }


@dataclass
class MatchResult:
    """Ranked output record for one candidate."""
    candidate_id: str
    candidate_name: str
    score: float
    reasons: List[str] = field(default_factory=list)
    breakdown: Optional[ScoreBreakdown] = None
    city: Optional[str] = None


@dataclass
class CompatibilityResult:
    """Score of one fixed candidate/posting pair with improvement hints."""
    candidate_id: str
    posting_id: str
    total_score: float
    breakdown: ScoreBreakdown
    recommendations: List[str] = field(default_factory=list)


@dataclass
class SimilarCandidate:
    candidate_id: str
    name: str
    city: Optional[str]
    similarity: float
    common_categories: List[str] = field(default_factory=list)


@dataclass
class SearchPage:
    """One page of retriever output."""
    candidates: List[Candidate]
    total: int


@dataclass
class PostingMatchingStats:
    posting_id: str
    total_candidates: int = 0
    matched_candidates: int = 0
    average_score: float = 0.0
    score_distribution: Dict[str, int] = field(default_factory=dict)
    top_categories: List[str] = field(default_factory=list)


@dataclass
class CandidateMatchingStats:
    candidate_id: str
    total_postings: int = 0
    matched_postings: int = 0
    match_rate: float = 0.0
    average_score: float = 0.0
    response_rate: float = 0.0
    top_match_reasons: List[str] = field(default_factory=list)


@dataclass
class PlatformMatchingStats:
    total_matches: int = 0
    successful_matches: int = 0
    average_match_score: float = 0.0
    match_rate: float = 0.0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_city: Dict[str, int] = field(default_factory=dict)


@dataclass
class MatchingLogEntry:
    id: str
    posting_id: str
    candidate_id: str
    score: float
    created_at: datetime


class MatchingLogQuery(BaseModel):
    posting_id: Optional[str] = None
    candidate_id: Optional[str] = None
    min_score: float = Field(default=0.0, ge=0, le=100)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
