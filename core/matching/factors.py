#!/usr/bin/env python3
"""
Factor Scorers - One pure function per scoring category.

Each scorer takes (candidate, criteria) and returns a score in [0, 100].
A factor with nothing constrained returns 100 so under-specified searches
are not penalized. Missing candidate attributes count as non-matching and
never raise.
"""

from typing import FrozenSet, List, Optional

from core.matching.models import Candidate, Criteria

FULL_SCORE = 100.0

EXPERIENCE_YEARS_THRESHOLD = 2
EXPERIENCE_POINTS = 60.0
RATING_THRESHOLD = 4.0
RATING_POINTS = 40.0

CATEGORY_POINTS = 60.0
LANGUAGE_POINTS = 40.0


def _in_range(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    if value is None:
        return False
    return low <= value <= high


def _share_of_checks(checks: List[bool]) -> float:
    if not checks:
        return FULL_SCORE
    return FULL_SCORE * sum(1 for passed in checks if passed) / len(checks)


def _overlap_ratio(required: FrozenSet[str], offered: FrozenSet[str]) -> float:
    if not required:
        return 0.0
    return len(required & offered) / len(required)


def demographics_score(candidate: Candidate, criteria: Criteria) -> float:
    """
    Gender, age range and city, each an equal share of the constrained checks.

    Age is only a constraint when both bounds are present.
    """
    checks: List[bool] = []
    if criteria.gender:
        checks.append(candidate.gender == criteria.gender)
    if criteria.age_min is not None and criteria.age_max is not None:
        checks.append(_in_range(candidate.age, criteria.age_min, criteria.age_max))
    if criteria.city:
        checks.append(candidate.city == criteria.city)
    return _share_of_checks(checks)


def physical_score(candidate: Candidate, criteria: Criteria) -> float:
    """Height and weight ranges; a range counts only when both bounds are set."""
    checks: List[bool] = []
    if criteria.height_min is not None and criteria.height_max is not None:
        checks.append(_in_range(candidate.height, criteria.height_min, criteria.height_max))
    if criteria.weight_min is not None and criteria.weight_max is not None:
        checks.append(_in_range(candidate.weight, criteria.weight_min, criteria.weight_max))
    return _share_of_checks(checks)


def professional_score(candidate: Candidate, criteria: Criteria) -> float:
    """Candidate-only signal: 60 for more than two years, 40 for rating >= 4.0."""
    score = 0.0
    if candidate.experience is not None and candidate.experience > EXPERIENCE_YEARS_THRESHOLD:
        score += EXPERIENCE_POINTS
    if candidate.rating is not None and candidate.rating >= RATING_THRESHOLD:
        score += RATING_POINTS
    return score


def geographic_score(candidate: Candidate, criteria: Criteria) -> float:
    if not criteria.city:
        return FULL_SCORE
    return FULL_SCORE if candidate.city == criteria.city else 0.0


def specialized_score(candidate: Candidate, criteria: Criteria) -> float:
    """
    Category overlap worth 60 and language overlap worth 40.

    Each sub-score counts only when its criteria set is non-empty, and the
    counted sub-scores are summed. They are NOT divided by the number of
    constrained sets: a category-only search caps at 60 and half of two
    required categories scores 30.
    """
    if not criteria.categories and not criteria.languages:
        return FULL_SCORE

    score = 0.0
    if criteria.categories:
        score += _overlap_ratio(criteria.categories, candidate.categories) * CATEGORY_POINTS
    if criteria.languages:
        score += _overlap_ratio(criteria.languages, candidate.languages) * LANGUAGE_POINTS
    return score


FACTOR_SCORERS = (
    ('demographics', demographics_score),
    ('physical', physical_score),
    ('professional', professional_score),
    ('geographic', geographic_score),
    ('specialized', specialized_score),
)
