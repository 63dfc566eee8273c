#!/usr/bin/env python3
"""
Criteria Normalizer - Build the canonical Criteria from postings or filters.

All builders are total: they never raise, copy every constrainable attribute
and leave unset fields unconstrained. Range bounds are converted to float
here so factor scorers never special-case int/Decimal inputs.
"""

from typing import Any, Dict

from core.matching.models import (
    Candidate,
    Criteria,
    MatchFilters,
    Posting,
    normalize_tags,
    normalize_text,
    to_float as _to_float,
    to_int as _to_int,
)


def from_posting(posting: Posting) -> Criteria:
    """Derive criteria from an existing casting."""
    return Criteria(
        city=normalize_text(posting.city),
        gender=normalize_text(posting.gender),
        age_min=_to_int(posting.age_min),
        age_max=_to_int(posting.age_max),
        height_min=_to_float(posting.height_min),
        height_max=_to_float(posting.height_max),
        weight_min=_to_float(posting.weight_min),
        weight_max=_to_float(posting.weight_max),
        categories=normalize_tags(posting.categories),
        languages=normalize_tags(posting.languages),
        job_type=normalize_text(posting.job_type),
    )


def from_filters(filters: MatchFilters) -> Criteria:
    """Derive criteria from an explicit search request."""
    return Criteria(
        city=normalize_text(filters.city),
        gender=normalize_text(filters.gender),
        age_min=_to_int(filters.min_age),
        age_max=_to_int(filters.max_age),
        height_min=_to_float(filters.min_height),
        height_max=_to_float(filters.max_height),
        weight_min=_to_float(filters.min_weight),
        weight_max=_to_float(filters.max_weight),
        categories=normalize_tags(filters.categories),
        languages=normalize_tags(filters.languages),
        job_type=normalize_text(filters.job_type),
        min_rating=_to_float(filters.min_rating),
    )


def from_candidate(candidate: Candidate) -> Criteria:
    """Criteria for similarity search: the anchor's city, categories and gender."""
    return Criteria(
        city=normalize_text(candidate.city),
        gender=normalize_text(candidate.gender),
        categories=normalize_tags(candidate.categories),
    )


def to_search_filters(criteria: Criteria) -> Dict[str, Any]:
    """
    Translate criteria into the retriever's native filter mapping.

    Only constrained fields are included. Categories and languages are
    sorted so the resulting query is deterministic.
    """
    filters: Dict[str, Any] = {}
    if criteria.city:
        filters['city'] = criteria.city
    if criteria.gender:
        filters['gender'] = criteria.gender
    for key in ('age_min', 'age_max', 'height_min', 'height_max',
                'weight_min', 'weight_max', 'min_rating'):
        value = getattr(criteria, key)
        if value is not None:
            filters[key] = value
    if criteria.categories:
        filters['categories'] = sorted(criteria.categories)
    if criteria.languages:
        filters['languages'] = sorted(criteria.languages)
    return filters
