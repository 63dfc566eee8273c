#!/usr/bin/env python3
"""
Matching Module - Casting/model compatibility scoring and ranking.

Public API:
- MatchingService: ranking assembler and derived operations
- CompositeScorer: weighted total and match reasons
- WeightManager: shared, admin-mutable scoring weights

Modules:
- models.py: value objects (Candidate, Posting, Criteria, MatchResult, ...)
- criteria.py: criteria normalizer (postings, filters, similarity anchors)
- factors.py: the five factor scorers
- composite.py: weighted total, reasons and recommendations
- weights.py: weight validation and the shared weight holder
- interfaces.py: collaborator contracts (retriever, repositories, sinks)
- service.py: MatchingService orchestrator
"""

from core.matching.models import (
    Candidate,
    Posting,
    Criteria,
    MatchFilters,
    MatchingWeights,
    ScoreBreakdown,
    MatchResult,
    CompatibilityResult,
    SimilarCandidate,
    SearchPage,
)
from core.matching.composite import CompositeScorer
from core.matching.weights import WeightManager, AllowListAuthorization
from core.matching.service import MatchingService

__all__ = [
    'MatchingService',
    'CompositeScorer',
    'WeightManager',
    'AllowListAuthorization',
    'Candidate',
    'Posting',
    'Criteria',
    'MatchFilters',
    'MatchingWeights',
    'ScoreBreakdown',
    'MatchResult',
    'CompatibilityResult',
    'SimilarCandidate',
    'SearchPage',
]
