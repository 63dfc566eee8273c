#!/usr/bin/env python3
"""
Composite Scorer - Combine factor scores into a weighted total.

Also turns a breakdown into human-readable match reasons and, for a single
candidate/posting pair, improvement recommendations.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from core.config_loader import ReasonThresholds, RecommendationThresholds
from core.matching import factors
from core.matching.models import Candidate, Criteria, ScoreBreakdown
from core.matching.weights import WeightManager

logger = logging.getLogger(__name__)

REASON_GEOGRAPHIC = "Perfect geographic match"
REASON_DEMOGRAPHICS = "Meets demographic requirements"
REASON_PHYSICAL = "Suitable physical parameters"
REASON_PROFESSIONAL = "Professional fit"
REASON_SPECIALIZED = "Specialized skills"
REASON_SAME_CITY = "Located in the same city"
REASON_CATEGORIES = "Matching categories"

RECOMMEND_OTHER_CITIES = "Consider candidates from other cities"
RECOMMEND_WIDEN_PHYSICAL = "Widen the physical criteria"
RECOMMEND_SPECIALIZED = "Look for candidates with more specialized skills"
RECOMMEND_HIGH_POTENTIAL = "High potential for collaboration"


def round_score(value: float) -> float:
    """Round half-up to 2 decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class CompositeScorer:
    """Weighted sum of the five factor scores using the shared weights."""

    def __init__(
        self,
        weight_manager: WeightManager,
        reason_thresholds: Optional[ReasonThresholds] = None,
        recommendation_thresholds: Optional[RecommendationThresholds] = None
    ):
        self.weight_manager = weight_manager
        self.reason_thresholds = reason_thresholds or ReasonThresholds()
        self.recommendation_thresholds = recommendation_thresholds or RecommendationThresholds()

    def calculate_match_score(self, candidate: Candidate, criteria: Criteria) -> ScoreBreakdown:
        """
        Score one candidate against criteria.

        The weights are read exactly once so a concurrent update cannot mix
        two weight sets within one calculation.
        """
        weights = self.weight_manager.get_weights()

        demographics = factors.demographics_score(candidate, criteria)
        physical = factors.physical_score(candidate, criteria)
        professional = factors.professional_score(candidate, criteria)
        geographic = factors.geographic_score(candidate, criteria)
        specialized = factors.specialized_score(candidate, criteria)

        total = (
            demographics * weights.demographics
            + physical * weights.physical
            + professional * weights.professional
            + geographic * weights.geographic
            + specialized * weights.specialized
        )

        logger.debug(
            f"Candidate {candidate.id}: demo={demographics:.1f}, phys={physical:.1f}, "
            f"prof={professional:.1f}, geo={geographic:.1f}, specialized={specialized:.1f}, total={total:.2f}"
        )

        return ScoreBreakdown(
            demographics=demographics,
            physical=physical,
            professional=professional,
            geographic=geographic,
            specialized=specialized,
            total_score=round_score(total),
        )

    def generate_match_reasons(
        self,
        breakdown: ScoreBreakdown,
        candidate: Candidate,
        criteria: Criteria
    ) -> List[str]:
        thresholds = self.reason_thresholds
        reasons = []

        if breakdown.geographic > thresholds.geographic:
            reasons.append(REASON_GEOGRAPHIC)
        if breakdown.demographics > thresholds.demographics:
            reasons.append(REASON_DEMOGRAPHICS)
        if breakdown.physical > thresholds.physical:
            reasons.append(REASON_PHYSICAL)
        if breakdown.professional > thresholds.professional:
            reasons.append(REASON_PROFESSIONAL)
        if breakdown.specialized > thresholds.specialized:
            reasons.append(REASON_SPECIALIZED)

        if criteria.city and candidate.city == criteria.city:
            reasons.append(REASON_SAME_CITY)
        if candidate.categories and criteria.categories:
            reasons.append(REASON_CATEGORIES)

        return reasons

    def generate_recommendations(self, breakdown: ScoreBreakdown) -> List[str]:
        thresholds = self.recommendation_thresholds
        recommendations = []

        if breakdown.geographic < thresholds.geographic:
            recommendations.append(RECOMMEND_OTHER_CITIES)
        if breakdown.physical < thresholds.physical:
            recommendations.append(RECOMMEND_WIDEN_PHYSICAL)
        if breakdown.specialized < thresholds.specialized:
            recommendations.append(RECOMMEND_SPECIALIZED)
        if breakdown.total_score > thresholds.high_potential_total:
            recommendations.append(RECOMMEND_HIGH_POTENTIAL)

        return recommendations
