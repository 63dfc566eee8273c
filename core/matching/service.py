#!/usr/bin/env python3
"""
Matching Service - Rank candidates for postings and explicit criteria.

Flow for every search:
    criteria -> CandidateRetriever (I/O) -> CompositeScorer per candidate
    -> min_score filter -> stable sort by score -> limit

Derived operations (compatibility, similarity, batch matching) reuse the
same ranking. Retrieval and lookup failures surface as typed errors; a
single candidate that fails to score is skipped and logged.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from core.config_loader import MatchingConfig
from core.errors import (
    PermissionDeniedError,
    UnimplementedError,
    wrap_error,
)
from core.matching import criteria as criteria_builder
from core.matching.composite import CompositeScorer
from core.matching.interfaces import (
    AuthorizationCheck,
    CandidateRetriever,
    NotificationSink,
    PostingRepository,
    ProfileRepository,
)
from core.matching.models import (
    CandidateMatchingStats,
    CompatibilityResult,
    Criteria,
    MatchFilters,
    MatchingLogEntry,
    MatchingLogQuery,
    MatchingWeights,
    MatchResult,
    PlatformMatchingStats,
    Posting,
    PostingMatchingStats,
    ScoreBreakdown,
    SimilarCandidate,
    Candidate,
)
from core.matching.weights import WeightManager

logger = logging.getLogger(__name__)


def _rank(
    scored: List[Tuple[MatchResult, Candidate]],
    min_score: float,
    limit: int
) -> List[Tuple[MatchResult, Candidate]]:
    """Filter by min_score, sort descending (stable), truncate when limit > 0."""
    kept = [pair for pair in scored if pair[0].score >= min_score]
    kept.sort(key=lambda pair: pair[0].score, reverse=True)
    if limit > 0:
        kept = kept[:limit]
    return kept


class MatchingService:
    """
    Ranking assembler plus derived matching operations.

    All collaborators are injected; the service keeps no per-request state
    and is safe to call from several threads at once.
    """

    def __init__(
        self,
        retriever: CandidateRetriever,
        postings: PostingRepository,
        profiles: ProfileRepository,
        weight_manager: WeightManager,
        notifier: Optional[NotificationSink] = None,
        config: Optional[MatchingConfig] = None,
        authorization: Optional[AuthorizationCheck] = None
    ):
        self.retriever = retriever
        self.postings = postings
        self.profiles = profiles
        self.weight_manager = weight_manager
        self.notifier = notifier
        self.config = config or MatchingConfig()
        self.authorization = authorization or weight_manager.authorization
        self.scorer = CompositeScorer(
            weight_manager,
            reason_thresholds=self.config.reason_thresholds,
            recommendation_thresholds=self.config.recommendation_thresholds
        )

    # ------------------------------------------------------------------
    # Core ranking
    # ------------------------------------------------------------------

    def find_models_by_criteria(
        self,
        criteria: Criteria,
        limit: int = 10,
        min_score: float = 0.0
    ) -> List[MatchResult]:
        """
        Rank public candidates against criteria.

        Args:
            criteria: Canonical criteria (see core.matching.criteria)
            limit: Maximum results; <= 0 means unbounded
            min_score: Results below this total are dropped

        Returns:
            MatchResults sorted by score, highest first. Ties keep retrieval order.

        Raises:
            InvalidArgumentError: criteria bounds are malformed
            InternalError: candidate retrieval failed
        """
        return [result for result, _ in self._score_and_rank(criteria, limit, min_score)]

    def _score_and_rank(
        self,
        criteria: Criteria,
        limit: int,
        min_score: float
    ) -> List[Tuple[MatchResult, Candidate]]:
        criteria.validate()

        try:
            page = self.retriever.search(criteria, page=1, page_size=limit, public_only=True)
        except Exception as e:
            logger.error(f"Candidate retrieval failed: {e}")
            raise wrap_error(e, "candidate retrieval failed") from e

        scored = []
        for candidate in page.candidates:
            try:
                breakdown = self.scorer.calculate_match_score(candidate, criteria)
                reasons = self.scorer.generate_match_reasons(breakdown, candidate, criteria)
            except Exception as e:
                logger.error(f"Skipping candidate {getattr(candidate, 'id', '?')}: scoring failed: {e}",
                             exc_info=True)
                continue

            result = MatchResult(
                candidate_id=candidate.id,
                candidate_name=candidate.name,
                score=breakdown.total_score,
                reasons=reasons,
                breakdown=breakdown,
                city=candidate.city,
            )
            scored.append((result, candidate))

        ranked = _rank(scored, min_score, limit)
        logger.info(f"Scored {len(scored)} of {len(page.candidates)} candidates, "
                    f"returning {len(ranked)} (min_score={min_score}, limit={limit})")
        return ranked

    def find_models_by_filters(self, filters: MatchFilters) -> List[MatchResult]:
        """Explicit-criteria search: normalize filters then rank."""
        criteria = criteria_builder.from_filters(filters)
        return self.find_models_by_criteria(criteria, limit=filters.limit, min_score=filters.min_score)

    def find_models_for_casting(self, posting: Posting, limit: int = 10) -> List[MatchResult]:
        """
        Rank candidates for an existing posting and notify the top matches.

        The notification is handed off without waiting; its failures are
        logged by the sink and never reach this caller.
        """
        criteria = criteria_builder.from_posting(posting)
        results = self.find_models_by_criteria(
            criteria, limit=limit, min_score=self.config.casting_min_score
        )

        if results and self.notifier is not None:
            try:
                self.notifier.notify_top_matches(posting, list(results))
            except Exception as e:
                logger.warning(f"Top-match notification for posting {posting.id} failed: {e}")

        return results

    def find_matching_models(self, posting_id: str, limit: int = 10) -> List[MatchResult]:
        posting = self._get_posting(posting_id)
        return self.find_models_for_casting(posting, limit)

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------

    def calculate_match_score_for_posting(self, candidate: Candidate, posting: Posting) -> ScoreBreakdown:
        return self.scorer.calculate_match_score(candidate, criteria_builder.from_posting(posting))

    def get_model_compatibility(self, candidate_id: str, posting_id: str) -> CompatibilityResult:
        """
        Score one candidate against one posting with improvement hints.

        Raises:
            NotFoundError: candidate or posting is absent
        """
        candidate = self._get_candidate(candidate_id)
        posting = self._get_posting(posting_id)

        try:
            breakdown = self.calculate_match_score_for_posting(candidate, posting)
        except Exception as e:
            raise wrap_error(e, f"scoring {candidate_id} against {posting_id} failed") from e

        return CompatibilityResult(
            candidate_id=candidate.id,
            posting_id=posting.id,
            total_score=breakdown.total_score,
            breakdown=breakdown,
            recommendations=self.scorer.generate_recommendations(breakdown),
        )

    def find_similar_models(self, candidate_id: str, limit: int = 10) -> List[SimilarCandidate]:
        """
        Candidates resembling the anchor (same city, categories, gender).

        One extra result is requested so that dropping the anchor itself
        still leaves ``limit`` results.
        """
        anchor = self._get_candidate(candidate_id)
        criteria = criteria_builder.from_candidate(anchor)

        fetch_limit = limit + 1 if limit > 0 else limit
        ranked = self._score_and_rank(
            criteria, limit=fetch_limit, min_score=self.config.similar_min_score
        )

        similar = []
        for match, candidate in ranked:
            if match.candidate_id == anchor.id:
                continue
            similar.append(SimilarCandidate(
                candidate_id=match.candidate_id,
                name=match.candidate_name,
                city=match.city,
                similarity=match.score,
                common_categories=sorted(anchor.categories & candidate.categories),
            ))

        if limit > 0:
            similar = similar[:limit]
        return similar

    def batch_match_models(
        self,
        posting_ids: Sequence[str],
        limit: Optional[int] = None
    ) -> Dict[str, List[MatchResult]]:
        """
        Run posting-derived matching for each id independently.

        A posting that fails (missing, retrieval error) maps to an empty
        list; it never aborts the batch. Postings run concurrently when
        batch_max_workers > 1.
        """
        per_posting_limit = self.config.batch_limit if limit is None else limit
        unique_ids = list(dict.fromkeys(str(pid) for pid in posting_ids))

        def _match_one(posting_id: str) -> List[MatchResult]:
            try:
                return self.find_matching_models(posting_id, per_posting_limit)
            except Exception as e:
                logger.error(f"Batch matching failed for posting {posting_id}: {e}")
                return []

        workers = max(1, self.config.batch_max_workers)
        if workers == 1 or len(unique_ids) <= 1:
            return {pid: _match_one(pid) for pid in unique_ids}

        with ThreadPoolExecutor(max_workers=min(workers, len(unique_ids))) as executor:
            matched = executor.map(_match_one, unique_ids)
            return dict(zip(unique_ids, matched))

    # ------------------------------------------------------------------
    # Weights
    # ------------------------------------------------------------------

    def get_matching_weights(self) -> MatchingWeights:
        return self.weight_manager.get_weights()

    def update_matching_weights(self, caller_id: str, weights: MatchingWeights) -> None:
        self.weight_manager.update_weights(caller_id, weights, authorization=self.authorization)

    # ------------------------------------------------------------------
    # Analytics (no backing store yet)
    # ------------------------------------------------------------------

    def get_matching_stats(self, posting_id: str) -> PostingMatchingStats:
        raise UnimplementedError("per-posting matching statistics are not recorded yet")

    def get_model_matching_stats(self, candidate_id: str) -> CandidateMatchingStats:
        raise UnimplementedError("per-candidate matching statistics are not recorded yet")

    def get_platform_matching_stats(self) -> PlatformMatchingStats:
        raise UnimplementedError("platform matching statistics are not recorded yet")

    def get_matching_logs(self, query: MatchingLogQuery) -> List[MatchingLogEntry]:
        raise UnimplementedError("matching logs are not recorded yet")

    def update_model_recommendations(self, candidate_id: str) -> None:
        self._get_candidate(candidate_id)
        raise UnimplementedError("stored candidate recommendations are not supported yet")

    def recalculate_all_matches(self, caller_id: str) -> None:
        if not self.authorization.is_authorized_to_update_weights(caller_id):
            raise PermissionDeniedError(f"caller {caller_id} may not recalculate matches")
        raise UnimplementedError("stored matches are not recorded yet")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_candidate(self, candidate_id: str) -> Candidate:
        try:
            return self.profiles.find_by_id(candidate_id)
        except Exception as e:
            raise wrap_error(e, f"loading candidate {candidate_id} failed") from e

    def _get_posting(self, posting_id: str) -> Posting:
        try:
            return self.postings.find_by_id(posting_id)
        except Exception as e:
            raise wrap_error(e, f"loading posting {posting_id} failed") from e

