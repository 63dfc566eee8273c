"""
Collaborator interfaces for the matching engine.

The engine is invoked in-process and reads candidates and postings through
these abstractions. database.repositories provides the SQLAlchemy-backed
implementations; tests use in-memory fakes.
"""
from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from core.matching.models import Candidate, Criteria, MatchResult, Posting, SearchPage


class CandidateRetriever(ABC):
    """
    Paged, filterable read of candidate profiles.
    """

    @abstractmethod
    def search(
        self,
        criteria: "Criteria",
        page: int = 1,
        page_size: int = 10,
        public_only: bool = True
    ) -> "SearchPage":
        """
        Return one page of candidates matching the criteria filters.

        A page_size <= 0 means no page limit. Failures propagate as
        ordinary exceptions; the caller wraps them.
        """
        pass


class PostingRepository(ABC):

    @abstractmethod
    def find_by_id(self, posting_id: str) -> "Posting":
        """Return the posting or raise NotFoundError."""
        pass


class ProfileRepository(ABC):

    @abstractmethod
    def find_by_id(self, candidate_id: str) -> "Candidate":
        """Return the candidate or raise NotFoundError."""
        pass


class AuthorizationCheck(ABC):

    @abstractmethod
    def is_authorized_to_update_weights(self, caller_id: str) -> bool:
        pass


class NotificationSink(ABC):
    """
    Receives the top matches of a posting. Best effort: callers never wait
    on the outcome and never see its failures.
    """

    @abstractmethod
    def notify_top_matches(self, posting: "Posting", results: List["MatchResult"]) -> None:
        pass
