#!/usr/bin/env python3
"""
Weight Manager - Holds the scoring weights shared by all scoring calls.

The current weights are an immutable MatchingWeights snapshot. Updates
publish a new snapshot with a single reference swap, so a reader that took
a snapshot keeps a consistent view for the rest of its calculation.
"""

import logging
import threading
from typing import Iterable, Optional

from core.errors import InvalidArgumentError, PermissionDeniedError
from core.matching.interfaces import AuthorizationCheck
from core.matching.models import MatchingWeights

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 0.01


def validate_weights(weights: MatchingWeights) -> None:
    """Raise InvalidArgumentError unless the weights sum to 1.0 (+/- 0.01)."""
    total = weights.total()
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise InvalidArgumentError(f"weights must sum to 1.0 (got {total:.4f})")


class AllowListAuthorization(AuthorizationCheck):
    """Authorizes a fixed set of caller ids (e.g. configured administrators)."""

    def __init__(self, admin_ids: Iterable[str] = ()):
        self.admin_ids = frozenset(str(admin_id) for admin_id in admin_ids)

    def is_authorized_to_update_weights(self, caller_id: str) -> bool:
        return str(caller_id) in self.admin_ids


class WeightManager:
    """
    Process-wide weight holder with Default and Custom states.

    Inject one instance into every CompositeScorer that should share it;
    tests build their own instance to stay isolated.
    """

    def __init__(
        self,
        initial: Optional[MatchingWeights] = None,
        authorization: Optional[AuthorizationCheck] = None
    ):
        self._default = initial or MatchingWeights()
        validate_weights(self._default)
        self._weights = self._default
        self._custom = False
        self._lock = threading.Lock()
        self.authorization = authorization or AllowListAuthorization()

    @property
    def is_custom(self) -> bool:
        return self._custom

    def get_weights(self) -> MatchingWeights:
        """Return the current snapshot. Never fails."""
        return self._weights

    def update_weights(
        self,
        caller_id: str,
        weights: MatchingWeights,
        authorization: Optional[AuthorizationCheck] = None
    ) -> None:
        """
        Replace the shared weights.

        Args:
            caller_id: Id of the user requesting the change
            weights: New weight set
            authorization: Check to use instead of the manager's own

        Raises:
            PermissionDeniedError: caller is not allowed to change weights
            InvalidArgumentError: weights do not sum to 1.0 within tolerance
        """
        check = authorization or self.authorization
        if not check.is_authorized_to_update_weights(caller_id):
            logger.warning(f"Weight update rejected for caller {caller_id}: not authorized")
            raise PermissionDeniedError(f"caller {caller_id} may not update matching weights")

        validate_weights(weights)

        with self._lock:
            previous = self._weights
            self._weights = weights
            self._custom = True

        logger.info(
            f"Matching weights updated by {caller_id}: "
            f"{previous.model_dump()} -> {weights.model_dump()}"
        )

    def reset(self) -> None:
        """Return to the default weights."""
        with self._lock:
            self._weights = self._default
            self._custom = False
