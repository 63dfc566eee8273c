"""
Notification dispatchers.

The matching service hands top matches to a NotificationSink and returns
immediately. BackgroundNotificationDispatcher runs the wrapped sink on a
small worker pool; NullNotificationSink is used when notifications are off.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from core.matching.interfaces import NotificationSink
from core.matching.models import MatchResult, Posting

logger = logging.getLogger(__name__)


class NullNotificationSink(NotificationSink):

    def notify_top_matches(self, posting: Posting, results: List[MatchResult]) -> None:
        logger.debug(f"Notifications disabled; dropping {len(results)} matches for posting {posting.id}")


class BackgroundNotificationDispatcher(NotificationSink):
    """Runs a sink off the caller's thread; failures are logged, never raised."""

    def __init__(self, sink: NotificationSink, max_workers: int = 2):
        self.sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="notify"
        )

    def notify_top_matches(self, posting: Posting, results: List[MatchResult]) -> None:
        self._executor.submit(self._deliver, posting, list(results))
        logger.debug(f"Submitted {len(results)} matches for posting {posting.id}")

    def _deliver(self, posting: Posting, results: List[MatchResult]) -> None:
        try:
            self.sink.notify_top_matches(posting, results)
        except Exception as e:
            logger.error(f"Top-match notification for posting {posting.id} failed: {e}", exc_info=True)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
