#!/usr/bin/env python3
"""
Top-Match Notifier

Tells the best-ranked candidates of a casting that they match it. Sits
behind the NotificationSink interface so the matching service never sees
delivery details.

Delivery goes through a Redis Queue when one is reachable; otherwise each
message is processed synchronously in the calling thread.

Usage:
    from notification.service import TopMatchNotifier

    notifier = TopMatchNotifier(config.notifications)
    notifier.notify_top_matches(posting, results)
"""

import os
import logging
import uuid
from typing import Optional, Dict, Any, List

from redis import Redis
from rq import Queue, Retry

from core.config_loader import NotificationConfig
from core.matching.interfaces import NotificationSink
from core.matching.models import MatchResult, Posting
from notification.channels import NotificationChannelFactory
from notification.message_builder import (
    NOTIFICATION_TYPE_CASTING_MATCH,
    NotificationMessageBuilder,
)

logger = logging.getLogger(__name__)

QUEUE_NAME = 'notifications'
JOB_TIMEOUT = '5m'
RESULT_TTL_SECONDS = 24 * 60 * 60
RETRY_INTERVALS = [30, 60, 120]  # seconds between attempts


class NotificationDeliveryError(Exception):
    """A channel reported that it could not deliver a notification."""


class TopMatchNotifier(NotificationSink):
    """
    Notifies the top candidates of a posting on every enabled channel.

    Only results scoring at least ``min_score_threshold`` are considered,
    and at most ``top_n`` of them, highest score first.
    """

    def __init__(self, config: Optional[NotificationConfig] = None, redis_url: Optional[str] = None):
        """
        Initialize the notifier.

        Args:
            config: Notification settings (thresholds, channels, queue mode)
            redis_url: Redis connection URL; overrides config and REDIS_URL
        """
        self.config = config or NotificationConfig()
        self.redis_url = redis_url or self.config.redis_url or os.environ.get(
            'REDIS_URL',
            'redis://localhost:6379/0'
        )

        self.redis_conn: Optional[Redis] = None
        self.queue: Optional[Queue] = None
        if self.config.use_async_queue:
            self._connect_queue()
        else:
            logger.info("Async notification queue disabled; delivering inline")

    @property
    def async_mode(self) -> bool:
        return self.queue is not None

    def _connect_queue(self) -> None:
        """Attach to the RQ queue; stay in sync mode when Redis does not answer."""
        try:
            conn = Redis.from_url(self.redis_url)
            conn.ping()
        except Exception as e:
            logger.error(f"Redis unavailable at startup ({e}); delivering notifications inline")
            return
        self.redis_conn = conn
        self.queue = Queue(QUEUE_NAME, connection=conn)
        logger.info(f"Top-match notifications go through queue '{QUEUE_NAME}'")

    def select_top_matches(self, results: List[MatchResult]) -> List[MatchResult]:
        eligible = [r for r in results if r.score >= self.config.min_score_threshold]
        eligible.sort(key=lambda r: r.score, reverse=True)
        return eligible[:max(0, self.config.top_n)]

    def notify_top_matches(self, posting: Posting, results: List[MatchResult]) -> List[Optional[str]]:
        """
        Send one message per selected candidate and enabled channel.

        Returns:
            Job ids (queued) or notification ids (sync); None for sends that failed
        """
        if not self.config.enabled:
            logger.debug(f"Notifications disabled; skipping posting {posting.id}")
            return []

        top = self.select_top_matches(results)
        if not top:
            logger.info(f"No candidates above {self.config.min_score_threshold} for posting {posting.id}")
            return []

        sent = []
        for rank, result in enumerate(top, start=1):
            content = NotificationMessageBuilder.build_notification_content(posting, result, rank)
            subject = NotificationMessageBuilder.build_subject(content)
            body = NotificationMessageBuilder.to_markdown(content)
            metadata = {
                'data': NotificationMessageBuilder.to_data(content),
                'webhook_payload': NotificationMessageBuilder.to_webhook_payload(subject, [content]),
            }

            for channel_type, channel_config in self.config.channels.items():
                if not channel_config.enabled:
                    continue

                recipient = self._get_recipient_for_channel(channel_type, result, channel_config.recipient)
                if not recipient:
                    logger.warning(f"No recipient configured for {channel_type}; skipping")
                    continue

                try:
                    sent.append(self.send_notification(channel_type, recipient, subject, body, metadata))
                except Exception as e:
                    logger.error(f"Failed to send {channel_type} notification for "
                                 f"candidate {result.candidate_id}: {e}")
                    sent.append(None)

        logger.info(f"Dispatched {len(sent)} top-match notifications for posting {posting.id}")
        return sent

    def send_notification(
        self,
        channel_type: str,
        recipient: str,
        subject: str,
        body: str,
        metadata: Dict[str, Any]
    ) -> str:
        notification_data = {
            'channel_type': channel_type,
            'recipient': recipient,
            'subject': subject,
            'body': body,
            'metadata': metadata,
            'event_type': NOTIFICATION_TYPE_CASTING_MATCH,
        }

        if self.async_mode:
            job = self.queue.enqueue(
                process_notification_task,
                notification_data,
                job_timeout=JOB_TIMEOUT,
                result_ttl=RESULT_TTL_SECONDS,
                retry=Retry(max=len(RETRY_INTERVALS), interval=RETRY_INTERVALS)
            )
            logger.debug(f"Queued {channel_type} notification for {recipient} as job {job.id}")
            return job.id

        return process_notification_task(notification_data)

    @staticmethod
    def _get_recipient_for_channel(
        channel_type: str,
        result: MatchResult,
        configured: Optional[str]
    ) -> Optional[str]:
        if channel_type == 'in_app':
            return result.candidate_id
        return configured

    def get_queue_status(self) -> Dict[str, Any]:
        """Queue length and Redis health."""
        if not self.async_mode:
            return {'status': 'sync_mode', 'queue_length': 0}

        try:
            return {'status': 'active', 'queue_length': self.queue.count, 'redis_connected': self.redis_conn.ping()}
        except Exception as e:
            logger.warning(f"Queue status check failed: {e}")
            return {'status': 'error', 'error': str(e)}


def process_notification_task(notification_data: Dict[str, Any]) -> str:
    """
    Deliver one notification (called by the RQ worker or inline in sync mode).

    Channel errors and refused deliveries raise so RQ can apply its retry
    policy; in sync mode the notifier records them as None.
    """
    notification_id = str(uuid.uuid4())
    channel_type = notification_data['channel_type']
    logger.debug(f"Delivering {notification_data.get('event_type')} notification {notification_id} via {channel_type}")

    try:
        channel = NotificationChannelFactory.get_channel(channel_type)
        success = channel.send(
            notification_data['recipient'],
            notification_data['subject'],
            notification_data['body'],
            notification_data.get('metadata', {})
        )
    except Exception as e:
        logger.error(f"Failed to process notification {notification_id}: {e}", exc_info=True)
        raise

    if not success:
        logger.error(f"Notification {notification_id} failed to send via {channel_type}")
        raise NotificationDeliveryError(f"{channel_type} delivery to {notification_data['recipient']} failed")

    logger.info(f"Notification {notification_id} sent successfully")
    return notification_id
