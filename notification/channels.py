#!/usr/bin/env python3
"""
Notification Channels

Delivery targets for top-match notifications. Each channel takes a
recipient, a subject, a body and a metadata dict; what the recipient
means depends on the channel:

- in_app: a model profile id, stored as a row in `notifications`
- webhook: an http(s) URL receiving the JSON payload

Set NOTIFICATION_DRY_RUN=true to log deliveries instead of performing them.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Type
import logging
import os
import urllib.parse

import requests

from database.database import db_session_scope
from database.repositories.notification import NotificationRepository

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT_SECONDS = 30
WEBHOOK_HEADERS = {
    'Content-Type': 'application/json',
    'User-Agent': 'CastMatch-Notifier/1.0',
}


def _dry_run() -> bool:
    return os.environ.get('NOTIFICATION_DRY_RUN', '').lower() in ('true', '1', 'yes')


def _is_http_url(url: str) -> bool:
    """Only absolute http(s) URLs with a host are accepted as webhook targets."""
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.hostname)


def _redact_url(url: str) -> str:
    # Drop credentials and query strings before logging
    parsed = urllib.parse.urlparse(url)
    return f"{parsed.scheme}://{parsed.hostname}{parsed.path}"


class NotificationChannel(ABC):
    """One way of delivering a rendered notification."""

    channel_type: str = ''

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        """
        Deliver one message.

        Args:
            recipient: Channel-specific address
            subject: Short title
            body: Markdown body
            metadata: 'data' (structured payload) and optional channel extras

        Returns:
            True when delivered (or logged in dry-run mode)
        """


class InAppChannel(NotificationChannel):
    channel_type = 'in_app'

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        if _dry_run():
            logger.info(f"[DRY RUN] in-app notification for profile {recipient}: {subject}")
            return True

        with db_session_scope() as session:
            stored = NotificationRepository(session).create_match_notification(
                profile_id=recipient,
                title=subject,
                message=body,
                data=metadata.get('data', {}),
            )

        if stored is None:
            logger.warning(f"No user account behind profile {recipient}; in-app notification skipped")
            return False

        logger.info(f"Stored in-app notification for profile {recipient}")
        return True


class WebhookChannel(NotificationChannel):
    """
    POSTs JSON to the recipient URL.

    The body is metadata['webhook_payload'] when the notifier prepared one,
    otherwise a plain {subject, body, data} document.
    """
    channel_type = 'webhook'

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        if not _is_http_url(recipient):
            logger.error(f"Refusing webhook delivery to invalid URL: {recipient!r}")
            return False

        payload = metadata.get('webhook_payload') or {
            'subject': subject,
            'body': body,
            'data': metadata.get('data', {}),
        }

        if _dry_run():
            logger.info(f"[DRY RUN] webhook to {_redact_url(recipient)}: {subject}")
            return True

        try:
            response = requests.post(
                recipient,
                json=payload,
                headers=WEBHOOK_HEADERS,
                timeout=WEBHOOK_TIMEOUT_SECONDS
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Webhook delivery to {_redact_url(recipient)} failed: {e}")
            return False

        logger.info(f"Webhook delivered to {_redact_url(recipient)}")
        return True


class NotificationChannelFactory:
    """Registry of channel classes keyed by lower-case channel type."""

    _channels: Dict[str, Type[NotificationChannel]] = {
        InAppChannel.channel_type: InAppChannel,
        WebhookChannel.channel_type: WebhookChannel,
    }

    @classmethod
    def get_channel(cls, channel_type: str) -> NotificationChannel:
        """
        Instantiate the channel registered under channel_type.

        Raises:
            ValueError: unknown channel type
        """
        try:
            channel_class = cls._channels[channel_type.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown channel type {channel_type!r}; known: {', '.join(sorted(cls._channels))}"
            ) from None
        return channel_class()

    @classmethod
    def register_channel(cls, channel_type: str, channel_class: type) -> None:
        if not (isinstance(channel_class, type) and issubclass(channel_class, NotificationChannel)):
            raise ValueError(f"{channel_class!r} is not a NotificationChannel subclass")
        cls._channels[channel_type.lower()] = channel_class
        logger.info(f"Registered notification channel {channel_type}")

    @classmethod
    def list_channels(cls) -> List[str]:
        return sorted(cls._channels)
