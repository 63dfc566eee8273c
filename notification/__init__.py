"""
Notification Module

Top-match notifications for castings: channels, message building,
background dispatch and async processing through Redis Queue.

Usage:
    from notification import TopMatchNotifier, BackgroundNotificationDispatcher

    sink = BackgroundNotificationDispatcher(TopMatchNotifier(config.notifications))
    sink.notify_top_matches(posting, results)
"""

from notification.channels import (
    NotificationChannel,
    WebhookChannel,
    InAppChannel,
    NotificationChannelFactory,
)

from notification.dispatcher import (
    BackgroundNotificationDispatcher,
    NullNotificationSink,
)

from notification.service import (
    TopMatchNotifier,
    process_notification_task,
)

__all__ = [
    # Channels
    'NotificationChannel',
    'WebhookChannel',
    'InAppChannel',
    'NotificationChannelFactory',
    # Dispatch
    'BackgroundNotificationDispatcher',
    'NullNotificationSink',
    # Service
    'TopMatchNotifier',
    'process_notification_task',
]
