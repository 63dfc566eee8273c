#!/usr/bin/env python3
"""
Unit tests for notification channels and the channel factory.
"""

import os
import unittest
from unittest.mock import MagicMock, patch

import requests

from notification.channels import (
    InAppChannel,
    NotificationChannel,
    NotificationChannelFactory,
    WebhookChannel,
)


class TestWebhookChannel(unittest.TestCase):

    def setUp(self):
        self.channel = WebhookChannel()
        self.metadata = {'data': {'casting_id': 'p1'}, 'webhook_payload': {'type': 'casting_match'}}

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': ''})
    @patch('notification.channels.requests.post')
    def test_posts_payload(self, mock_post):
        mock_post.return_value = MagicMock(status_code=200)

        sent = self.channel.send("https://hooks.example.com/cast", "Subject", "Body", self.metadata)

        self.assertTrue(sent)
        self.assertEqual(mock_post.call_args.kwargs['json'], {'type': 'casting_match'})
        self.assertEqual(mock_post.call_args.kwargs['timeout'], 30)

    @patch('notification.channels.requests.post')
    def test_rejects_non_http_urls(self, mock_post):
        self.assertFalse(self.channel.send("ftp://hooks.example.com/cast", "S", "B", self.metadata))
        self.assertFalse(self.channel.send("not a url", "S", "B", self.metadata))
        mock_post.assert_not_called()

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': ''})
    @patch('notification.channels.requests.post')
    def test_http_error_returns_false(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")

        self.assertFalse(self.channel.send("https://hooks.example.com/cast", "S", "B", self.metadata))

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': ''})
    @patch('notification.channels.requests.post')
    def test_simple_payload_without_prebuilt_body(self, mock_post):
        self.channel.send("https://hooks.example.com/cast", "Subject", "Body", {'data': {'k': 'v'}})

        self.assertEqual(mock_post.call_args.kwargs['json'],
                         {'subject': 'Subject', 'body': 'Body', 'data': {'k': 'v'}})

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': 'true'})
    @patch('notification.channels.requests.post')
    def test_dry_run(self, mock_post):
        self.assertTrue(self.channel.send("https://hooks.example.com/cast", "S", "B", self.metadata))
        mock_post.assert_not_called()


class TestInAppChannel(unittest.TestCase):

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': ''})
    @patch('notification.channels.NotificationRepository')
    @patch('notification.channels.db_session_scope')
    def test_stores_notification(self, mock_scope, mock_repo_class):
        session = MagicMock()
        mock_scope.return_value.__enter__.return_value = session
        mock_repo_class.return_value.create_match_notification.return_value = MagicMock()

        sent = InAppChannel().send("m1", "You match", "body", {'data': {'casting_id': 'p1'}})

        self.assertTrue(sent)
        mock_repo_class.assert_called_once_with(session)
        mock_repo_class.return_value.create_match_notification.assert_called_once_with(
            profile_id="m1", title="You match", message="body", data={'casting_id': 'p1'}
        )

    @patch.dict(os.environ, {'NOTIFICATION_DRY_RUN': ''})
    @patch('notification.channels.NotificationRepository')
    @patch('notification.channels.db_session_scope')
    def test_unknown_profile(self, mock_scope, mock_repo_class):
        mock_repo_class.return_value.create_match_notification.return_value = None

        self.assertFalse(InAppChannel().send("ghost", "S", "B", {}))


class TestNotificationChannelFactory(unittest.TestCase):

    def test_builtin_channels(self):
        self.assertIsInstance(NotificationChannelFactory.get_channel('in_app'), InAppChannel)
        self.assertIsInstance(NotificationChannelFactory.get_channel('WEBHOOK'), WebhookChannel)

    def test_unknown_channel(self):
        with self.assertRaises(ValueError):
            NotificationChannelFactory.get_channel('fax')

    def test_register_channel(self):
        class SmsChannel(NotificationChannel):
            @property
            def channel_type(self):
                return 'sms'

            def send(self, recipient, subject, body, metadata):
                return True

        NotificationChannelFactory.register_channel('sms', SmsChannel)
        try:
            self.assertIn('sms', NotificationChannelFactory.list_channels())
            self.assertTrue(NotificationChannelFactory.get_channel('sms').send('x', 's', 'b', {}))
        finally:
            NotificationChannelFactory._channels.pop('sms', None)

    def test_register_rejects_non_channels(self):
        with self.assertRaises(ValueError):
            NotificationChannelFactory.register_channel('bogus', dict)


if __name__ == '__main__':
    unittest.main()
