import unittest
from unittest.mock import patch

from core.config_loader import AppConfig, NotificationConfig
from notification.service import QUEUE_NAME
from notification.worker import DEFAULT_REDIS_URL, main, start_worker


@patch("notification.worker.Worker")
@patch("notification.worker.Redis")
class TestStartWorker(unittest.TestCase):

    def test_defaults_to_notification_queue(self, mock_redis, mock_worker_class):
        start_worker()

        mock_redis.from_url.assert_called_once_with(DEFAULT_REDIS_URL)
        self.assertEqual(mock_worker_class.call_args.args[0], [QUEUE_NAME])
        mock_worker_class.return_value.work.assert_called_once_with()

    def test_burst_mode(self, mock_redis, mock_worker_class):
        start_worker(burst=True, queues=["notifications", "urgent"])

        self.assertEqual(mock_worker_class.call_args.args[0], ["notifications", "urgent"])
        mock_worker_class.return_value.work.assert_called_once_with(burst=True)

    def test_redis_unreachable_exits(self, mock_redis, mock_worker_class):
        mock_redis.from_url.return_value.ping.side_effect = ConnectionError("refused")

        with self.assertRaises(SystemExit):
            start_worker()
        mock_worker_class.assert_not_called()


@patch("notification.worker.start_worker")
@patch("notification.worker.configure_database")
@patch("notification.worker.load_config")
class TestWorkerMain(unittest.TestCase):

    def test_settings_from_config(self, mock_load_config, mock_configure_db, mock_start):
        config = AppConfig(notifications=NotificationConfig(redis_url="redis://cache:6379/2"))
        mock_load_config.return_value = config

        main(["--burst"])

        mock_configure_db.assert_called_once_with(config.database.url)
        mock_start.assert_called_once_with(burst=True, queues=[QUEUE_NAME], redis_url="redis://cache:6379/2")

    def test_command_line_redis_url_wins(self, mock_load_config, mock_configure_db, mock_start):
        mock_load_config.return_value = AppConfig(notifications=NotificationConfig(redis_url="redis://cache:6379/2"))

        main(["--redis-url", "redis://other:6379/0", "--queues", "a", "b"])

        mock_start.assert_called_once_with(burst=False, queues=["a", "b"], redis_url="redis://other:6379/0")


if __name__ == '__main__':
    unittest.main()
