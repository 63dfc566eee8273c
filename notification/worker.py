#!/usr/bin/env python3
"""
RQ worker for CastMatch top-match notifications.

Runs process_notification_task jobs queued by TopMatchNotifier. Redis and
database settings come from config.yaml (with the usual REDIS_URL and
DATABASE_URL overrides) so in-app notifications land in the same database
the matcher reads.

Usage:
    python -m notification.worker
    python -m notification.worker --burst --verbose
    python -m notification.worker --redis-url redis://cache:6379/1
"""

import sys
import argparse
import logging
from typing import List, Optional

from redis import Redis
from redis.exceptions import RedisError
from rq import Worker

from core.config_loader import load_config
from database.database import configure_database
from notification.service import QUEUE_NAME

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'


def start_worker(
    burst: bool = False,
    queues: Optional[List[str]] = None,
    redis_url: str = DEFAULT_REDIS_URL
) -> None:
    """
    Work the given queues until interrupted (or until empty in burst mode).

    Exits with status 1 when Redis cannot be reached.
    """
    queues = queues or [QUEUE_NAME]

    try:
        redis_conn = Redis.from_url(redis_url)
        redis_conn.ping()
    except (RedisError, ConnectionError) as e:
        logger.error(f"Cannot reach Redis: {e}")
        sys.exit(1)

    worker = Worker(queues, connection=redis_conn)
    logger.info(f"Worker listening on {', '.join(queues)}{' (burst)' if burst else ''}")

    try:
        if burst:
            worker.work(burst=True)
        else:
            worker.work()
    except KeyboardInterrupt:
        logger.info("Worker stopped")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='CastMatch Notification Worker')
    parser.add_argument('--burst', action='store_true', help='Process all and exit')
    parser.add_argument('--queues', nargs='+', default=[QUEUE_NAME])
    parser.add_argument('--redis-url', type=str, help='Overrides notifications.redis_url')
    parser.add_argument('--config', type=str, default='config.yaml')
    parser.add_argument('--verbose', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = load_config(args.config)
    configure_database(config.database.url)

    redis_url = args.redis_url or config.notifications.redis_url or DEFAULT_REDIS_URL
    start_worker(burst=args.burst, queues=args.queues, redis_url=redis_url)


if __name__ == '__main__':
    main()
