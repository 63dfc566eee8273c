import logging
from typing import Any, Dict, Optional

from sqlalchemy import select

from database.models import ModelProfile, Notification
from database.repositories.base import BaseRepository, parse_uuid

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE_CASTING_MATCH = "casting_match"


class NotificationRepository(BaseRepository):
    def create_match_notification(
        self,
        profile_id: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None
    ) -> Optional[Notification]:
        """
        Store an in-app "casting match" notification for the profile's owner.

        Returns:
            The new row, or None when the profile does not exist
        """
        stmt = select(ModelProfile.user_id).where(ModelProfile.id == parse_uuid(profile_id, "model profile"))
        user_id = self.db.execute(stmt).scalar_one_or_none()
        if user_id is None:
            return None

        notification = Notification(
            user_id=user_id,
            type=NOTIFICATION_TYPE_CASTING_MATCH,
            title=title,
            message=message,
            data=data or {},
        )
        self.db.add(notification)
        self.db.flush()
        logger.debug(f"Created match notification {notification.id} for user {user_id}")
        return notification
