import logging
from typing import Iterable, Optional

from sqlalchemy import select

from core.matching.interfaces import AuthorizationCheck
from database.models import User, USER_ROLE_ADMIN, USER_STATUS_ACTIVE
from database.repositories.base import BaseRepository, parse_uuid
from core.errors import NotFoundError

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def get_role(self, user_id: str) -> Optional[str]:
        """Role of an active user, or None if the user is missing or inactive."""
        try:
            uid = parse_uuid(user_id, "user")
        except NotFoundError:
            return None

        stmt = select(User.role).where(User.id == uid, User.status == USER_STATUS_ACTIVE)
        return self.db.execute(stmt).scalar_one_or_none()


class UserRoleAuthorization(AuthorizationCheck):
    """
    Active users with the admin role may change the matching weights.

    Ids listed in admin_ids (service accounts from config) are allowed
    without a user lookup.
    """

    def __init__(self, users: UserRepository, admin_ids: Iterable[str] = ()):
        self.users = users
        self.admin_ids = frozenset(str(admin_id) for admin_id in admin_ids)

    def is_authorized_to_update_weights(self, caller_id: str) -> bool:
        if str(caller_id) in self.admin_ids:
            return True
        role = self.users.get_role(caller_id)
        if role != USER_ROLE_ADMIN:
            logger.debug(f"Caller {caller_id} has role {role!r}; weight update not allowed")
            return False
        return True
