from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.casting import CastingRepository
from database.repositories.user import UserRepository, UserRoleAuthorization
from database.repositories.notification import NotificationRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'CastingRepository',
    'UserRepository',
    'UserRoleAuthorization',
    'NotificationRepository',
]
