from dataclasses import dataclass
import logging

from core.config_loader import AppConfig
from core.matching.interfaces import NotificationSink
from core.matching.models import MatchingWeights
from core.matching.service import MatchingService
from core.matching.weights import AllowListAuthorization, WeightManager
from database.repositories import UserRoleAuthorization
from database.uow import MatchingRepositories
from notification.dispatcher import BackgroundNotificationDispatcher, NullNotificationSink
from notification.service import TopMatchNotifier

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The WeightManager and the notification sink live for the whole process.
    DB access is obtained via matching_uow() per unit of work, and a
    MatchingService is bound to those repositories with matching_service().
    """
    config: AppConfig
    weight_manager: WeightManager
    notifier: NotificationSink

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        weight_manager = WeightManager(
            initial=MatchingWeights(**config.matching.weights.model_dump()),
            authorization=AllowListAuthorization(config.matching.admin_ids)
        )

        return cls(
            config=config,
            weight_manager=weight_manager,
            notifier=cls._build_notifier(config)
        )

    @staticmethod
    def _build_notifier(config: AppConfig) -> NotificationSink:
        """Background top-match notifier, or a no-op sink when disabled."""
        notification_config = config.notifications

        if not notification_config.enabled:
            logger.info("Top-match notifications disabled")
            return NullNotificationSink()

        return BackgroundNotificationDispatcher(
            TopMatchNotifier(notification_config),
            max_workers=notification_config.max_workers
        )

    def matching_service(self, repos: MatchingRepositories) -> MatchingService:
        """Bind a MatchingService to one unit of work's repositories."""
        # A Session must not be shared between threads
        matching_config = self.config.matching.model_copy(update={'batch_max_workers': 1})

        return MatchingService(
            retriever=repos.profiles,
            postings=repos.castings,
            profiles=repos.profiles,
            weight_manager=self.weight_manager,
            notifier=self.notifier,
            config=matching_config,
            authorization=UserRoleAuthorization(repos.users, self.config.matching.admin_ids)
        )

    def shutdown(self) -> None:
        if isinstance(self.notifier, BackgroundNotificationDispatcher):
            self.notifier.shutdown()
