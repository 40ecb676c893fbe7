import logging
from typing import Optional

from collabhub.core.config import Settings, settings as default_settings
from collabhub.core.security import build_password_context
from collabhub.db.store import EntityStore
from collabhub.domains.apps.policy import AccessPolicy
from collabhub.notifications.resolver import (
    LoggingNotificationSink, NotificationResolver, NotificationSink
)
from collabhub.realtime.dispatcher import BroadcastDispatcher
from collabhub.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Hub:
    """Общее состояние процесса: хранилище, реестр соединений и рассылка.

    Создается один раз при старте приложения и передается в сервисы явно.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notifier: Optional[NotificationSink] = None
    ):
        self.settings = settings or default_settings
        self.store = EntityStore()
        self.registry = ConnectionRegistry()
        self.dispatcher = BroadcastDispatcher(self.registry)
        self.policy = AccessPolicy(self.store)
        self.resolver = NotificationResolver(self.store)
        self.notifier = notifier or LoggingNotificationSink()
        self.pwd_context = build_password_context(self.settings.bcrypt_rounds)

    async def start(self) -> None:
        await self.dispatcher.start()
        logger.info(f"{self.settings.app_name} hub started")

    async def stop(self) -> None:
        await self.dispatcher.stop()
        logger.info(f"{self.settings.app_name} hub stopped")
