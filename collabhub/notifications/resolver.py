import logging
from enum import Enum
from typing import Any, Dict, List, Protocol

from pydantic import BaseModel, Field

from collabhub.db.store import EntityStore

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    COMMENT = "comment"
    COLLABORATOR = "collaborator"


class NotificationRecord(BaseModel):
    """Уведомление для внешней службы доставки (email/push)"""
    recipient: str
    email: str
    event_kind: NotificationKind
    app_id: str
    app_name: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class NotificationResolver:
    """Определение получателей уведомлений по приложению"""

    def __init__(self, store: EntityStore):
        self.store = store

    def resolve(
        self,
        app_id: str,
        event_kind: NotificationKind,
        payload: Dict[str, Any]
    ) -> List[NotificationRecord]:
        """Владелец и соавторы приложения, у которых включены уведомления.

        Никогда не бросает исключений: для несуществующего приложения
        возвращается пустой список.
        """
        app = self.store.find_app(app_id)
        if app is None:
            return []

        recipients = [app.owner]
        recipients.extend(
            collaborator.username
            for collaborator in self.store.list_collaborators(app_id)
            if collaborator.username != app.owner
        )

        records = []
        for username in recipients:
            user = self.store.find_user(username)
            if user is None or not user.notify_on_events:
                continue
            records.append(NotificationRecord(
                recipient=user.username,
                email=user.email,
                event_kind=event_kind,
                app_id=app.id,
                app_name=app.name,
                payload=dict(payload)
            ))
        return records


class NotificationSink(Protocol):
    def deliver(self, records: List[NotificationRecord]) -> None:
        ...


class LoggingNotificationSink:
    """Имитация отправки email: пишет уведомления в лог"""

    def deliver(self, records: List[NotificationRecord]) -> None:
        for record in records:
            logger.info(
                f"[EMAIL] To: {record.email} - {record.event_kind.value} "
                f"notification for app \"{record.app_name}\""
            )
