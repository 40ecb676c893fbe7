"""Общая часть обработчиков мутаций.

Каждый обработчик выполняет этапы по порядку: проверка входных данных,
проверка существования, авторизация, изменение хранилища и рассылка.
Ошибка на любом этапе прерывает обработку, рассылки и уведомлений не будет.
"""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from collabhub.core.errors import Forbidden, InvalidInput, Unauthorized
from collabhub.core.hub import Hub
from collabhub.domains.apps.entities import App
from collabhub.domains.apps.policy import Action
from collabhub.notifications.resolver import NotificationKind, NotificationRecord
from collabhub.realtime.schemas import RealtimeEvent

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_command(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Разбор входных данных в типизированную команду"""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = f"{location}: {error['msg']}" if location else error["msg"]
        raise InvalidInput(message)


class MutationPipeline:
    """Базовый класс сервисов, изменяющих состояние хаба"""

    def __init__(self, hub: Hub):
        self.hub = hub
        self.store = hub.store
        self.policy = hub.policy

    def require_actor(self, actor: Optional[str]) -> str:
        if not actor:
            raise Unauthorized("Authentication required")
        return actor

    def authorize(self, actor: Optional[str], app: App, action: Action, message: str = "Not authorized") -> None:
        if not self.policy.can_perform(actor, app, action):
            logger.info(f"Denied {action.value} on {app.id} for {actor}")
            raise Forbidden(message)

    def emit(
        self,
        app: App,
        event_type: str,
        data: Dict[str, Any],
        notification_kind: Optional[NotificationKind] = None,
        notification_payload: Optional[Dict[str, Any]] = None
    ) -> List[NotificationRecord]:
        """Рассылка события и уведомлений по состоянию после мутации"""
        event = RealtimeEvent(type=event_type, data={"app_id": app.id, **data})
        self.hub.dispatcher.broadcast_to_topic(app.id, event)

        if notification_kind is None:
            return []

        records = self.hub.resolver.resolve(
            app.id, notification_kind, notification_payload or data
        )
        if records:
            self.hub.notifier.deliver(records)
        return records

    def revoke_subscriptions(self, app: App) -> None:
        """Отписка соединений, потерявших право просмотра приложения"""
        removed = self.hub.registry.prune_subscribers(
            app.id, lambda connection: self.policy.can_perform(connection.username, app, Action.VIEW)
        )
        for connection in removed:
            logger.info(f"Connection {connection.connection_id} unsubscribed from {app.id}, access revoked")
