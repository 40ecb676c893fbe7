"""WebSocket-канал хаба.

Клиент подключается к /ws, аутентифицируется токеном сессии и подписывается
на одно приложение. Ошибки обработки сообщения отправляются только автору
сообщения и не попадают к остальным подписчикам.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from collabhub.core.errors import HubError, InvalidInput, Unauthorized
from collabhub.core.hub import Hub
from collabhub.core.pipeline import parse_command
from collabhub.domains.apps.policy import Action
from collabhub.domains.apps.schemas import (
    AppResponse, AppUpdate, CollaboratorCreate, CollaboratorResponse,
    CommentCreate, CommentResponse
)
from collabhub.domains.apps.services import AppService, CollaboratorService, CommentService
from collabhub.domains.identity.services import IdentityService
from collabhub.realtime.registry import Connection
from collabhub.realtime.schemas import AuthPayload, ClientMessage, SubscribePayload

logger = logging.getLogger(__name__)

router = APIRouter()


class AppScoped(BaseModel):
    app_id: str = Field(..., min_length=1)


class CommentMessage(AppScoped, CommentCreate):
    pass


class CollaboratorMessage(AppScoped, CollaboratorCreate):
    pass


class AppUpdateMessage(AppScoped, AppUpdate):
    pass


class RealtimeSession:
    """Обработка сообщений одного WebSocket-соединения"""

    def __init__(self, hub: Hub, websocket: WebSocket, connection_id: str):
        self.hub = hub
        self.websocket = websocket
        self.connection_id = connection_id

    @property
    def username(self) -> Optional[str]:
        connection = self.hub.registry.get(self.connection_id)
        return connection.username if connection else None

    async def send(self, message_type: str, data: Dict[str, Any]) -> None:
        await self.websocket.send_text(json.dumps({
            "type": message_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data
        }))

    async def handle(self, raw: str) -> None:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            await self.send("error", InvalidInput("Message is not valid JSON").to_dict())
            return

        try:
            message = parse_command(ClientMessage, payload)
            await self.dispatch(message)
        except HubError as e:
            logger.info(f"Realtime {e.kind} on {self.connection_id}: {e.message}")
            await self.send("error", e.to_dict())

    async def dispatch(self, message: ClientMessage) -> None:
        if message.type == "auth":
            command = parse_command(AuthPayload, message.data)
            user = IdentityService(self.hub).resolve_session(command.token)
            connection = self.hub.registry.authenticate(self.connection_id, user.username)
            self._recheck_subscription(connection)
            await self.send("auth", {"status": "success", "username": user.username})

        elif message.type == "subscribe":
            command = parse_command(SubscribePayload, message.data)
            AppService(self.hub).get_app(self.username, command.app_id)
            self.hub.registry.subscribe(self.connection_id, command.app_id)
            await self.send("subscribed", {"app_id": command.app_id})

        elif message.type == "comment":
            command = parse_command(CommentMessage, message.data)
            comment = CommentService(self.hub).post_comment(
                self._require_user(), command.app_id, CommentCreate(text=command.text)
            )
            await self.send("ack", {
                "action": message.type,
                "comment": CommentResponse.model_validate(comment).model_dump(mode="json")
            })

        elif message.type == "collaborator_added":
            command = parse_command(CollaboratorMessage, message.data)
            collaborator = CollaboratorService(self.hub).add_collaborator(
                self._require_user(),
                command.app_id,
                CollaboratorCreate(username=command.username, role=command.role)
            )
            await self.send("ack", {
                "action": message.type,
                "collaborator": CollaboratorResponse.model_validate(collaborator).model_dump(mode="json")
            })

        elif message.type == "app_updated":
            command = parse_command(AppUpdateMessage, message.data)
            app = AppService(self.hub).update_app(
                self._require_user(),
                command.app_id,
                AppUpdate(**command.model_dump(exclude={"app_id"}, exclude_none=True))
            )
            await self.send("ack", {
                "action": message.type,
                "app": AppResponse.model_validate(app).model_dump(mode="json")
            })

        elif message.type == "ping":
            await self.send("pong", {})

        else:
            raise InvalidInput(f"Unknown message type '{message.type}'")

    def _recheck_subscription(self, connection: Connection) -> None:
        """Подписка сохраняется, только если новый пользователь видит приложение"""
        if connection.app_id is None:
            return
        app = self.hub.store.find_app(connection.app_id)
        if app is None or not self.hub.policy.can_perform(connection.username, app, Action.VIEW):
            self.hub.registry.unsubscribe(self.connection_id)

    def _require_user(self) -> str:
        username = self.username
        if username is None:
            raise Unauthorized("Authenticate before sending events")
        return username


@router.websocket("/ws")
async def realtime_endpoint(websocket: WebSocket):
    """WebSocket эндпоинт для realtime-обновлений приложений"""
    hub: Hub = websocket.app.state.hub

    await websocket.accept()
    connection_id = hub.registry.register(websocket)
    session = RealtimeSession(hub, websocket, connection_id)

    try:
        await session.send("connected", {"connection_id": connection_id})

        while True:
            raw = await websocket.receive_text()
            await session.handle(raw)

    except WebSocketDisconnect:
        logger.info(f"Client {connection_id} disconnected")

    finally:
        hub.registry.unregister(connection_id)
