import logging
import uuid
from typing import Callable, Dict, List, Optional, Set

from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)


class Connection:
    """Активное realtime-соединение"""

    def __init__(self, connection_id: str, websocket: WebSocket):
        self.connection_id = connection_id
        self.websocket = websocket
        self.username: Optional[str] = None
        self.app_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def __repr__(self) -> str:
        return f"Connection(id={self.connection_id}, username={self.username}, app_id={self.app_id})"


class ConnectionRegistry:
    """Реестр соединений, их пользователей и подписок на приложения"""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        # username -> connection_id последнего аутентифицированного соединения
        self._users: Dict[str, str] = {}
        # app_id -> {connection_id}
        self._topics: Dict[str, Set[str]] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def register(self, websocket: WebSocket) -> str:
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = Connection(connection_id, websocket)
        logger.info(f"Connection {connection_id} registered")
        return connection_id

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def authenticate(self, connection_id: str, username: str) -> Connection:
        """Привязка пользователя к соединению.

        Сообщения для пользователя получает только последнее соединение,
        прошедшее аутентификацию.
        """
        connection = self._require(connection_id)
        if connection.username and self._users.get(connection.username) == connection_id:
            del self._users[connection.username]
        connection.username = username
        self._users[username] = connection_id
        logger.info(f"Connection {connection_id} authenticated as {username}")
        return connection

    def subscribe(self, connection_id: str, app_id: str) -> Connection:
        """Подписка на приложение заменяет предыдущую подписку соединения"""
        connection = self._require(connection_id)
        self._drop_topic(connection)
        connection.app_id = app_id
        self._topics.setdefault(app_id, set()).add(connection_id)
        return connection

    def unsubscribe(self, connection_id: str) -> None:
        self._drop_topic(self._require(connection_id))

    def prune_subscribers(self, app_id: str, keep: Callable[[Connection], bool]) -> List[Connection]:
        """Снятие с подписки соединений, не прошедших проверку"""
        removed = [connection for connection in self.subscribers(app_id) if not keep(connection)]
        for connection in removed:
            self._drop_topic(connection)
        return removed

    def unregister(self, connection_id: str) -> None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return

        self._drop_topic(connection)
        if connection.username and self._users.get(connection.username) == connection_id:
            del self._users[connection.username]
        logger.info(f"Connection {connection_id} unregistered")

    def subscribers(self, app_id: str) -> List[Connection]:
        return [self._connections[cid] for cid in self._topics.get(app_id, ())]

    def connection_for_user(self, username: str) -> Optional[Connection]:
        connection_id = self._users.get(username)
        if connection_id is None:
            return None
        return self._connections.get(connection_id)

    def _require(self, connection_id: str) -> Connection:
        connection = self._connections.get(connection_id)
        if connection is None:
            raise KeyError(f"Unknown connection {connection_id}")
        return connection

    def _drop_topic(self, connection: Connection) -> None:
        if connection.app_id is None:
            return
        members = self._topics.get(connection.app_id)
        if members is not None:
            members.discard(connection.connection_id)
            if not members:
                del self._topics[connection.app_id]
        connection.app_id = None
