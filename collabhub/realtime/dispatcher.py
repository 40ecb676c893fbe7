"""Рассылка доменных событий по соединениям.

Адресаты и содержимое события фиксируются в момент мутации: событие
сериализуется, а список соединений берётся из реестра при постановке в
очередь. Одна FIFO-очередь сохраняет порядок рассылок. Доставка best-effort:
закрытые и уже снятые с учёта соединения пропускаются.
"""
import asyncio
import contextlib
import json
import logging
from typing import List, Optional, Tuple

from collabhub.realtime.registry import Connection, ConnectionRegistry
from collabhub.realtime.schemas import RealtimeEvent

logger = logging.getLogger(__name__)

Delivery = Tuple[Tuple[str, ...], str]


class BroadcastDispatcher:
    """Рассылка событий подписчикам приложения и отдельным пользователям"""

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self._queue: "asyncio.Queue[Delivery]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def broadcast_to_topic(self, app_id: str, event: RealtimeEvent) -> None:
        recipients = [connection.connection_id for connection in self.registry.subscribers(app_id)]
        self._enqueue(recipients, event)

    def send_to_user(self, username: str, event: RealtimeEvent) -> None:
        connection = self.registry.connection_for_user(username)
        if connection is None:
            logger.debug(f"No open connection for user {username}, message dropped")
            return
        self._enqueue([connection.connection_id], event)

    def _enqueue(self, recipients: List[str], event: RealtimeEvent) -> None:
        if not recipients:
            return
        message = json.dumps(event.model_dump(mode="json"))
        self._queue.put_nowait((tuple(recipients), message))

    async def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run(), name="broadcast-dispatcher")
            logger.info("Broadcast dispatcher started")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
        logger.info("Broadcast dispatcher stopped")

    async def flush(self) -> None:
        """Доставка всех ожидающих событий без фонового воркера"""
        while not self._queue.empty():
            delivery = self._queue.get_nowait()
            try:
                await self._deliver(delivery)
            finally:
                self._queue.task_done()

    async def _run(self) -> None:
        while True:
            delivery = await self._queue.get()
            try:
                await self._deliver(delivery)
            except Exception:
                # Воркер продолжает обслуживать очередь
                logger.exception("Broadcast delivery failed")
            finally:
                self._queue.task_done()

    async def _deliver(self, delivery: Delivery) -> None:
        recipients, message = delivery
        for connection_id in recipients:
            connection = self.registry.get(connection_id)
            if connection is None:
                continue
            await self._send(connection, message)

    async def _send(self, connection: Connection, message: str) -> None:
        if not connection.is_open:
            return
        try:
            await connection.websocket.send_text(message)
        except Exception as e:
            # Соединение закрылось во время рассылки, остальные получают событие
            logger.warning(f"Delivery to connection {connection.connection_id} failed: {e}")
