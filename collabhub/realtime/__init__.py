from collabhub.realtime.dispatcher import BroadcastDispatcher
from collabhub.realtime.registry import Connection, ConnectionRegistry

__all__ = ["BroadcastDispatcher", "Connection", "ConnectionRegistry"]
