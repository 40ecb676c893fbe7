from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RealtimeEvent(BaseModel):
    """Сообщение, рассылаемое клиентам по WebSocket"""
    type: str
    timestamp: datetime = Field(default_factory=_utcnow)
    data: Dict[str, Any] = Field(default_factory=dict)


class ClientMessage(BaseModel):
    """Сообщение от клиента"""
    type: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class AuthPayload(BaseModel):
    token: str = Field(..., min_length=1)


class SubscribePayload(BaseModel):
    app_id: str = Field(..., min_length=1)
