from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collabhub.domains.apps.entities import Role, Visibility


def _not_blank(v: Optional[str], field: str) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(f'{field} cannot be empty')
    return v.strip() if v is not None else v


class AppCreate(BaseModel):
    """Схема для создания приложения"""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=2000)
    visibility: Visibility = Visibility.PUBLIC
    realtime_enabled: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _not_blank(v, 'Name')


class AppUpdate(BaseModel):
    """Схема для обновления приложения, владелец не меняется"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    visibility: Optional[Visibility] = None
    realtime_enabled: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _not_blank(v, 'Name')


class AppResponse(BaseModel):
    id: str
    name: str
    description: str
    owner: str
    visibility: Visibility
    realtime_enabled: bool
    url: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        # Текст хранится как есть, без обрезки пробелов
        _not_blank(v, 'Comment text')
        return v


class CommentUpdate(CommentCreate):
    pass


class CommentResponse(BaseModel):
    id: int
    app_id: str
    author: str
    text: str
    timestamp: datetime
    edited: bool
    edited_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CollaboratorCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.READ


class CollaboratorResponse(BaseModel):
    app_id: str
    username: str
    role: Role
    added_by: Optional[str] = None
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)
