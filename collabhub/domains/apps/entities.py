from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Visibility(str, Enum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class Role(str, Enum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class App:
    """Приложение, размещенное на платформе"""

    def __init__(
        self,
        id: str,
        name: str,
        owner: str,
        description: str = "",
        visibility: Visibility = Visibility.PUBLIC,
        realtime_enabled: bool = True,
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.description = description
        self._owner = owner
        self.visibility = visibility
        self.realtime_enabled = realtime_enabled
        self.created_at = created_at or datetime.now(timezone.utc)

    @property
    def owner(self) -> str:
        # Владелец не меняется после создания
        return self._owner

    @property
    def url(self) -> str:
        return f"freehost.io/app/{self.name}"

    @property
    def is_public(self) -> bool:
        # unlisted пока трактуется как private
        return self.visibility == Visibility.PUBLIC

    def is_owner(self, username: Optional[str]) -> bool:
        return username is not None and username == self._owner

    def update(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        visibility: Optional[Visibility] = None,
        realtime_enabled: Optional[bool] = None
    ) -> None:
        """Обновление изменяемых полей приложения"""
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if visibility is not None:
            self.visibility = visibility
        if realtime_enabled is not None:
            self.realtime_enabled = realtime_enabled

    def __eq__(self, other) -> bool:
        if not isinstance(other, App):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"App(id={self.id}, name={self.name}, owner={self.owner})"


class Collaborator:
    """Соавтор приложения с ролью"""

    def __init__(
        self,
        app_id: str,
        username: str,
        role: Role = Role.READ,
        added_by: Optional[str] = None,
        added_at: Optional[datetime] = None
    ):
        self.app_id = app_id
        self.username = username
        self.role = role
        self.added_by = added_by
        self.added_at = added_at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"Collaborator(app_id={self.app_id}, username={self.username}, role={self.role.value})"


class Comment:
    """Комментарий к приложению"""

    def __init__(
        self,
        id: int,
        app_id: str,
        author: str,
        text: str,
        timestamp: Optional[datetime] = None,
        edited: bool = False,
        edited_at: Optional[datetime] = None
    ):
        self.id = id
        self.app_id = app_id
        self.author = author
        self.text = text
        self.timestamp = timestamp or datetime.now(timezone.utc)
        self.edited = edited
        self.edited_at = edited_at

    def edit(self, text: str) -> None:
        """Изменение текста комментария"""
        self.text = text
        self.edited = True
        self.edited_at = datetime.now(timezone.utc)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Comment):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Comment(id={self.id}, app_id={self.app_id}, author={self.author})"
