from datetime import datetime, timezone
from typing import Optional

from passlib.context import CryptContext

from collabhub.core.security import get_password_hash, verify_password


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        username: str,
        email: str,
        password_hash: str,
        notify_on_events: bool = True,
        created_at: Optional[datetime] = None
    ):
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.notify_on_events = notify_on_events
        self.created_at = created_at or datetime.now(timezone.utc)

    def authenticate(self, pwd_context: CryptContext, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(pwd_context, password, self.password_hash)

    def set_notification_preference(self, notify_on_events: bool) -> None:
        self.notify_on_events = notify_on_events

    @classmethod
    def create_user(
        cls,
        pwd_context: CryptContext,
        username: str,
        email: str,
        password: str,
        notify_on_events: bool = True
    ) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            username=username,
            email=email,
            password_hash=get_password_hash(pwd_context, password),
            notify_on_events=notify_on_events
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.username == other.username

    def __repr__(self) -> str:
        return f"User(username={self.username}, email={self.email})"


class Session:
    """Сессия входа пользователя"""

    def __init__(self, token: str, username: str, created_at: Optional[datetime] = None):
        self.token = token
        self.username = username
        self.created_at = created_at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"Session(username={self.username}, created_at={self.created_at.isoformat()})"
