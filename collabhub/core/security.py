import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from passlib.context import CryptContext

from collabhub.core.config import settings


def build_password_context(rounds: Optional[int] = None) -> CryptContext:
    """Контекст для хеширования паролей"""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds or settings.bcrypt_rounds,
    )


def _bcrypt_secret(password: str) -> bytes:
    # bcrypt имеет ограничение 72 байта, обрезаем пароль в UTF-8
    return password.encode("utf-8")[:72]


def get_password_hash(pwd_context: CryptContext, password: str) -> str:
    """Хеширование пароля"""
    return pwd_context.hash(_bcrypt_secret(password))


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    return pwd_context.verify(_bcrypt_secret(plain_password), hashed_password)


def generate_session_token() -> str:
    """Непрозрачный токен сессии"""
    return secrets.token_urlsafe(32)


def is_session_expired(created_at: datetime, ttl_minutes: int, now: Optional[datetime] = None) -> bool:
    """Проверка истечения срока жизни сессии"""
    now = now or datetime.now(timezone.utc)
    return now - created_at > timedelta(minutes=ttl_minutes)
