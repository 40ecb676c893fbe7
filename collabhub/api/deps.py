from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from collabhub.core.errors import Unauthorized
from collabhub.core.hub import Hub
from collabhub.domains.identity.entities import User
from collabhub.domains.identity.services import IdentityService

security = HTTPBearer(auto_error=False)


def get_hub(request: Request) -> Hub:
    return request.app.state.hub


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    hub: Hub = Depends(get_hub)
) -> Optional[User]:
    """Текущий пользователь, если передан токен"""
    if credentials is None:
        return None
    return IdentityService(hub).resolve_session(credentials.credentials)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Зависимость для получения текущего пользователя"""
    if user is None:
        raise Unauthorized("Could not validate credentials")
    return user


def username_of(user: Optional[User]) -> Optional[str]:
    return user.username if user else None
