from collabhub.domains.identity.entities import Session, User
from collabhub.domains.identity.schemas import (
    LoginResponse, PreferencesUpdate, UserCreate, UserLogin, UserResponse
)

__all__ = [
    "Session", "User",
    "LoginResponse", "PreferencesUpdate", "UserCreate", "UserLogin", "UserResponse"
]
