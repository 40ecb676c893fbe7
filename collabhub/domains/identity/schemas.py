from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Базовая схема пользователя"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.replace('_', '').replace('-', '').isalnum():
            raise ValueError('Username must contain only alphanumeric characters, underscores, and hyphens')
        return v


class UserCreate(UserBase):
    """Схема для регистрации пользователя"""
    password: str = Field(..., min_length=1, max_length=128)
    notify_on_events: bool = True


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PreferencesUpdate(BaseModel):
    notify_on_events: bool


class UserResponse(UserBase):
    """Схема для ответа с данными пользователя"""
    notify_on_events: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Токен сессии и данные пользователя"""
    token: str
    token_type: str = "bearer"
    user: UserResponse
