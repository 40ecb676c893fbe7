from fastapi import APIRouter, Depends, Response, status
from fastapi.security import HTTPAuthorizationCredentials

from collabhub.api.deps import get_current_user, get_hub, security
from collabhub.core.hub import Hub
from collabhub.domains.identity.entities import User
from collabhub.domains.identity.schemas import LoginResponse, UserCreate, UserLogin, UserResponse
from collabhub.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, hub: Hub = Depends(get_hub)):
    """Регистрация нового пользователя"""
    user = IdentityService(hub).signup(user_data)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(login_data: UserLogin, hub: Hub = Depends(get_hub)):
    """Вход пользователя"""
    identity_service = IdentityService(hub)
    session = identity_service.login(login_data)
    user = hub.store.get_user(session.username)

    return LoginResponse(token=session.token, user=UserResponse.model_validate(user))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Выход пользователя, токен сессии больше не действует"""
    IdentityService(hub).logout(credentials.credentials)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
