from typing import List, Optional

from fastapi import APIRouter, Depends, status

from collabhub.api.deps import get_current_user, get_hub, get_optional_user, username_of
from collabhub.core.hub import Hub
from collabhub.domains.apps.schemas import AppCreate, AppResponse, AppUpdate
from collabhub.domains.apps.services import AppService
from collabhub.domains.identity.entities import User

router = APIRouter(prefix="/apps", tags=["apps"])


@router.get("", response_model=List[AppResponse])
async def list_apps(user: User = Depends(get_current_user), hub: Hub = Depends(get_hub)):
    """Приложения текущего пользователя и те, где он соавтор"""
    apps = AppService(hub).list_apps(user.username)
    return [AppResponse.model_validate(app) for app in apps]


@router.post("", response_model=AppResponse, status_code=status.HTTP_201_CREATED)
async def create_app(
    app_data: AppCreate,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Создание нового приложения"""
    app = AppService(hub).create_app(user.username, app_data)
    return AppResponse.model_validate(app)


@router.get("/{app_id}", response_model=AppResponse)
async def get_app(
    app_id: str,
    user: Optional[User] = Depends(get_optional_user),
    hub: Hub = Depends(get_hub)
):
    app = AppService(hub).get_app(username_of(user), app_id)
    return AppResponse.model_validate(app)


@router.patch("/{app_id}", response_model=AppResponse)
async def update_app(
    app_id: str,
    update_data: AppUpdate,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Обновление приложения"""
    app = AppService(hub).update_app(user.username, app_id, update_data)
    return AppResponse.model_validate(app)


@router.delete("/{app_id}")
async def delete_app(
    app_id: str,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Удаление приложения вместе с комментариями и соавторами"""
    app = AppService(hub).delete_app(user.username, app_id)
    return {"success": True, "id": app.id}
