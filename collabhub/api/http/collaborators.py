from typing import List, Optional

from fastapi import APIRouter, Depends, status

from collabhub.api.deps import get_current_user, get_hub, get_optional_user, username_of
from collabhub.core.hub import Hub
from collabhub.domains.apps.schemas import CollaboratorCreate, CollaboratorResponse
from collabhub.domains.apps.services import CollaboratorService
from collabhub.domains.identity.entities import User

router = APIRouter(prefix="/collaborators", tags=["collaborators"])


@router.get("/{app_id}", response_model=List[CollaboratorResponse])
async def list_collaborators(
    app_id: str,
    user: Optional[User] = Depends(get_optional_user),
    hub: Hub = Depends(get_hub)
):
    collaborators = CollaboratorService(hub).list_collaborators(username_of(user), app_id)
    return [CollaboratorResponse.model_validate(c) for c in collaborators]


@router.post("/{app_id}", response_model=CollaboratorResponse, status_code=status.HTTP_201_CREATED)
async def add_collaborator(
    app_id: str,
    collaborator_data: CollaboratorCreate,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Добавление соавтора, доступно только владельцу"""
    collaborator = CollaboratorService(hub).add_collaborator(user.username, app_id, collaborator_data)
    return CollaboratorResponse.model_validate(collaborator)


@router.delete("/{app_id}/{username}")
async def remove_collaborator(
    app_id: str,
    username: str,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Удаление соавтора, доступно только владельцу"""
    CollaboratorService(hub).remove_collaborator(user.username, app_id, username)
    return {"success": True}
