from typing import List, Optional

from fastapi import APIRouter, Depends, status

from collabhub.api.deps import get_current_user, get_hub, get_optional_user, username_of
from collabhub.core.hub import Hub
from collabhub.domains.apps.schemas import CommentCreate, CommentResponse, CommentUpdate
from collabhub.domains.apps.services import CommentService
from collabhub.domains.identity.entities import User

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{app_id}", response_model=List[CommentResponse])
async def list_comments(
    app_id: str,
    user: Optional[User] = Depends(get_optional_user),
    hub: Hub = Depends(get_hub)
):
    comments = CommentService(hub).list_comments(username_of(user), app_id)
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.post("/{app_id}", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def post_comment(
    app_id: str,
    comment_data: CommentCreate,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Публикация комментария"""
    comment = CommentService(hub).post_comment(user.username, app_id, comment_data)
    return CommentResponse.model_validate(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    """Редактирование комментария автором, владельцем или администратором"""
    comment = CommentService(hub).edit_comment(user.username, comment_id, comment_data)
    return CommentResponse.model_validate(comment)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    hub: Hub = Depends(get_hub)
):
    comment = CommentService(hub).delete_comment(user.username, comment_id)
    return {"success": True, "id": comment.id}
