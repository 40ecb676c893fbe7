from collabhub.domains.apps.entities import App, Collaborator, Comment, Role, Visibility
from collabhub.domains.apps.policy import AccessPolicy, Action
from collabhub.domains.apps.schemas import (
    AppCreate, AppResponse, AppUpdate, CollaboratorCreate, CollaboratorResponse,
    CommentCreate, CommentResponse, CommentUpdate
)

__all__ = [
    "App", "Collaborator", "Comment", "Role", "Visibility",
    "AccessPolicy", "Action",
    "AppCreate", "AppResponse", "AppUpdate", "CollaboratorCreate", "CollaboratorResponse",
    "CommentCreate", "CommentResponse", "CommentUpdate"
]
