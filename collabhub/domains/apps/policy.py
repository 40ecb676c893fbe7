"""Правила доступа к приложениям.

Политика ничего не меняет в хранилище: при одинаковом состоянии
хранилища она всегда возвращает одинаковый ответ.
"""
from enum import Enum
from typing import TYPE_CHECKING, Optional

from collabhub.domains.apps.entities import App, Comment, Role

if TYPE_CHECKING:
    from collabhub.db.store import EntityStore


class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_COLLABORATORS = "manage_collaborators"
    COMMENT = "comment"
    MODERATE_COMMENTS = "moderate_comments"


OWNER_ONLY_ACTIONS = frozenset({Action.DELETE, Action.MANAGE_COLLABORATORS})
EDITOR_ROLES = frozenset({Role.WRITE, Role.ADMIN})


class AccessPolicy:
    """Проверка прав пользователя на действие с приложением"""

    def __init__(self, store: "EntityStore"):
        self.store = store

    def can_perform(self, actor: Optional[str], app: App, action: Action) -> bool:
        if app.is_owner(actor):
            return True

        if action in OWNER_ONLY_ACTIONS:
            return False

        collaborator = self.store.get_collaborator(app.id, actor)

        if action == Action.MODERATE_COMMENTS:
            return collaborator is not None and collaborator.role == Role.ADMIN

        if action in (Action.COMMENT, Action.VIEW):
            return app.is_public or collaborator is not None

        if action == Action.EDIT:
            return collaborator is not None and collaborator.role in EDITOR_ROLES

        return False

    def can_modify_comment(self, actor: Optional[str], app: App, comment: Comment) -> bool:
        """Автор всегда может править и удалять свой комментарий"""
        if actor is not None and comment.author == actor:
            return True
        return self.can_perform(actor, app, Action.MODERATE_COMMENTS)
