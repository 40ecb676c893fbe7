import logging
from typing import List, Optional

from collabhub.core.errors import Forbidden, InvalidInput
from collabhub.core.pipeline import MutationPipeline
from collabhub.domains.apps.entities import App, Collaborator, Comment
from collabhub.domains.apps.policy import Action
from collabhub.domains.apps.schemas import (
    AppCreate, AppResponse, AppUpdate, CollaboratorCreate, CollaboratorResponse,
    CommentCreate, CommentResponse, CommentUpdate
)
from collabhub.notifications.resolver import NotificationKind

logger = logging.getLogger(__name__)


class AppService(MutationPipeline):
    """Сервис для работы с приложениями"""

    def list_apps(self, actor: Optional[str]) -> List[App]:
        """Приложения, которыми пользователь владеет или в которых участвует"""
        actor = self.require_actor(actor)
        return self.store.list_apps_for_user(actor)

    def get_app(self, actor: Optional[str], app_id: str) -> App:
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.VIEW)
        return app

    def create_app(self, actor: Optional[str], app_data: AppCreate) -> App:
        actor = self.require_actor(actor)
        app = self.store.create_app(
            name=app_data.name,
            owner=actor,
            description=app_data.description,
            visibility=app_data.visibility,
            realtime_enabled=app_data.realtime_enabled
        )

        logger.info(f"App created: {app.name} by {actor}")
        return app

    def update_app(self, actor: Optional[str], app_id: str, update_data: AppUpdate) -> App:
        """Обновление приложения владельцем или соавтором с правом записи"""
        actor = self.require_actor(actor)
        changes = update_data.model_dump(exclude_none=True)
        if not changes:
            raise InvalidInput("Nothing to update")

        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.EDIT)

        app = self.store.update_app(app_id, **changes)

        self.emit(app, "app_updated", {
            "updates": update_data.model_dump(mode="json", exclude_none=True),
            "app": AppResponse.model_validate(app).model_dump(mode="json")
        })
        self.revoke_subscriptions(app)
        logger.info(f"App updated: {app_id} by {actor}")
        return app

    def delete_app(self, actor: Optional[str], app_id: str) -> App:
        """Удаление приложения вместе с комментариями и соавторами"""
        actor = self.require_actor(actor)
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.DELETE, "Only the owner can delete this app")

        app = self.store.delete_app(app_id)

        self.emit(app, "app_deleted", {"name": app.name})
        logger.info(f"App deleted: {app_id}")
        return app


class CommentService(MutationPipeline):
    """Сервис для работы с комментариями"""

    def list_comments(self, actor: Optional[str], app_id: str) -> List[Comment]:
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.VIEW)
        return self.store.list_comments(app_id)

    def post_comment(self, actor: Optional[str], app_id: str, comment_data: CommentCreate) -> Comment:
        actor = self.require_actor(actor)
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.COMMENT, "Not allowed to comment on this app")

        comment = self.store.add_comment(app_id, actor, comment_data.text)

        payload = CommentResponse.model_validate(comment).model_dump(mode="json")
        self.emit(
            app, "new_comment", {"comment": payload},
            notification_kind=NotificationKind.COMMENT,
            notification_payload=payload
        )
        return comment

    def edit_comment(self, actor: Optional[str], comment_id: int, comment_data: CommentUpdate) -> Comment:
        actor = self.require_actor(actor)
        comment = self.store.find_comment(comment_id)
        app = self.store.get_app(comment.app_id)
        self._authorize_modification(actor, app, comment)

        comment = self.store.update_comment(comment_id, comment_data.text)

        payload = CommentResponse.model_validate(comment).model_dump(mode="json")
        self.emit(app, "comment_updated", {"comment": payload})
        return comment

    def delete_comment(self, actor: Optional[str], comment_id: int) -> Comment:
        actor = self.require_actor(actor)
        comment = self.store.find_comment(comment_id)
        app = self.store.get_app(comment.app_id)
        self._authorize_modification(actor, app, comment)

        comment = self.store.delete_comment(comment_id)

        self.emit(app, "comment_deleted", {"comment_id": comment.id})
        return comment

    def _authorize_modification(self, actor: str, app: App, comment: Comment) -> None:
        if not self.policy.can_modify_comment(actor, app, comment):
            raise Forbidden("Not authorized")


class CollaboratorService(MutationPipeline):
    """Сервис для управления соавторами приложения"""

    def list_collaborators(self, actor: Optional[str], app_id: str) -> List[Collaborator]:
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.VIEW)
        return self.store.list_collaborators(app_id)

    def add_collaborator(
        self,
        actor: Optional[str],
        app_id: str,
        collaborator_data: CollaboratorCreate
    ) -> Collaborator:
        actor = self.require_actor(actor)
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.MANAGE_COLLABORATORS, "Only owner can add collaborators")

        if collaborator_data.username == app.owner:
            raise InvalidInput("Owner cannot be added as a collaborator")
        self.store.get_user(collaborator_data.username)

        collaborator = self.store.add_collaborator(
            app_id,
            collaborator_data.username,
            role=collaborator_data.role,
            added_by=actor
        )

        data = {"username": collaborator.username, "role": collaborator.role.value}
        self.emit(
            app, "collaborator_added", data,
            notification_kind=NotificationKind.COLLABORATOR,
            notification_payload=CollaboratorResponse.model_validate(collaborator).model_dump(mode="json")
        )
        logger.info(f"[COLLAB] {collaborator.username} added to {app.name} as {collaborator.role.value}")
        return collaborator

    def remove_collaborator(self, actor: Optional[str], app_id: str, username: str) -> Collaborator:
        actor = self.require_actor(actor)
        app = self.store.get_app(app_id)
        self.authorize(actor, app, Action.MANAGE_COLLABORATORS, "Only owner can remove collaborators")

        collaborator = self.store.remove_collaborator(app_id, username)

        self.emit(app, "collaborator_removed", {"username": username})
        self.revoke_subscriptions(app)
        logger.info(f"[COLLAB] {username} removed from {app.name}")
        return collaborator
