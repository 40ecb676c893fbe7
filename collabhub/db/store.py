"""In-memory хранилище сущностей хаба.

Все операции синхронные: каждая выполняется целиком внутри одного шага
event loop, поэтому отдельные блокировки не нужны. Приложение владеет своими
комментариями и соавторами, удаление приложения удаляет их одним шагом.
"""
import logging
import time
from typing import Dict, List, Optional

from collabhub.core.errors import Conflict, NotFound
from collabhub.domains.apps.entities import App, Collaborator, Comment, Role, Visibility
from collabhub.domains.identity.entities import Session, User

logger = logging.getLogger(__name__)


class MonotonicIdGenerator:
    """Строго возрастающие токены на основе времени в миллисекундах"""

    def __init__(self):
        self._last = 0

    def next(self) -> int:
        token = max(time.time_ns() // 1_000_000, self._last + 1)
        self._last = token
        return token


class EntityStore:
    """Хранилище пользователей, сессий, приложений, комментариев и соавторов"""

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._sessions: Dict[str, Session] = {}
        self._apps: Dict[str, App] = {}
        # app_id -> список комментариев в порядке публикации
        self._comments: Dict[str, List[Comment]] = {}
        # app_id -> {username: Collaborator}
        self._collaborators: Dict[str, Dict[str, Collaborator]] = {}
        # comment_id -> app_id
        self._comment_index: Dict[int, str] = {}
        self._app_ids = MonotonicIdGenerator()
        self._comment_ids = MonotonicIdGenerator()

    # Пользователи

    def add_user(self, user: User) -> User:
        if user.username in self._users:
            raise Conflict("Username already exists")
        self._users[user.username] = user
        return user

    def has_user(self, username: str) -> bool:
        return username in self._users

    def get_user(self, username: str) -> User:
        user = self._users.get(username)
        if user is None:
            raise NotFound(f"User '{username}' not found")
        return user

    def find_user(self, username: str) -> Optional[User]:
        return self._users.get(username)

    def update_user_preferences(self, username: str, notify_on_events: bool) -> User:
        user = self.get_user(username)
        user.set_notification_preference(notify_on_events)
        return user

    # Сессии

    def create_session(self, token: str, username: str) -> Session:
        self.get_user(username)
        if token in self._sessions:
            raise Conflict("Session token already in use")
        session = Session(token=token, username=username)
        self._sessions[token] = session
        return session

    def get_session(self, token: str) -> Session:
        session = self._sessions.get(token)
        if session is None:
            raise NotFound("Session not found")
        return session

    def delete_session(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    # Приложения

    def create_app(
        self,
        name: str,
        owner: str,
        description: str = "",
        visibility: Visibility = Visibility.PUBLIC,
        realtime_enabled: bool = True
    ) -> App:
        self.get_user(owner)
        app_id = f"app-{self._app_ids.next()}"
        while app_id in self._apps:
            app_id = f"app-{self._app_ids.next()}"

        app = App(
            id=app_id,
            name=name,
            owner=owner,
            description=description,
            visibility=visibility,
            realtime_enabled=realtime_enabled
        )
        self._apps[app_id] = app
        self._comments[app_id] = []
        self._collaborators[app_id] = {}
        return app

    def has_app(self, app_id: str) -> bool:
        return app_id in self._apps

    def get_app(self, app_id: str) -> App:
        app = self._apps.get(app_id)
        if app is None:
            raise NotFound("App not found")
        return app

    def find_app(self, app_id: str) -> Optional[App]:
        return self._apps.get(app_id)

    def update_app(self, app_id: str, **changes) -> App:
        app = self.get_app(app_id)
        app.update(**changes)
        return app

    def delete_app(self, app_id: str) -> App:
        """Удаление приложения вместе с комментариями и соавторами"""
        app = self.get_app(app_id)
        comments = self._comments.pop(app_id, [])
        self._collaborators.pop(app_id, None)
        for comment in comments:
            self._comment_index.pop(comment.id, None)
        del self._apps[app_id]
        logger.debug(f"Cascade removed {len(comments)} comments for {app_id}")
        return app

    def list_apps_for_user(self, username: str) -> List[App]:
        """Приложения, которыми пользователь владеет или в которых участвует"""
        return [
            app for app_id, app in self._apps.items()
            if app.owner == username or username in self._collaborators.get(app_id, {})
        ]

    # Комментарии

    def add_comment(self, app_id: str, author: str, text: str) -> Comment:
        self.get_app(app_id)
        comment = Comment(id=self._comment_ids.next(), app_id=app_id, author=author, text=text)
        self._comments[app_id].append(comment)
        self._comment_index[comment.id] = app_id
        return comment

    def list_comments(self, app_id: str) -> List[Comment]:
        self.get_app(app_id)
        return list(self._comments[app_id])

    def find_comment(self, comment_id: int) -> Comment:
        app_id = self._comment_index.get(comment_id)
        if app_id is None:
            raise NotFound("Comment not found")
        for comment in self._comments[app_id]:
            if comment.id == comment_id:
                return comment
        raise NotFound("Comment not found")

    def update_comment(self, comment_id: int, text: str) -> Comment:
        comment = self.find_comment(comment_id)
        comment.edit(text)
        return comment

    def delete_comment(self, comment_id: int) -> Comment:
        comment = self.find_comment(comment_id)
        self._comments[comment.app_id].remove(comment)
        del self._comment_index[comment_id]
        return comment

    # Соавторы

    def list_collaborators(self, app_id: str) -> List[Collaborator]:
        self.get_app(app_id)
        return list(self._collaborators[app_id].values())

    def get_collaborator(self, app_id: str, username: Optional[str]) -> Optional[Collaborator]:
        if username is None:
            return None
        return self._collaborators.get(app_id, {}).get(username)

    def add_collaborator(
        self,
        app_id: str,
        username: str,
        role: Role = Role.READ,
        added_by: Optional[str] = None
    ) -> Collaborator:
        self.get_app(app_id)
        rows = self._collaborators[app_id]
        if username in rows:
            raise Conflict("Already a collaborator")
        collaborator = Collaborator(app_id=app_id, username=username, role=role, added_by=added_by)
        rows[username] = collaborator
        return collaborator

    def remove_collaborator(self, app_id: str, username: str) -> Collaborator:
        self.get_app(app_id)
        collaborator = self._collaborators[app_id].pop(username, None)
        if collaborator is None:
            raise NotFound(f"'{username}' is not a collaborator")
        return collaborator
