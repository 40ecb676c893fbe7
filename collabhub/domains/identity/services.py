import logging

from collabhub.core.errors import Conflict, NotFound, Unauthorized
from collabhub.core.hub import Hub
from collabhub.core.security import generate_session_token, is_session_expired
from collabhub.domains.identity.entities import Session, User
from collabhub.domains.identity.schemas import PreferencesUpdate, UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Регистрация, вход и проверка сессий"""

    def __init__(self, hub: Hub):
        self.hub = hub
        self.store = hub.store

    def signup(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""
        if self.store.has_user(user_data.username):
            raise Conflict("Username already exists")

        user = User.create_user(
            self.hub.pwd_context,
            username=user_data.username,
            email=user_data.email,
            password=user_data.password,
            notify_on_events=user_data.notify_on_events
        )
        self.store.add_user(user)

        logger.info(f"User signed up: {user.username}")
        return user

    def login(self, login_data: UserLogin) -> Session:
        """Вход пользователя и создание сессии"""
        user = self.store.find_user(login_data.username)

        if not user or not user.authenticate(self.hub.pwd_context, login_data.password):
            raise Unauthorized("Invalid credentials")

        session = self.store.create_session(generate_session_token(), user.username)

        logger.info(f"User logged in: {user.username}")
        return session

    def logout(self, token: str) -> bool:
        return self.store.delete_session(token)

    def resolve_session(self, token: str) -> User:
        """Пользователь по токену сессии"""
        try:
            session = self.store.get_session(token)
        except NotFound:
            raise Unauthorized("Invalid or expired session")

        if is_session_expired(session.created_at, self.hub.settings.session_ttl_minutes):
            self.store.delete_session(token)
            logger.info(f"Session for {session.username} expired")
            raise Unauthorized("Invalid or expired session")

        return self.store.get_user(session.username)

    def update_preferences(self, username: str, preferences: PreferencesUpdate) -> User:
        return self.store.update_user_preferences(username, preferences.notify_on_events)
