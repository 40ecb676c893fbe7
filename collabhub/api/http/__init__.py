from collabhub.api.http.apps import router as apps_router
from collabhub.api.http.auth import router as auth_router
from collabhub.api.http.collaborators import router as collaborators_router
from collabhub.api.http.comments import router as comments_router
from collabhub.api.http.health import router as health_router

__all__ = [
    "health_router",
    "auth_router",
    "apps_router",
    "comments_router",
    "collaborators_router"
]
