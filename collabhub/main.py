from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from collabhub import __version__
from collabhub.api.http import (
    apps_router, auth_router, collaborators_router, comments_router, health_router
)
from collabhub.api.ws.realtime import router as websocket_router
from collabhub.core.config import Settings, settings as default_settings
from collabhub.core.errors import HubError, Unauthorized
from collabhub.core.hub import Hub
from collabhub.core.logging import setup_logging
from collabhub.notifications.resolver import NotificationSink


async def hub_error_handler(request: Request, exc: HubError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[NotificationSink] = None
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Хаб живет ровно столько, сколько приложение
        hub = Hub(settings=settings, notifier=notifier)
        app.state.hub = hub
        await hub.start()
        try:
            yield
        finally:
            await hub.stop()

    app = FastAPI(
        title=settings.app_name,
        description="Realtime collaboration hub for hosted apps",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HubError, hub_error_handler)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(apps_router, prefix=settings.api_prefix)
    app.include_router(comments_router, prefix=settings.api_prefix)
    app.include_router(collaborators_router, prefix=settings.api_prefix)
    app.include_router(websocket_router)

    return app


app = create_app()
