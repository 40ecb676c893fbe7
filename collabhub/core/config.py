from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "CollabHub"
    api_prefix: str = "/api"
    cors_origins: List[str] = ["*"]

    # Сессии не имеют встроенного срока жизни, поэтому задаем его явно
    session_ttl_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = 12

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
