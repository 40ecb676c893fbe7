import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Настройка корневого логгера приложения"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # uvicorn.access дублирует каждую строку запроса, оставляем только предупреждения
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
