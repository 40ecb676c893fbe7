from fastapi import status


class HubError(Exception):
    """Базовая ошибка конвейера мутаций"""

    kind = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class InvalidInput(HubError):
    kind = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(HubError):
    """Неверные учетные данные или недействительная сессия"""

    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(HubError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(HubError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(HubError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
