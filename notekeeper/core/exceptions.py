import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class NotekeeperError(Exception):
    """Базовая ошибка ядра заметок"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(NotekeeperError):
    """Заметка или пользователь не существует"""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ForbiddenError(NotekeeperError):
    """Политика доступа отказала"""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class ConflictError(NotekeeperError):
    """Конфликт уникальности (регистрация пользователей)"""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(NotekeeperError):
    """Неклассифицированный сбой хранилища"""


@contextmanager
def store_errors(operation: str):
    """Преобразование ошибок SQLAlchemy в InternalError"""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store failure during %s: %s", operation, exc)
        raise InternalError(f"Store failure during {operation}") from exc


def register_exception_handlers(app: FastAPI) -> None:
    """Регистрация обработчиков ошибок с единым форматом ответа"""

    @app.exception_handler(NotekeeperError)
    async def _notekeeper_handler(request: Request, exc: NotekeeperError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"message": "Validation error", "errors": jsonable_encoder(exc.errors())}
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
