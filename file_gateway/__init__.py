"""Пакет приложения File Gateway."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from file_gateway.handlers import files, health, upload
from file_gateway.settings import Settings, get_settings


async def plain_text_http_error(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Отдать HTTP-ошибку простым текстом: тело ответа равно ``detail``."""
    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=exc.headers
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Создать приложение, работающее с заданной корневой директорией.

    Args:
        settings: Настройки; по умолчанию читаются из окружения

    Returns:
        Настроенное приложение FastAPI

    """
    settings = settings or get_settings()

    # Все пути принадлежат файловой системе, поэтому документация отключена
    app = FastAPI(
        title="File Gateway",
        description="Browse, upload and delete files under a root directory",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    # Включение CORS для фронтенд-приложений
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, plain_text_http_error)

    # Проверки регистрируются раньше маршрутов, захватывающих любой путь
    app.include_router(health.router)
    app.include_router(upload.router)
    app.include_router(files.router)

    return app


__all__ = ["Settings", "create_app"]
