"""Обработчики HTTP-маршрутов."""

from typing import Annotated

from fastapi import Depends, Request

from file_gateway.settings import Settings


def app_settings(request: Request) -> Settings:
    """Получить неизменяемые настройки, переданные при создании приложения."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(app_settings)]
