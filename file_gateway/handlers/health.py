"""Проверки готовности и живости."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from file_gateway.handlers import SettingsDep
from file_gateway.storage import list_directory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/readyz", response_class=PlainTextResponse)
async def readyz() -> str:
    """Процесс запущен и принимает соединения."""
    return "ok"


@router.get("/livez", response_class=PlainTextResponse)
async def livez(settings: SettingsDep) -> str:
    """Проверить, что корневая директория доступна для чтения."""
    try:
        list_directory(settings.root_path)
    except OSError as e:
        logger.error("Liveness check failed: %s", e)
        msg = "Cannot read directory"
        raise HTTPException(status_code=500, detail=msg) from e

    return "ok"
