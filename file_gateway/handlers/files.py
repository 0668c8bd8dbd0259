"""Обработчики для просмотра, скачивания и удаления файлов."""

import logging
import os
import stat
from email.utils import parsedate

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from starlette.datastructures import Headers
from starlette.staticfiles import NotModifiedResponse

from file_gateway.handlers import SettingsDep
from file_gateway.listing import render_listing
from file_gateway.paths import PathOutsideRootError, is_root, resolve_virtual_path
from file_gateway.storage import list_directory, remove_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

# Пути, удаление которых запрещено без разрешения
WILDCARD_PATHS = frozenset({"/", "", "*", "/*"})

# Не блокироваться на FIFO и прочих специальных файлах
_OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0)


# Логика из starlette.staticfiles.StaticFiles.is_not_modified, плюс If-None-Match: *
def is_not_modified(response_headers: Headers, request_headers: Headers) -> bool:
    """Проверить, можно ли ответить 304 вместо содержимого файла.

    Args:
        response_headers: Заголовки подготовленного ответа с ETag
            и Last-Modified
        request_headers: Заголовки запроса

    Returns:
        True, если у клиента актуальная копия

    """
    if if_none_match := request_headers.get("if-none-match"):
        if if_none_match.strip() == "*":
            return True
        etag = response_headers["etag"]
        return etag in [tag.strip().removeprefix("W/") for tag in if_none_match.split(",")]

    if_modified_since = request_headers.get("if-modified-since")
    last_modified = response_headers.get("last-modified")
    if if_modified_since and last_modified:
        since = parsedate(if_modified_since)
        modified = parsedate(last_modified)
        return since is not None and modified is not None and since >= modified

    return False


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD"],
    response_model=None,
)
async def browse(path: str, request: Request, settings: SettingsDep) -> Response:
    """Показать содержимое директории или отдать файл.

    Args:
        path: Виртуальный путь относительно корневой директории
        request: Входящий запрос (нужны условные заголовки)
        settings: Настройки приложения

    Returns:
        HTML со списком элементов для директории или содержимое файла

    """
    try:
        target = resolve_virtual_path(settings.root_path, path)
    except PathOutsideRootError as e:
        msg = "File not found"
        raise HTTPException(status_code=404, detail=msg) from e

    try:
        fd = os.open(target, _OPEN_FLAGS)
    except OSError as e:
        msg = "File not found"
        raise HTTPException(status_code=404, detail=msg) from e

    try:
        file_stat = os.fstat(fd)
    except OSError as e:
        logger.error("Error getting file info for %s: %s", target, e)
        msg = "Error getting file info"
        raise HTTPException(status_code=500, detail=msg) from e
    finally:
        os.close(fd)

    if stat.S_ISDIR(file_stat.st_mode):
        try:
            entries = list_directory(target)
        except OSError as e:
            logger.error("Error reading directory %s: %s", target, e)
            msg = "Error reading directory"
            raise HTTPException(status_code=500, detail=msg) from e
        title = str(settings.root_path / path.lstrip("/"))
        return HTMLResponse(render_listing(title, entries))

    if not stat.S_ISREG(file_stat.st_mode):
        msg = "File not found"
        raise HTTPException(status_code=404, detail=msg)

    response = FileResponse(target, stat_result=file_stat)
    if is_not_modified(response.headers, request.headers):
        return NotModifiedResponse(response.headers)
    return response


@router.delete("/{path:path}", response_class=PlainTextResponse)
async def delete(path: str, request: Request, settings: SettingsDep) -> str:
    """Удалить файл или директорию (рекурсивно).

    Корень и пути с подстановочными символами не удаляются никогда.
    Символическая ссылка удаляется сама, без перехода по ней.
    """
    if request.url.path in WILDCARD_PATHS or path in WILDCARD_PATHS:
        msg = "Refusing to delete root or wildcard path"
        raise HTTPException(status_code=403, detail=msg)

    root = settings.root_path
    try:
        target = resolve_virtual_path(root, path, follow_symlinks=False)
    except PathOutsideRootError as e:
        msg = "Refusing to delete outside root directory"
        raise HTTPException(status_code=403, detail=msg) from e

    if is_root(root, target):
        msg = "Refusing to delete root directory"
        raise HTTPException(status_code=403, detail=msg)

    try:
        target.lstat()
    except (OSError, ValueError) as e:
        msg = "File or directory not found"
        raise HTTPException(status_code=404, detail=msg) from e

    try:
        remove_path(target)
    except OSError as e:
        logger.error("Error deleting %s: %s", target, e)
        msg = "Unable to delete"
        raise HTTPException(status_code=500, detail=msg) from e

    logger.info("Deleted: %s", target)
    return "Deleted"
