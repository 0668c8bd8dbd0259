"""Обработчик загрузки файлов через multipart-форму."""

import logging
from collections.abc import Iterator
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from file_gateway.handlers import SettingsDep
from file_gateway.paths import PathOutsideRootError, resolve_virtual_path
from file_gateway.storage import (
    DestinationCreateError,
    UploadCopyError,
    ensure_directory,
    store_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])

MULTIPART_CONTENT_TYPE = "multipart/form-data"


def iter_uploads(form: FormData) -> Iterator[tuple[str, UploadFile]]:
    """Перебрать загруженные файлы формы.

    Поля идут в порядке первого появления, внутри поля файлы
    идут в порядке следования частей.
    """
    for field in dict.fromkeys(key for key, _ in form.multi_items()):
        for value in form.getlist(field):
            if isinstance(value, UploadFile):
                yield field, value


def directory_name(form: FormData) -> str | None:
    """Получить имя целевой директории из поля ``name``.

    Пустое значение означает корневую директорию.
    """
    names = [value for value in form.getlist("name") if isinstance(value, str)]
    return names[0] if names else None


async def save_uploads(form: FormData, root: Path) -> None:
    """Создать директорию из поля ``name`` и сохранить в нее файлы.

    Запрос прерывается на первой ошибке. Файлы, сохраненные до нее,
    остаются на диске; удаляется только частично записанный файл.

    Args:
        form: Разобранная multipart-форма
        root: Корневая директория

    Raises:
        HTTPException: Ошибка в данных формы или при записи на диск

    """
    dir_name = directory_name(form)
    if dir_name is None:
        msg = "Directory name not provided"
        raise HTTPException(status_code=400, detail=msg)

    try:
        target_dir = resolve_virtual_path(root, dir_name)
    except PathOutsideRootError as e:
        msg = "Invalid directory name"
        raise HTTPException(status_code=400, detail=msg) from e

    try:
        created = ensure_directory(target_dir)
    except OSError as e:
        logger.error("Error creating directory %s: %s", target_dir, e)
        msg = "Unable to create directory"
        raise HTTPException(status_code=500, detail=msg) from e
    if created:
        logger.info("Created directory: %s", dir_name)

    for field, upload in iter_uploads(form):
        logger.info(
            "File: %s, Name: %s, Size: %s bytes", field, upload.filename, upload.size
        )

        # Браузер присылает пустое имя, если файл не выбран
        if not upload.filename:
            logger.warning("Skipping file part without a filename: %s", field)
            continue

        try:
            await upload.seek(0)
        except (OSError, ValueError) as e:
            logger.error("Error opening uploaded file %s: %s", upload.filename, e)
            continue

        # Каталоги в заявленном имени файла не учитываются
        filename = Path(upload.filename).name
        try:
            destination = resolve_virtual_path(target_dir, filename)
        except PathOutsideRootError as e:
            msg = "Invalid filename"
            raise HTTPException(status_code=400, detail=msg) from e

        if destination.exists():
            logger.warning("File already exists: %s", destination)
            msg = "File already exists"
            raise HTTPException(status_code=409, detail=msg)

        try:
            await run_in_threadpool(
                store_upload, upload.file, destination, upload.size or 0
            )
        except DestinationCreateError as e:
            msg = "Unable to create file"
            raise HTTPException(status_code=500, detail=msg) from e
        except UploadCopyError as e:
            msg = "Error copying file"
            raise HTTPException(status_code=500, detail=msg) from e

        logger.info("File saved: %s", destination)


@router.post("/{path:path}", response_class=PlainTextResponse)
async def upload(request: Request, settings: SettingsDep) -> str:
    """Принять multipart-форму и сохранить файлы под корнем.

    Путь URL не учитывается: директория задается полем ``name``.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() != MULTIPART_CONTENT_TYPE:
        msg = "Unable to parse form"
        raise HTTPException(status_code=400, detail=msg)

    try:
        form = await request.form(max_part_size=settings.max_memory_size)
    except (StarletteHTTPException, MultiPartException) as e:
        logger.error("Error parsing form: %s", e)
        msg = "Unable to parse form"
        raise HTTPException(status_code=400, detail=msg) from e

    try:
        await save_uploads(form, settings.root_path)
    finally:
        await form.close()

    return "Form data received and printed"
