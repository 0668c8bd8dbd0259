"""Операции с файловой системой под корневой директорией."""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

# Права для создаваемых директорий: rwxr-xr-x
DIRECTORY_MODE = 0o755
# Сохраненные файлы доступны только для чтения: r--r--r--
UPLOADED_FILE_MODE = 0o444
COPY_CHUNK_SIZE = 64 * 1024


class StorageError(Exception):
    """Базовая ошибка операций с хранилищем."""


class DestinationCreateError(StorageError):
    """Не удалось эксклюзивно создать файл назначения."""


class UploadCopyError(StorageError):
    """Ошибка копирования загруженного файла.

    К моменту возбуждения частично записанный файл уже удален.
    """


@dataclass(frozen=True)
class DirectoryEntry:
    """Элемент директории."""

    name: str
    is_dir: bool

    @property
    def display_name(self) -> str:
        """Имя для отображения; у директорий в конце ``/``."""
        return f"{self.name}/" if self.is_dir else self.name


def ensure_directory(path: Path) -> bool:
    """Создать директорию, если ее еще нет.

    Returns:
        True, если директория была создана

    Raises:
        OSError: Любая ошибка, кроме уже существующей директории

    """
    try:
        path.mkdir(mode=DIRECTORY_MODE)
    except FileExistsError:
        return False
    return True


def list_directory(path: Path) -> list[DirectoryEntry]:
    """Перечислить непосредственных потомков директории.

    Порядок совпадает с порядком, в котором их отдает файловая система.
    """
    with os.scandir(path) as entries:
        return [
            DirectoryEntry(name=entry.name, is_dir=entry.is_dir()) for entry in entries
        ]


def copy_stream(source: BinaryIO, destination: BinaryIO) -> int:
    """Скопировать поток целиком и вернуть число записанных байт."""
    written = 0
    while chunk := source.read(COPY_CHUNK_SIZE):
        written += destination.write(chunk)
    return written


def _discard_partial(destination: Path) -> None:
    try:
        destination.unlink()
    except OSError as e:
        logger.error("Error removing partial file %s: %s", destination, e)


def store_upload(source: BinaryIO, destination: Path, expected_size: int) -> int:
    """Сохранить загруженный файл в новый файл назначения.

    Файл создается эксклюзивно (``O_EXCL``) с правами только на чтение.
    Если копирование падает или записано не ``expected_size`` байт,
    частично записанный файл удаляется.

    Args:
        source: Данные загруженного файла
        destination: Путь к создаваемому файлу
        expected_size: Заявленный размер загрузки

    Returns:
        Число записанных байт

    Raises:
        DestinationCreateError: Файл уже существует или не может быть создан
        UploadCopyError: Ошибка копирования или несовпадение размера

    """
    try:
        fd = os.open(
            destination,
            os.O_WRONLY | os.O_CREAT | os.O_EXCL,
            UPLOADED_FILE_MODE,
        )
    except OSError as e:
        logger.error("Error creating destination file %s: %s", destination, e)
        raise DestinationCreateError(str(destination)) from e

    try:
        with os.fdopen(fd, "wb") as dst:
            written = copy_stream(source, dst)
    except (OSError, ValueError) as e:
        logger.error("Error copying file %s: %s", destination, e)
        _discard_partial(destination)
        raise UploadCopyError(str(destination)) from e

    if written != expected_size:
        logger.error(
            "Error copying file %s: written size (%d) does not match "
            "expected size (%d)",
            destination,
            written,
            expected_size,
        )
        _discard_partial(destination)
        raise UploadCopyError(str(destination))

    return written


def remove_path(path: Path) -> None:
    """Удалить файл или директорию рекурсивно.

    Символические ссылки удаляются сами, их цель не затрагивается.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
