"""Разрешение виртуальных путей относительно корневой директории."""

import os
from pathlib import Path


class PathOutsideRootError(ValueError):
    """Виртуальный путь указывает за пределы корневой директории."""


def resolve_virtual_path(
    root: Path, virtual_path: str, *, follow_symlinks: bool = True
) -> Path:
    """Получить абсолютный путь для виртуального пути под корнем.

    Ведущие слэши отбрасываются, поэтому абсолютный виртуальный путь
    тоже остается под корнем. Результат должен совпадать с корнем
    или лежать внутри него.

    Args:
        root: Корневая директория
        virtual_path: Путь из URL или поля формы
        follow_symlinks: Разрешать ли символическую ссылку в последнем
            компоненте пути; без этого ссылка остается ссылкой

    Returns:
        Разрешенный абсолютный путь

    Raises:
        PathOutsideRootError: Путь выходит за пределы корня

    """
    base_dir = root.resolve()
    try:
        joined = Path(os.path.normpath(root / virtual_path.lstrip("/")))
        if follow_symlinks or joined.name in ("", ".."):
            requested_path = joined.resolve()
        else:
            requested_path = joined.parent.resolve() / joined.name
        common_path = os.path.commonpath([base_dir, requested_path])
    except ValueError as e:
        raise PathOutsideRootError(virtual_path) from e
    if common_path != str(base_dir):
        raise PathOutsideRootError(virtual_path)

    return requested_path


def is_root(root: Path, path: Path) -> bool:
    """Проверить, что уже разрешенный путь совпадает с корневой директорией."""
    return root.resolve() == path
