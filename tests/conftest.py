"""Общие фикстуры тестов File Gateway."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from file_gateway import create_app
from file_gateway.settings import Settings


@pytest.fixture
def test_files_dir(tmp_path: Path) -> Path:
    """Создать корневую директорию с тестовыми файлами.

    Рядом с корнем лежит ``outside.txt``, недоступный через сервер.
    """
    root = tmp_path / "root"
    root.mkdir()

    (root / "test1.txt").write_text("Test content 1")
    (root / "document.pdf").write_bytes(b"PDF content here")

    subdir = root / "subdir"
    subdir.mkdir()
    (subdir / "nested.txt").write_text("Nested content")

    (tmp_path / "outside.txt").write_text("Secret")

    return root


@pytest.fixture
def settings(test_files_dir: Path) -> Settings:
    """Настройки, указывающие на временную корневую директорию."""
    return Settings(prefix=str(test_files_dir))


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Создать тестовый клиент для временной корневой директории."""
    return TestClient(create_app(settings))
