"""Настройки приложения."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Максимальный размер поля формы, удерживаемого в памяти (10 МБ)
MAX_MEMORY_SIZE = 10 * 1024 * 1024


class Settings(BaseSettings):
    """Настройки файлового шлюза.

    Значения читаются один раз при запуске и после этого не меняются.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILE_GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    prefix: str = Field(
        default=".", description="Directory prefix for all operations"
    )
    host: str = Field(default="0.0.0.0", description="Address to bind to")
    port: int = Field(default=8080, description="Port to listen on")
    max_memory_size: int = Field(
        default=MAX_MEMORY_SIZE,
        description="Maximum size of a form field held in memory, bytes",
    )
    shutdown_timeout: int | None = Field(
        default=30,
        description="Seconds to wait for in-flight requests on shutdown",
    )
    log_level: str = Field(default="info", description="Logging level")
    cors_origins: str = Field(default="*", description="Allowed CORS origins")

    @property
    def root_path(self) -> Path:
        """Корневая директория, с которой работает сервер."""
        return Path(self.prefix)

    @property
    def cors_origins_list(self) -> list[str]:
        """Получить список CORS origins из строки."""
        origins = [
            origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
        ]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    """Получить настройки приложения (кэшируемая функция)."""
    return Settings()


def load_settings(args: list[str] | None = None) -> Settings:
    """Прочитать настройки с учетом аргументов командной строки.

    Args:
        args: Аргументы командной строки; ``None`` означает ``sys.argv``

    Returns:
        Настройки, собранные из аргументов, окружения и значений
        по умолчанию

    """
    return Settings(
        _cli_parse_args=args if args is not None else True,
        _cli_prog_name="file-gateway",
    )
