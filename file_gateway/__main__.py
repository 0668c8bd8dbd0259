"""Точка входа для запуска File Gateway."""

import sys

from file_gateway.logging_config import setup_logging
from file_gateway.server import run
from file_gateway.settings import load_settings


def main(args: list[str] | None = None) -> int:
    """Прочитать настройки, настроить логирование и запустить сервер."""
    settings = load_settings(args)
    setup_logging(settings.log_level)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
