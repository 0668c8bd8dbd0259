"""Настройка логирования пакета."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str = "info") -> logging.Logger:
    """Настроить логгер пакета ``file_gateway``.

    Повторный вызов только меняет уровень, обработчики не дублируются.
    """
    logger = logging.getLogger("file_gateway")
    logger.setLevel(level.upper())

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger
