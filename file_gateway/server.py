"""Запуск сервера и управление его жизненным циклом."""

import logging
import socket
from enum import StrEnum
from types import FrameType

import uvicorn

from file_gateway import create_app
from file_gateway.settings import Settings

logger = logging.getLogger(__name__)


class ServerState(StrEnum):
    """Состояние сервера."""

    STARTING = "starting"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


# Допустимые переходы между состояниями
TRANSITIONS: dict[ServerState, frozenset[ServerState]] = {
    ServerState.STARTING: frozenset({ServerState.RUNNING, ServerState.STOPPED}),
    ServerState.RUNNING: frozenset({ServerState.DRAINING}),
    ServerState.DRAINING: frozenset({ServerState.STOPPED}),
    ServerState.STOPPED: frozenset(),
}


class GatewayServer(uvicorn.Server):
    """Сервер uvicorn с явными состояниями running, draining и stopped.

    По сигналу завершения сервер перестает принимать соединения
    и ждет текущие запросы не дольше ``timeout_graceful_shutdown``.
    """

    def __init__(self, config: uvicorn.Config) -> None:
        super().__init__(config)
        self.state = ServerState.STARTING

    def transition(self, new_state: ServerState) -> None:
        """Перевести сервер в новое состояние.

        Raises:
            RuntimeError: Переход не разрешен

        """
        if new_state == self.state:
            return
        if new_state not in TRANSITIONS[self.state]:
            msg = f"Invalid server state transition: {self.state} -> {new_state}"
            raise RuntimeError(msg)
        logger.info("Server state: %s -> %s", self.state, new_state)
        self.state = new_state

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        try:
            await super().startup(sockets=sockets)
        finally:
            self.transition(
                ServerState.RUNNING if self.started else ServerState.STOPPED
            )

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        if self.state == ServerState.RUNNING:
            logger.info("Shutting down...")
            self.transition(ServerState.DRAINING)
        super().handle_exit(sig, frame)
        # Остановка по сигналу штатная: uvicorn не должен поднимать его повторно
        self._captured_signals.clear()

    async def shutdown(self, sockets: list[socket.socket] | None = None) -> None:
        if self.state == ServerState.RUNNING:
            self.transition(ServerState.DRAINING)
        try:
            await super().shutdown(sockets=sockets)
        finally:
            self.transition(ServerState.STOPPED)


def build_server(settings: Settings) -> GatewayServer:
    """Собрать сервер для заданных настроек."""
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
    return GatewayServer(config)


def run(settings: Settings) -> int:
    """Запустить сервер и дождаться его остановки.

    Корневая директория создается, если ее еще нет.

    Args:
        settings: Настройки сервера

    Returns:
        Код завершения процесса: 0 при штатной остановке

    """
    try:
        settings.root_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.critical("Cannot create root directory %s: %s", settings.root_path, e)
        return 1

    server = build_server(settings)

    logger.info("Starting server on %s:%d...", settings.host, settings.port)
    try:
        server.run()
    except Exception:
        logger.critical("Server terminated with an error", exc_info=True)
        return 1

    if not server.started:
        logger.critical("Server failed to start")
        return 1
    return 0
