"""Listener — runs the Chirp app under uvicorn on the configured port.

Invariants:
    - Port comes from PORT (Settings.port), falling back to 5000
    - "Server is running on port <port>" is logged only after the socket is bound
    - Bind failure is fatal: uvicorn exits the process, nothing here retries

Design Decisions:
    - uvicorn.Server subclass hooks startup() to log after the bind
    - log_config=None: uvicorn keeps the application's logging setup
"""

import logging
import socket

import uvicorn
from fastapi import FastAPI

from app.config import Settings, get_settings
from app.infrastructure.observability import setup_logging
from app.main import create_app

logger = logging.getLogger(__name__)


class Server(uvicorn.Server):
    """uvicorn server that announces the bound port."""

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if not self.should_exit:
            logger.info(
                f"Server is running on port {self.config.port}",
                extra={"port": self.config.port},
            )


def build_config(app: FastAPI, settings: Settings) -> uvicorn.Config:
    return uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


def run(settings: Settings | None = None) -> None:
    """Entry point: build the app and serve until terminated."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    Server(build_config(create_app(settings), settings)).run()
