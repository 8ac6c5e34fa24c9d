"""
Configuration for the Formation Board application.

Settings come from environment variables so the web server and the tests
can point the stores at different directories.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DATA_DIR_ENV = "FORMATION_BOARD_DATA_DIR"
LOG_LEVEL_ENV = "FORMATION_BOARD_LOG_LEVEL"
HOST_ENV = "FORMATION_BOARD_HOST"
PORT_ENV = "FORMATION_BOARD_PORT"

DEFAULT_DATA_DIR = Path.home() / ".formation_board"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings."""
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build the configuration from environment variables.

    Args:
        environ: Mapping to read instead of os.environ

    Raises:
        ValueError: If the port is not an integer
    """
    env = os.environ if environ is None else environ
    data_dir = env.get(DATA_DIR_ENV)
    port = env.get(PORT_ENV)
    return AppConfig(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        log_level=env.get(LOG_LEVEL_ENV, "INFO").upper(),
        host=env.get(HOST_ENV, DEFAULT_HOST),
        port=int(port) if port else DEFAULT_PORT,
    )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("formation_board")
    logger.setLevel(level)
    if not any(getattr(h, "_formation_board", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._formation_board = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
