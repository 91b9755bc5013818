"""Runtime logging helpers."""

from __future__ import annotations

import os

from loguru import logger

from .config import Config

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | pid={extra[pid]} | {name}:{function}:{line} | {message}"
_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
_CONFIGURED = False


def configure_logging(*, force: bool = False) -> None:
    """Route loguru to the shell log file, never to the terminal."""

    def inject_pid(record) -> None:
        record["extra"]["pid"] = os.getpid()

    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    logger.remove()
    logger.configure(patcher=inject_pid)

    level = Config.get_log_level()
    if level not in _LEVELS:
        level = "WARNING"

    if Config.ensure_directories():
        logger.add(
            str(Config.log_file()),
            level=level,
            format=_LOG_FORMAT,
            backtrace=False,
            diagnose=False,
        )
    _CONFIGURED = True
