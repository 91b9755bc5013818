#!/usr/bin/env python3
import sys
from typing import Optional

from loguru import logger

from .core.shell import PishShell
from .logging_utils import configure_logging
from .ui import UIManager


def main(script_path: Optional[str] = None) -> int:
    configure_logging()
    ui = UIManager()

    if script_path is None:
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(errors="surrogateescape")
        logger.info("shell.start mode=interactive")
        return PishShell(sys.stdin, interactive=True, ui=ui).run()

    try:
        stream = open(script_path, "r", encoding="utf-8", errors="surrogateescape")
    except OSError as error:
        ui.report_os_error(script_path, error)
        return 1

    logger.info("shell.start mode=script path={}", script_path)
    with stream:
        return PishShell(stream, interactive=False, ui=ui).run()
