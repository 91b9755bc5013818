#!/usr/bin/env python3
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from .config import Config
from .ui import UIManager


class CommandHistory:
    """Line-numbered command log kept in a plain text file."""

    def __init__(self, ui: UIManager, path: Optional[Path] = None) -> None:
        self.ui = ui
        self._path = path

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return Config.get_history_file()

    def record(self, argv: Sequence[str]) -> None:
        if not argv:
            return

        try:
            with self.path.open("a", encoding="utf-8", errors="surrogateescape") as handle:
                handle.write(" ".join(argv) + "\n")
        except OSError as error:
            logger.warning("history.record.failed path={} error={}", self.path, error)
            self.ui.report_os_error(str(self.path), error)

    def load(self) -> List[str]:
        try:
            with self.path.open("r", encoding="utf-8", errors="replace") as handle:
                return [line.rstrip("\n") for line in handle]
        except FileNotFoundError:
            return []

    def print(self) -> None:
        try:
            lines = self.load()
        except OSError as error:
            self.ui.report_os_error(str(self.path), error)
            return

        for number, line in enumerate(lines, start=1):
            self.ui.echo(f"{number} {line}")

    def clear(self) -> None:
        try:
            self.path.open("w", encoding="utf-8").close()
        except OSError as error:
            logger.warning("history.clear.failed path={} error={}", self.path, error)
            self.ui.report_os_error(str(self.path), error)
