#!/usr/bin/env python3
import os
import re
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..core.state import ShellState
from ..errors import ShellExit
from ..history import CommandHistory
from ..ui import UIManager
from .process import ProcessOrchestrator

_NUMERIC = re.compile(r"^[+-]?[0-9]+$")


class BuiltinDispatcher:
    def __init__(
        self,
        state: ShellState,
        history: CommandHistory,
        orchestrator: ProcessOrchestrator,
        ui: UIManager,
    ) -> None:
        self.state = state
        self.history = history
        self.orchestrator = orchestrator
        self.ui = ui
        self._handlers: Dict[str, Callable[[List[str]], int]] = {
            "cd": self._handle_cd_command,
            "exit": self._handle_exit_command,
            "history": self._handle_history_command,
            "exec": self._handle_exec_command,
        }

    def is_builtin(self, name: str) -> bool:
        return name in self._handlers

    def dispatch(self, argv: List[str]) -> Optional[int]:
        """Run ``argv`` as a built-in, or return None if it is not one."""
        if not argv or not self.is_builtin(argv[0]):
            return None
        return self._handlers[argv[0]](argv)

    def _handle_cd_command(self, argv: List[str]) -> int:
        if len(argv) != 2:
            self.ui.usage_error()
            return 1

        try:
            current = os.getcwd()
        except OSError:
            current = None

        if argv[1] == "-":
            if self.state.previous_directory is None:
                self.ui.echo(current if current is not None else "")
                return 0
            destination = self.state.previous_directory
        else:
            destination = argv[1]

        try:
            os.chdir(destination)
        except OSError as error:
            self.ui.report_os_error("cd", error)
            return 1

        self.state.previous_directory = current
        logger.debug("builtin.cd from={} to={}", current, destination)

        if argv[1] == "-":
            self.ui.echo(os.getcwd())
        return 0

    def _handle_exit_command(self, argv: List[str]) -> int:
        if len(argv) > 2:
            self.ui.usage_error()
            return 1

        if len(argv) == 1:
            raise ShellExit(self.state.last_status)

        if not _NUMERIC.match(argv[1]):
            self.ui.report("pish: exit: numeric argument required")
            return 2

        raise ShellExit(int(argv[1]))

    def _handle_history_command(self, argv: List[str]) -> int:
        if len(argv) == 1:
            self.history.print()
            return 0

        if len(argv) == 2 and argv[1] == "-c":
            self.history.clear()
            return 0

        self.ui.usage_error()
        return 1

    def _handle_exec_command(self, argv: List[str]) -> int:
        if len(argv) < 2:
            self.ui.usage_error()
            return 1

        self.orchestrator.replace_or_fail(argv[1:])
