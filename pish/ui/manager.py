#!/usr/bin/env python3
import getpass
import os
import sys

import psutil
from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ..config import Config
from .highlighter import create_console


class UIManager:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or create_console()

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------

    @staticmethod
    def _username() -> str:
        try:
            return psutil.Process().username()
        except (psutil.Error, KeyError):
            return getpass.getuser()

    @staticmethod
    def _working_directory() -> str:
        try:
            return os.getcwd()
        except OSError:
            return "?"

    def get_prompt_text(self) -> FormattedText:
        return FormattedText(
            [
                ("class:user", f"{self._username()}@pish "),
                ("class:path", self._working_directory()),
                ("class:prompt_symbol", f"{Config.PROMPT_SYMBOL} "),
            ]
        )

    def get_style(self) -> Style:
        return Style.from_dict(Config.PROMPT_STYLES)

    def show_prompt(self) -> None:
        if Config.is_plain_prompt():
            sys.stdout.write(
                f"{self._username()}@pish {self._working_directory()}{Config.PROMPT_SYMBOL}\n"
            )
            sys.stdout.flush()
            return

        print_formatted_text(self.get_prompt_text(), style=self.get_style(), end="")
        sys.stdout.flush()

    def show_continuation_prompt(self) -> None:
        sys.stdout.write(Config.CONTINUATION_PROMPT)
        sys.stdout.flush()

    def show_welcome(self) -> None:
        if not Config.SHOW_STARTUP_BANNER:
            return

        self.console.print(
            Panel.fit(
                Text(Config.WELCOME_MESSAGE),
                title="pish",
                title_align="left",
                border_style=Config.BANNER_BORDER_STYLE,
                padding=(0, 1),
            )
        )

    def display_line_break(self) -> None:
        self.console.print()

    # ------------------------------------------------------------------
    # Command output and the error stream
    # ------------------------------------------------------------------

    def echo(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)
        self.console.file.flush()

    def report(self, message: str) -> None:
        # The error console follows whatever fd 2 currently is, including
        # descriptors rewired inside a forked child.
        console = create_console(stderr=True)
        console.print(f"[red]{escape(message)}[/red]")
        console.file.flush()

    def report_os_error(self, subject: str, error: Exception) -> None:
        reason = getattr(error, "strerror", None) or str(error)
        self.report(f"{subject}: {reason}")

    def usage_error(self) -> None:
        self.report("pish: Usage error")
