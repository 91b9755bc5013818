"""Exception types for pish."""

from __future__ import annotations


class PishError(Exception):
    """Base exception for pish."""


class ShellExit(PishError):
    """Raised to terminate the current process with a given status.

    At top level this ends the interpreter; inside a forked child it ends
    only that child.
    """

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status & 0xFF
