#!/usr/bin/env python3
from enum import Enum
from typing import Optional


class Continuation(Enum):
    NONE = 0
    ESCAPE = 1
    OPERATOR = 2
    PIPE = 3
    REDIRECT = 4

    @property
    def separator(self) -> str:
        if self is Continuation.ESCAPE:
            return ""
        return " "


def classify(line: str) -> Continuation:
    """Decide whether ``line`` needs another line to be complete."""
    trimmed = line.strip()
    if not trimmed:
        return Continuation.NONE

    if trimmed.endswith("\\"):
        return Continuation.ESCAPE

    if trimmed.endswith("&&") or trimmed.endswith("||"):
        return Continuation.OPERATOR

    if trimmed.endswith("|"):
        return Continuation.PIPE

    if trimmed[-1] in "<>":
        return Continuation.REDIRECT

    return Continuation.NONE


class LineAssembler:
    """Join raw input lines into one logical command."""

    def __init__(self) -> None:
        self._buffer: Optional[str] = None
        self._pending = Continuation.NONE

    @property
    def awaiting_more(self) -> bool:
        return self._buffer is not None and self._pending is not Continuation.NONE

    def feed(self, raw_line: str) -> Optional[str]:
        line = raw_line.rstrip("\r\n").strip()

        if self._buffer is None:
            self._buffer = line
        else:
            self._buffer = f"{self._buffer}{self._pending.separator}{line}"

        self._pending = classify(self._buffer)
        if self._pending is Continuation.ESCAPE:
            self._buffer = self._buffer.rstrip()[:-1]
            return None

        if self._pending is not Continuation.NONE:
            return None

        return self._take()

    def finish(self) -> Optional[str]:
        if self._buffer is None:
            return None
        return self._take()

    def reset(self) -> None:
        self._buffer = None
        self._pending = Continuation.NONE

    def _take(self) -> str:
        command = self._buffer or ""
        self.reset()
        return command
