#!/usr/bin/env python3
import re
from typing import List

_SEPARATORS = re.compile(r"[ \t]+")


def tokenize(command: str) -> List[str]:
    """Split a simple command on spaces and tabs into an argument list."""
    return [token for token in _SEPARATORS.split(command) if token]
