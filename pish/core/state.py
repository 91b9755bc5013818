#!/usr/bin/env python3
from dataclasses import dataclass
from typing import Optional


@dataclass
class ShellState:
    last_status: int = 0
    previous_directory: Optional[str] = None
    interactive: bool = True
