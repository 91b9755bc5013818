#!/usr/bin/env python3
import re
from typing import List, Pattern

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.highlighter import RegexHighlighter
from rich.theme import Theme

from ..config import Config


class ErrorStreamHighlighter(RegexHighlighter):
    """Named groups in each rule pattern pick a ``highlight.<group>`` style."""

    base_style = "highlight."

    def __init__(self, patterns: List[Pattern[str]]) -> None:
        super().__init__()
        self.highlights = patterns


def compile_rules(rules: List[dict]) -> List[Pattern[str]]:
    patterns = []
    for rule in rules or []:
        pattern = rule.get("pattern") if isinstance(rule, dict) else None
        if not pattern:
            continue
        try:
            patterns.append(re.compile(pattern, re.MULTILINE))
        except re.error:
            continue
    return patterns


def create_console(stderr: bool = False) -> Console:
    # Output is shell data: never wrap, never substitute emoji codes.
    options = {"stderr": stderr, "soft_wrap": True, "emoji": False}

    if stderr and Config.is_highlighter_enabled():
        patterns = compile_rules(Config.HIGHLIGHTER_RULES)
        if patterns:
            try:
                theme = Theme(Config.HIGHLIGHTER_STYLES)
            except StyleSyntaxError:
                theme = None
            if theme is not None:
                return Console(
                    highlighter=ErrorStreamHighlighter(patterns), theme=theme, **options
                )

    return Console(highlight=False, **options)
