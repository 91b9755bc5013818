#!/usr/bin/env python3
import json
import os
from pathlib import Path


class Config:
    # Prompt configuration
    PROMPT_SYMBOL = "$"
    CONTINUATION_PROMPT = "> "
    PLAIN_PROMPT = False

    PROMPT_STYLES = {
        "user": "#8839ef",
        "host": "#8839ef",
        "path": "#1e66f5",
        "prompt_symbol": "",
    }

    WELCOME_MESSAGE = "pish"
    SHOW_STARTUP_BANNER = False

    BANNER_BORDER_STYLE = "#8caaee"

    HIGHLIGHTER_ENABLED = True
    HIGHLIGHTER_RULES = [
        {
            "name": "prefix",
            "pattern": r"^(?P<prefix>pish:)",
        },
        {
            "name": "path",
            "pattern": r"(?P<path>(?:~|\.{1,2})?/[^\s:]*)",
        },
    ]
    HIGHLIGHTER_STYLES = {
        "highlight.prefix": "bold red",
        "highlight.path": "underline cyan",
    }

    CONFIG_DIR = Path.home() / ".pish"
    HISTORY_FILE = Path.home() / ".pish_history"
    LOG_LEVEL = "WARNING"

    @classmethod
    def config_dir(cls) -> Path:
        env_value = os.getenv("PISH_CONFIG_DIR")
        if env_value:
            return Path(env_value).expanduser()
        return cls.CONFIG_DIR

    @classmethod
    def config_file(cls) -> Path:
        return cls.config_dir() / "config.json"

    @classmethod
    def log_file(cls) -> Path:
        return cls.config_dir() / "shell.log"

    @classmethod
    def ensure_directories(cls) -> bool:
        try:
            cls.config_dir().mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return True

    @classmethod
    def get_history_file(cls) -> Path:
        env_value = os.getenv("PISH_HISTORY")
        if env_value:
            return Path(env_value).expanduser()
        return Path(cls.HISTORY_FILE).expanduser()

    @classmethod
    def get_log_level(cls) -> str:
        env_value = os.getenv("PISH_LOG_LEVEL")
        if env_value:
            return env_value.strip().upper()
        return cls.LOG_LEVEL.upper()

    @classmethod
    def is_plain_prompt(cls) -> bool:
        if os.getenv("PISH_AUTOGRADER") is not None:
            return True
        return bool(cls.PLAIN_PROMPT)

    @classmethod
    def is_highlighter_enabled(cls) -> bool:
        env_value = os.getenv("PISH_HIGHLIGHTER")
        if env_value is not None:
            normalized = env_value.strip().lower()
            if normalized in {"0", "false", "no", "off"}:
                return False
            if normalized in {"1", "true", "yes", "on"}:
                return True
        return cls.HIGHLIGHTER_ENABLED

    # ------------------------------------------------------------------
    # External configuration support (config.json)
    # ------------------------------------------------------------------

    @classmethod
    def _load_json_config(cls) -> bool:
        config_file = cls.config_file()
        if not config_file.exists():
            return False

        try:
            with config_file.open("r", encoding="utf-8") as f:
                config_data = json.load(f)
        except (json.JSONDecodeError, OSError):
            return False

        if not isinstance(config_data, dict):
            return False

        def get_nested(data, *keys, default=None):
            current = data
            for key in keys:
                if isinstance(current, dict) and key in current:
                    current = current[key]
                else:
                    return default
            return current

        cls.WELCOME_MESSAGE = get_nested(
            config_data, "general", "welcome_message", default=cls.WELCOME_MESSAGE
        )
        cls.SHOW_STARTUP_BANNER = get_nested(
            config_data,
            "general",
            "show_startup_banner",
            default=cls.SHOW_STARTUP_BANNER,
        )
        cls.LOG_LEVEL = get_nested(
            config_data, "general", "log_level", default=cls.LOG_LEVEL
        )

        history_file = get_nested(
            config_data, "shell", "history_file", default=None
        )
        if isinstance(history_file, str) and history_file.strip():
            cls.HISTORY_FILE = Path(history_file).expanduser()

        cls.PROMPT_SYMBOL = get_nested(
            config_data, "ui", "prompt_symbol", default=cls.PROMPT_SYMBOL
        )
        cls.CONTINUATION_PROMPT = get_nested(
            config_data,
            "ui",
            "continuation_prompt",
            default=cls.CONTINUATION_PROMPT,
        )
        cls.PLAIN_PROMPT = get_nested(
            config_data, "ui", "plain_prompt", default=cls.PLAIN_PROMPT
        )

        prompt_styles = get_nested(
            config_data, "ui", "prompt_styles", default=cls.PROMPT_STYLES
        )
        if isinstance(prompt_styles, dict):
            cls.PROMPT_STYLES.update(prompt_styles)

        cls.BANNER_BORDER_STYLE = get_nested(
            config_data, "ui", "banner_border_style", default=cls.BANNER_BORDER_STYLE
        )

        cls.HIGHLIGHTER_ENABLED = get_nested(
            config_data, "ui", "highlighter_enabled", default=cls.HIGHLIGHTER_ENABLED
        )

        highlighter_rules = get_nested(
            config_data, "ui", "highlighter_rules", default=cls.HIGHLIGHTER_RULES
        )
        if isinstance(highlighter_rules, list):
            cls.HIGHLIGHTER_RULES = highlighter_rules

        highlighter_styles = get_nested(
            config_data, "ui", "highlighter_styles", default=cls.HIGHLIGHTER_STYLES
        )
        if isinstance(highlighter_styles, dict):
            cls.HIGHLIGHTER_STYLES.update(highlighter_styles)

        return True

    @classmethod
    def reload(cls) -> bool:
        try:
            return cls._load_json_config()
        except Exception:
            return False


Config._load_json_config()
