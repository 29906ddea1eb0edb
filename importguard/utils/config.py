import copy
import os
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

import tomli
import tomli_w

T = TypeVar("T")


def get_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / ".config"
    return base / "importguard"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


DEFAULT_CONFIG: dict[str, Any] = {
    "logging": {
        "level": "warning",
    },
    "cleanup": {
        "run_builtin_cleanup": True,
        "skip_during_autosave": True,
        "merged_command_supported": True,
        "merged_command": "",
        "remove_unused_command": "",
        "sort_command": "",
        "protected_patterns": "using System;||using System.Linq;",
    },
    "sorting": {
        "collapse_emptied_lines": True,
    },
    "formatting": {
        "tab_size": 4,
        "insert_spaces": True,
    },
    "syntax": {},
}


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    config_path = config_path or get_config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path.exists():
        with open(config_path, "rb") as f:
            user_config = tomli.load(f)
            _merge_config(config, user_config)

    return config


def save_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)
    return config_path


def _merge_config(base: dict, override: dict) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value


class CachedSettingSet(Generic[T]):
    """A list parsed from a setting string, re-parsed only when the string changes."""

    def __init__(self, source: Callable[[], str], parse: Callable[[str], list[T]]):
        self._source = source
        self._parse = parse
        self._expression: str | None = None
        self._value: list[T] = []

    @property
    def value(self) -> list[T]:
        expression = self._source()
        if self._expression is None or expression != self._expression:
            self._value = self._parse(expression)
            self._expression = expression
        return self._value
