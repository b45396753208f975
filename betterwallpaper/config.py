"""Persistent JSON settings with dotted-key access."""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable

from .schema import default_settings

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]


def default_config_path() -> Path:
    """Location of the settings file, following the XDG base directory rules."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home is not None:
        base = Path(config_home)
    else:
        home = os.environ.get("HOME")
        if home is None:
            return Path("config.json")
        base = Path(home) / ".config"
    return base / "betterwallpaper" / "config.json"


def _split_key(key: str) -> list[str]:
    return key.split(".") if key else []


class ConfigManager:
    """Settings document backed by a JSON file."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else default_config_path()
        self._lock = threading.RLock()
        self._config: dict[str, Any] = {}
        self._callback: ChangeCallback | None = None
        if not self.load():
            self.reset_to_defaults()
            self.save()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data(self) -> dict[str, Any]:
        """The raw settings document."""
        return self._config

    def load(self) -> bool:
        """Read the file and merge it over the defaults; False if it cannot be used."""
        with self._lock:
            if not self._path.exists():
                return False
            try:
                loaded = json.loads(self._path.read_text(encoding="utf-8"))
                if not isinstance(loaded, dict):
                    raise ValueError("settings document is not an object")
            except (OSError, ValueError) as exc:
                logger.error("Failed to load config: %s", exc)
                return False
            merged = default_settings()
            merged.update(loaded)
            self._config = merged
            return True

    def save(self) -> bool:
        """Write the settings to disk, pretty-printed."""
        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                text = json.dumps(self._config, indent=4, sort_keys=True)
                self._path.write_text(text, encoding="utf-8")
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Failed to save config: %s", exc)
                return False
            return True

    def reset_to_defaults(self) -> None:
        with self._lock:
            self._config = default_settings()

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dotted key, or ``default`` when any part is missing."""
        parts = _split_key(key)
        if not parts:
            return default
        with self._lock:
            current: Any = self._config
            for part in parts:
                if not isinstance(current, dict) or part not in current:
                    return default
                current = current[part]
            return copy.deepcopy(current)

    def set(self, key: str, value: Any) -> None:
        """Store a value at a dotted key, creating objects along the way, then save."""
        parts = _split_key(key)
        if parts:
            with self._lock:
                current = self._config
                for part in parts[:-1]:
                    child = current.get(part)
                    if child is None:
                        child = {}
                        current[part] = child
                    elif not isinstance(child, dict):
                        raise TypeError(f"'{part}' in '{key}' is not an object")
                    current = child
                current[parts[-1]] = copy.deepcopy(value)
        self.save()
        if self._callback is not None:
            self._callback(key, value)

    def watch(self, callback: ChangeCallback | None) -> None:
        """Register the function called after every ``set``."""
        self._callback = callback