"""Named wallpaper profiles stored as JSON files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .config import ConfigManager

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


def default_profiles_dir() -> Path:
    """Directory that holds the profile files."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home is not None:
        base = Path(config_home)
    else:
        home = os.environ.get("HOME")
        if home is None:
            return Path("profiles")
        base = Path(home) / ".config"
    return base / "betterwallpaper" / "profiles"


class ProfileManager:
    """Creates, reads and switches between profiles."""

    def __init__(
        self,
        config: ConfigManager,
        profiles_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self._config = config
        self._dir = Path(profiles_dir) if profiles_dir is not None else default_profiles_dir()
        self.load_profiles()
        self._active = config.get("current_profile", "")

    @property
    def profiles_dir(self) -> Path:
        return self._dir

    def _path_for(self, name: str) -> Path:
        return self._dir / f"{name}.json"

    def load_profiles(self) -> None:
        """Make sure the directory and the default profile exist."""
        self._dir.mkdir(parents=True, exist_ok=True)
        if not self._path_for(DEFAULT_PROFILE).exists():
            self.create_profile(
                DEFAULT_PROFILE,
                {"name": DEFAULT_PROFILE, "monitors": {}, "triggers": []},
            )

    def profile_names(self) -> list[str]:
        """Names of all stored profiles, sorted."""
        if not self._dir.exists():
            return []
        return sorted(
            entry.stem
            for entry in self._dir.iterdir()
            if entry.is_file() and entry.suffix == ".json"
        )

    def get_profile(self, name: str) -> dict[str, Any]:
        """Contents of a profile, or an empty dict if missing or unreadable."""
        path = self._path_for(name)
        if not path.exists():
            return {}
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return content if isinstance(content, dict) else {}

    def create_profile(self, name: str, content: dict[str, Any]) -> bool:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            text = json.dumps(content, indent=4, sort_keys=True)
            self._path_for(name).write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write profile %s: %s", name, exc)
            return False
        return True

    def update_profile(self, name: str, content: dict[str, Any]) -> bool:
        return self.create_profile(name, content)

    def delete_profile(self, name: str) -> bool:
        """Remove a profile; the default profile cannot be removed."""
        if name == DEFAULT_PROFILE:
            return False
        try:
            self._path_for(name).unlink()
        except FileNotFoundError:
            return False
        return True

    def duplicate_profile(self, src_name: str, new_name: str) -> bool:
        source = self.get_profile(src_name)
        if not source:
            return False
        source["name"] = new_name
        return self.create_profile(new_name, source)

    @property
    def active_profile(self) -> str:
        return self._active

    def set_active_profile(self, name: str) -> None:
        """Switch to an existing profile and record it in the settings."""
        if name == self._active:
            return
        if not self._path_for(name).exists():
            return
        self._active = name
        self._config.set("current_profile", name)