"""Per-workspace wallpapers driven by compositor events."""

from __future__ import annotations

import logging
import re
import threading
from typing import Protocol

from .config import ConfigManager
from .hyprland_ipc import HyprlandIPC

logger = logging.getLogger(__name__)

WORKSPACES_KEY = "hyprland.workspaces"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class WallpaperController(Protocol):
    """What the manager needs from whatever displays wallpapers."""

    def set_wallpaper(self, monitor: str, path: str) -> object: ...

    def get_current_wallpaper(self, monitor: str) -> str: ...

    def set_muted(self, muted: bool) -> None: ...


def _parse_workspace_id(text: str) -> int | None:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


class HyprlandManager:
    """Switches wallpapers when the active workspace changes."""

    def __init__(
        self,
        config: ConfigManager,
        ipc: HyprlandIPC,
        wallpapers: WallpaperController,
    ) -> None:
        self._config = config
        self._ipc = ipc
        self._wallpapers = wallpapers
        self._workspace_wallpapers: dict[int, str] = {}
        self._active_monitor = ""
        self._active_workspace = 1
        self._lock = threading.RLock()

    @property
    def active_monitor(self) -> str:
        return self._active_monitor

    @property
    def active_workspace(self) -> int:
        return self._active_workspace

    def initialize(self) -> None:
        if self._ipc.connect():
            self._ipc.set_event_callback(self.on_event)
        self.load_config()

    def load_config(self) -> None:
        """Read the workspace-to-wallpaper map from the settings."""
        stored = self._config.get(WORKSPACES_KEY, {})
        if not isinstance(stored, dict):
            return
        with self._lock:
            for key, path in stored.items():
                workspace_id = _parse_workspace_id(str(key))
                if workspace_id is None or not isinstance(path, str):
                    continue
                self._workspace_wallpapers[workspace_id] = path

    def save_config(self) -> None:
        with self._lock:
            mapping = {str(k): v for k, v in self._workspace_wallpapers.items()}
        self._config.set(WORKSPACES_KEY, mapping)

    def is_active(self) -> bool:
        return self._ipc.is_connected()

    def set_workspace_wallpaper(self, workspace_id: int, wallpaper_path: str) -> None:
        with self._lock:
            self._workspace_wallpapers[workspace_id] = wallpaper_path
        self.save_config()

    def get_workspace_wallpaper(self, workspace_id: int) -> str | None:
        with self._lock:
            return self._workspace_wallpapers.get(workspace_id)

    def on_event(self, event: str, data: str) -> None:
        """Handle one compositor event."""
        if event == "workspace":
            self._handle_workspace_change(data)
        elif event == "focusedmon":
            monitor, sep, workspace = data.partition(",")
            if not sep:
                return
            with self._lock:
                self._active_monitor = monitor
                workspace_id = _parse_workspace_id(workspace)
                if workspace_id is None:
                    return
                self._active_workspace = workspace_id
                path = self.get_workspace_wallpaper(workspace_id)
            if path:
                self._wallpapers.set_wallpaper(monitor, path)
        elif event == "activewindow":
            self._wallpapers.set_muted(len(data) > 1)

    def _handle_workspace_change(self, data: str) -> None:
        workspace_id = _parse_workspace_id(data)
        if workspace_id is None:
            return
        with self._lock:
            self._active_workspace = workspace_id
            monitor = self._active_monitor
            path = self.get_workspace_wallpaper(workspace_id)
        if not monitor or not path:
            return
        if self._wallpapers.get_current_wallpaper(monitor) != path:
            self._wallpapers.set_wallpaper(monitor, path)

    def generate_config_snippet(self) -> str:
        """Keybinding lines for the compositor configuration."""
        return (
            "# BetterWallpaper Keybinds for Hyprland\n"
            "# Add these to your ~/.config/hypr/hyprland.conf\n\n"
            "# Next wallpaper\n"
            "bind = SUPER, N, exec, bwp next\n\n"
            "# Previous wallpaper\n"
            "bind = SUPER, B, exec, bwp prev\n\n"
            "# Pause/Resume\n"
            "bind = SUPER SHIFT, P, exec, bwp pause\n"
            "bind = SUPER SHIFT, R, exec, bwp resume\n"
        )