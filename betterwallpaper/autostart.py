"""Starting the application with the user session."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import subprocess
from pathlib import Path

from .config import ConfigManager

logger = logging.getLogger(__name__)

SERVICE_NAME = "betterwallpaper.service"
INSTALLED_PATHS = ("/usr/bin/betterwallpaper", "/usr/local/bin/betterwallpaper")


class AutostartMethod(enum.Enum):
    NONE = "none"
    XDG_AUTOSTART = "xdg"  # ~/.config/autostart/
    SYSTEMD_USER = "systemd"  # ~/.config/systemd/user/
    HYPRLAND_EXEC_ONCE = "hyprland"  # manual hyprland.conf edit


def method_to_string(method: AutostartMethod) -> str:
    return method.value


def string_to_method(text: str) -> AutostartMethod:
    """Method named by ``text``; anything unknown means none."""
    try:
        return AutostartMethod(text)
    except ValueError:
        return AutostartMethod.NONE


def _config_base() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home is not None:
        return Path(config_home)
    return Path(os.environ.get("HOME", "") + "/.config")


def _run_quietly(*args: str) -> bool:
    try:
        completed = subprocess.run(
            list(args),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return completed.returncode == 0


class AutostartManager:
    """Creates and removes autostart entries."""

    def __init__(self, config: ConfigManager) -> None:
        self._config = config
        self.current_method = AutostartMethod.NONE
        self.start_minimized = False

    def available_methods(self) -> list[AutostartMethod]:
        methods = [AutostartMethod.XDG_AUTOSTART]
        if _run_quietly("systemctl", "--user", "status"):
            methods.append(AutostartMethod.SYSTEMD_USER)
        desktop = os.environ.get("XDG_CURRENT_DESKTOP")
        if desktop is not None and "Hyprland" in desktop:
            methods.append(AutostartMethod.HYPRLAND_EXEC_ONCE)
        return methods

    def executable_path(self) -> str:
        """Command that starts the application."""
        for candidate in INSTALLED_PATHS:
            if Path(candidate).exists():
                return candidate
        found = shutil.which("betterwallpaper")
        return found if found is not None else "betterwallpaper"

    def xdg_autostart_path(self) -> Path:
        return _config_base() / "autostart" / "betterwallpaper.desktop"

    def systemd_service_path(self) -> Path:
        return _config_base() / "systemd" / "user" / SERVICE_NAME

    def _exec_line(self) -> str:
        command = self.executable_path()
        if self.start_minimized:
            command += " --minimized"
        return command

    def _enable_xdg(self) -> bool:
        path = self.xdg_autostart_path()
        text = (
            "[Desktop Entry]\n"
            "Type=Application\n"
            "Name=BetterWallpaper\n"
            "Comment=Wallpaper Manager for Hyprland\n"
            f"Exec={self._exec_line()}\n"
            "Icon=betterwallpaper\n"
            "Terminal=false\n"
            "Categories=Utility;\n"
            "X-GNOME-Autostart-enabled=true\n"
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to create autostart file: %s (%s)", path, exc)
            return False
        logger.info("Created XDG autostart entry: %s", path)
        return True

    def _enable_systemd(self) -> bool:
        path = self.systemd_service_path()
        text = (
            "[Unit]\n"
            "Description=BetterWallpaper - Wallpaper Manager for Hyprland\n"
            "After=graphical-session.target\n"
            "\n"
            "[Service]\n"
            "Type=simple\n"
            f"ExecStart={self._exec_line()}\n"
            "Restart=on-failure\n"
            "\n"
            "[Install]\n"
            "WantedBy=default.target\n"
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to create systemd service: %s (%s)", path, exc)
            return False
        if not _run_quietly("systemctl", "--user", "enable", SERVICE_NAME):
            logger.warning("Failed to enable systemd service")
        logger.info("Created systemd user service: %s", path)
        return True

    def _disable_xdg(self) -> None:
        path = self.xdg_autostart_path()
        if path.exists():
            path.unlink()
            logger.info("Removed XDG autostart entry")

    def _disable_systemd(self) -> None:
        _run_quietly("systemctl", "--user", "disable", SERVICE_NAME)
        path = self.systemd_service_path()
        if path.exists():
            path.unlink()
            logger.info("Removed systemd user service")

    def enable(self, method: AutostartMethod) -> bool:
        """Set up autostart with ``method``; False if it could not be done."""
        if method is AutostartMethod.XDG_AUTOSTART:
            success = self._enable_xdg()
        elif method is AutostartMethod.SYSTEMD_USER:
            success = self._enable_systemd()
        elif method is AutostartMethod.HYPRLAND_EXEC_ONCE:
            logger.info(
                "To enable Hyprland autostart, add to hyprland.conf:\nexec-once = %s",
                self.executable_path(),
            )
            success = True
        else:
            success = False
        if success:
            self.current_method = method
            self.save_settings()
        return success

    def disable(self) -> bool:
        self._disable_xdg()
        self._disable_systemd()
        self.current_method = AutostartMethod.NONE
        self.save_settings()
        return True

    def is_enabled(self) -> bool:
        return self.xdg_autostart_path().exists() or self.systemd_service_path().exists()

    def load_settings(self) -> None:
        method = self._config.get("autostart.method", "")
        self.current_method = string_to_method(method if isinstance(method, str) else "")
        minimized = self._config.get("autostart.start_minimized", False)
        self.start_minimized = minimized if isinstance(minimized, bool) else False

    def save_settings(self) -> None:
        self._config.set("autostart.method", method_to_string(self.current_method))
        self._config.set("autostart.start_minimized", self.start_minimized)