"""Applying wallpaper colours as a desktop theme through external tools."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import subprocess
import threading
from typing import Callable

from .colors import ColorPalette, extract_from_image
from .config import ConfigManager

logger = logging.getLogger(__name__)

MAX_EXPORTED_COLORS = 16

ApplyCallback = Callable[[bool, str], None]


class ThemeTool(enum.Enum):
    NONE = "none"
    PYWAL = "pywal"
    MATUGEN = "matugen"
    WPGTK = "wpgtk"
    CUSTOM_SCRIPT = "custom"


def tool_to_string(tool: ThemeTool) -> str:
    return tool.value


def string_to_tool(text: str) -> ThemeTool:
    """Tool named by ``text``; anything unknown means none."""
    try:
        return ThemeTool(text)
    except ValueError:
        return ThemeTool.NONE


def is_tool_available(tool_name: str) -> bool:
    """Whether ``tool_name`` is an executable on the PATH."""
    return shutil.which(tool_name) is not None


def palette_environment(wallpaper_path: str, palette: ColorPalette) -> dict[str, str]:
    """Environment variables that hand a palette to a custom script."""
    env = {
        "WALLPAPER": wallpaper_path,
        "COLOR_PRIMARY": palette.primary.to_hex(),
        "COLOR_SECONDARY": palette.secondary.to_hex(),
        "COLOR_ACCENT": palette.accent.to_hex(),
        "COLOR_BACKGROUND": palette.background.to_hex(),
        "COLOR_FOREGROUND": palette.foreground.to_hex(),
    }
    for number, color in enumerate(palette.all_colors[:MAX_EXPORTED_COLORS]):
        env[f"COLOR{number}"] = color.to_hex()
    return env


def _run(args: list[str], env: dict[str, str] | None = None) -> bool:
    logger.debug("Running: %s", " ".join(args))
    try:
        completed = subprocess.run(args, env=env, check=False)
    except OSError as exc:
        logger.error("Failed to run %s: %s", args[0], exc)
        return False
    return completed.returncode == 0


class ThemeApplier:
    """Runs the chosen theming tool on a wallpaper or palette."""

    def __init__(self, config: ConfigManager) -> None:
        self._config = config
        self.preferred_tool = ThemeTool.NONE
        self.custom_script = ""
        self.auto_apply = False

    def detect_available_tools(self) -> list[ThemeTool]:
        tools = [
            tool
            for tool, executable in (
                (ThemeTool.PYWAL, "wal"),
                (ThemeTool.MATUGEN, "matugen"),
                (ThemeTool.WPGTK, "wpg"),
            )
            if is_tool_available(executable)
        ]
        if self.custom_script:
            tools.append(ThemeTool.CUSTOM_SCRIPT)
        return tools

    def _apply_with_pywal(self, wallpaper_path: str) -> bool:
        return _run(["wal", "-i", wallpaper_path, "-n", "-q"])

    def _apply_with_matugen(self, wallpaper_path: str) -> bool:
        return _run(["matugen", "image", wallpaper_path])

    def _apply_with_wpgtk(self, wallpaper_path: str) -> bool:
        return _run(["wpg", "-a", wallpaper_path]) and _run(["wpg", "-s", wallpaper_path])

    def _apply_with_custom_script(self, wallpaper_path: str, palette: ColorPalette) -> bool:
        if not self.custom_script:
            logger.error("No custom script configured")
            return False
        env = {**os.environ, **palette_environment(wallpaper_path, palette)}
        logger.debug("Running custom script: %s", self.custom_script)
        return _run([self.custom_script], env=env)

    def _apply_sync(self, wallpaper_path: str, tool: ThemeTool) -> tuple[bool, str]:
        if tool is ThemeTool.PYWAL:
            ok = self._apply_with_pywal(wallpaper_path)
            return ok, "Applied theme with pywal" if ok else "pywal failed"
        if tool is ThemeTool.MATUGEN:
            ok = self._apply_with_matugen(wallpaper_path)
            return ok, "Applied theme with matugen" if ok else "matugen failed"
        if tool is ThemeTool.WPGTK:
            ok = self._apply_with_wpgtk(wallpaper_path)
            return ok, "Applied theme with wpgtk" if ok else "wpgtk failed"
        if tool is ThemeTool.CUSTOM_SCRIPT:
            try:
                palette = extract_from_image(wallpaper_path)
            except OSError as exc:
                logger.error("Failed to load image for color extraction: %s (%s)", wallpaper_path, exc)
                palette = ColorPalette()
            ok = self._apply_with_custom_script(wallpaper_path, palette)
            return ok, "Applied theme with custom script" if ok else "Custom script failed"
        return False, "No theming tool selected"

    def apply_from_wallpaper(
        self,
        wallpaper_path: str,
        tool: ThemeTool,
        callback: ApplyCallback | None = None,
    ) -> threading.Thread:
        """Apply a theme in the background; the callback gets success and a message."""

        def run() -> None:
            success, message = self._apply_sync(wallpaper_path, tool)
            logger.info(message)
            if callback is not None:
                callback(success, message)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def apply_from_palette(
        self,
        palette: ColorPalette,
        tool: ThemeTool,
        callback: ApplyCallback | None = None,
    ) -> threading.Thread | None:
        """Apply a palette; only a custom script can take one."""
        if tool is not ThemeTool.CUSTOM_SCRIPT:
            if callback is not None:
                callback(False, "Tool requires wallpaper path, not palette")
            return None

        def run() -> None:
            success = self._apply_with_custom_script("", palette)
            if callback is not None:
                callback(success, "Applied palette" if success else "Failed to apply palette")

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def load_settings(self) -> None:
        tool = self._config.get("theming.tool", "")
        self.preferred_tool = string_to_tool(tool if isinstance(tool, str) else "")
        script = self._config.get("theming.custom_script", "")
        self.custom_script = script if isinstance(script, str) else ""
        auto = self._config.get("theming.auto_apply", False)
        self.auto_apply = auto if isinstance(auto, bool) else False

    def save_settings(self) -> None:
        self._config.set("theming.tool", tool_to_string(self.preferred_tool))
        self._config.set("theming.custom_script", self.custom_script)
        self._config.set("theming.auto_apply", self.auto_apply)