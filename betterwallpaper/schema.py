"""Setting keys and the default settings document."""

from __future__ import annotations

from typing import Any


class Keys:
    """Dotted keys of the settings document."""

    # General
    AUTOSTART = "general.autostart"
    AUTOSTART_METHOD = "general.autostart_method"  # systemd, xdg, hyprland
    START_MINIMIZED = "general.start_minimized"
    CLOSE_TO_TRAY = "general.close_to_tray"
    CHECK_UPDATES = "general.check_updates"
    LANGUAGE = "general.language"
    WINDOW_MODE = "general.window_mode"  # tiling vs floating

    # Library
    LIBRARY_PATHS = "library.paths"
    SCAN_RECURSIVE = "library.scan_recursive"
    DUPLICATE_HANDLING = "library.duplicate_handling"  # ask, older, newer
    AUTO_REMOVE_MISSING = "library.auto_remove_missing"
    THUMBNAIL_SIZE = "library.thumbnail_size"

    # Defaults
    DEFAULT_SCALING = "defaults.scaling_mode"
    DEFAULT_AUDIO_ENABLED = "defaults.audio_enabled"
    DEFAULT_VOLUME = "defaults.audio_volume"
    DEFAULT_LOOP = "defaults.loop_enabled"
    DEFAULT_SPEED = "defaults.playback_speed"

    # Performance
    FPS_LIMIT = "performance.fps_limit"
    PAUSE_ON_BATTERY = "performance.pause_on_battery"
    PAUSE_ON_FULLSCREEN = "performance.pause_on_fullscreen"
    FULLSCREEN_EXCEPTIONS = "performance.fullscreen_exceptions"
    GPU_ACCELERATION = "performance.gpu_acceleration"

    # Transitions
    TRANSITIONS_ENABLED = "transitions.enabled"
    TRANSITIONS_EFFECT = "transitions.default_effect"
    TRANSITIONS_DURATION = "transitions.duration_ms"
    TRANSITIONS_EASING = "transitions.easing"

    # Notifications
    NOTIFY_ENABLED = "notifications.enabled"
    NOTIFY_SYSTEM = "notifications.system_notifications"
    NOTIFY_TOASTS = "notifications.in_app_toasts"
    NOTIFY_ON_CHANGE = "notifications.on_wallpaper_change"
    NOTIFY_ON_ERROR = "notifications.on_error"

    # Theming
    THEMING_ENABLED = "theming.enabled"
    THEMING_AUTO_APPLY = "theming.auto_apply"
    THEMING_TOOL = "theming.tool"
    THEMING_PALETTE_SIZE = "theming.palette_size"

    # Hyprland
    HYPR_WORKSPACE_WALLPAPERS = "hyprland.workspace_wallpapers"
    HYPR_SMOOTH_TRANSITIONS = "hyprland.smooth_transitions"
    HYPR_SPECIAL_WORKSPACE = "hyprland.special_workspace_enabled"

    # State
    CURRENT_PROFILE = "current_profile"


def default_settings() -> dict[str, Any]:
    """Return a fresh copy of the default settings document."""
    return {
        "version": "1.0.0",
        "general": {
            "autostart": True,
            "autostart_method": "systemd",
            "start_minimized": True,
            "close_to_tray": True,
            "check_updates": True,
            "window_mode": "tiling",
            "language": "en",
        },
        "library": {
            "paths": [],
            "scan_recursive": True,
            "duplicate_handling": "ask",
            "auto_remove_missing": True,
            "thumbnail_size": 256,
        },
        "defaults": {
            "scaling_mode": "fill",
            "audio_enabled": False,
            "audio_volume": 50,
            "loop_enabled": True,
            "playback_speed": 1.0,
        },
        "performance": {
            "fps_limit": 60,
            "pause_on_battery": True,
            "pause_on_fullscreen": True,
            "fullscreen_exceptions": [],
            "gpu_acceleration": True,
        },
        "transitions": {
            "enabled": True,
            "default_effect": "expanding_circle",
            "duration_ms": 500,
            "easing": "ease_out",
        },
        "notifications": {
            "enabled": True,
            "system_notifications": True,
            "in_app_toasts": True,
            "on_wallpaper_change": False,
            "on_error": True,
        },
        "theming": {
            "enabled": True,
            "auto_apply": True,
            "tool": "auto",
            "palette_size": 16,
        },
        "hyprland": {
            "workspace_wallpapers": True,
            "smooth_transitions": True,
            "special_workspace_enabled": False,
        },
        "current_profile": "default",
    }