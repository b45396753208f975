"""Core of a wallpaper manager: settings, profiles, power, Hyprland, scheduling, slideshows, Workshop downloads and theming."""

__version__ = "0.2.0"