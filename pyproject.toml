[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "betterwallpaper"
version = "0.2.0"
description = "Wallpaper manager core: settings, profiles, power, scheduling, slideshows, Hyprland integration, Workshop downloads and theming"
requires-python = ">=3.10"
keywords = ["wallpaper", "hyprland", "wayland", "slideshow", "theming", "linux"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["betterwallpaper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
