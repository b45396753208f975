# betterwallpaper

This is the core library of a wallpaper manager for Linux desktops. It has extra support for Hyprland.
It holds the settings, profiles, scheduling, slideshow, Workshop and theming logic. A daemon or a front end can be built on top of it.

## Modules

### Settings

`betterwallpaper.config.ConfigManager` and `betterwallpaper.schema`.

- The settings document is JSON. It is stored at `$XDG_CONFIG_HOME/betterwallpaper/config.json`, or at `~/.config/...` when `XDG_CONFIG_HOME` is not set. You can also pass a path yourself.
- When the file loads, the top-level sections it lacks are filled from `default_settings()`.
- If the file is missing or unreadable, the defaults are written out.
- `get(key, default)` reads values by dotted key, such as `general.autostart`.
- `set(key, value)` creates any missing objects along the key and saves at once.
- `watch(callback)` registers a function that is called after every `set`.
- `Keys` lists the known dotted keys.

### Profiles

`betterwallpaper.profiles.ProfileManager` keeps named JSON profiles in a `profiles` directory next to the settings.

- A `default` profile is created if it is missing, and it cannot be deleted.
- Profiles can be created, updated, duplicated, deleted and listed.
- `set_active_profile` switches only to a profile that exists, and records it as `current_profile`.

### Power

`betterwallpaper.power`.

- `read_battery_state()` is true when any `BAT*` entry under `/sys/class/power_supply` reports `Discharging`.
- `PowerManager` polls that state on a background thread. It calls your callbacks when the state changes.

### Monitors

`betterwallpaper.monitor.MonitorInfo` is a dataclass that describes an output: its geometry, refresh rate and scale. It also gives the logical width and height.

### Hyprland

- `betterwallpaper.hyprland_ipc.HyprlandIPC` sends commands to the compositor's command socket with `dispatch`.
- Once connected, it follows `EVENT>>DATA` lines on the event socket. If the connection drops, it reconnects.
- `betterwallpaper.hyprland_manager.HyprlandManager` keeps one wallpaper per workspace, stored under `hyprland.workspaces`.
- It reacts to `workspace`, `focusedmon` and `activewindow` events. To do so, it calls a `WallpaperController` that you supply.
- `generate_config_snippet()` returns keybind lines for `hyprland.conf`.

### Scheduling

`betterwallpaper.scheduler`.

- A `ScheduleEntry` covers a span of time, given as minutes from midnight, on a set of weekdays. It can span midnight.
- The `Scheduler` checks the entries every minute. When an entry's profile is not the one it activated last, it calls your callback.
- Schedules are saved under `schedules.list`.

### Slideshows

`betterwallpaper.slideshow.SlideshowManager` cycles through a playlist of wallpaper ids at a fixed interval.

- It supports pause, resume, next, previous and optional shuffle.
- Its state is saved under `slideshow.*`. `load_from_config()` restarts a slideshow that was running.

### Steam Workshop

`betterwallpaper.workshop` searches the Wallpaper Engine Workshop through the Steam Web API.

- When the API returns nothing, the search falls back to a few stand-in results.
- Items are downloaded by running `steamcmd`.
- `betterwallpaper.download_queue.DownloadQueue` downloads items one at a time. The queue is kept under `download_queue`, and interrupted downloads become pending again.

### Autostart

`betterwallpaper.autostart.AutostartManager` sets up autostart in one of two ways:

- it writes an XDG autostart entry;
- it writes and enables a systemd user service.

For Hyprland it logs the `exec-once` line to add.

### Theming

- `betterwallpaper.colors` extracts a palette from an image file, which it reads with Pillow, or from raw RGBA data. It uses k-means clustering.
- From the palette it picks primary, secondary, accent, background and foreground colours.
- `betterwallpaper.theme.ThemeApplier` applies a theme with pywal, matugen or wpgtk.
- It can also run your own script. The script receives the colours as `COLOR_PRIMARY`, `COLOR_BACKGROUND`, `COLOR0`…`COLOR15` and similar variables, and the wallpaper path as `WALLPAPER`.

## What this package does not do

- It has no command-line program, no daemon, no D-Bus service and no GUI.
- It does not draw wallpapers itself. `HyprlandManager` and `SlideshowManager` only decide which wallpaper to show, and hand that decision to code you provide.
- It does not detect monitors. `MonitorInfo` only describes one.
- It does not send desktop notifications.

## Installing

```
pip install .
```

## Example

```python
from betterwallpaper.config import ConfigManager
from betterwallpaper.profiles import ProfileManager
from betterwallpaper.colors import extract_from_image

config = ConfigManager()
config.set("transitions.duration_ms", 750)
print(config.get("general.language", "en"))

profiles = ProfileManager(config)
profiles.duplicate_profile("default", "evening")
profiles.set_active_profile("evening")

palette = extract_from_image("wallpaper.png", 16)
if palette.is_valid():
    print(palette.primary.to_hex(), palette.background.to_hex())
```

## Running the tests

```
pip install .[test]
pytest
```