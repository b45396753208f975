"""Automatic cycling through a playlist of wallpapers."""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Sequence

from .config import ConfigManager

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 300
MIN_INTERVAL = 10

WallpaperChangeCallback = Callable[[str], None]


class _RepeatingTimer:
    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self._interval = interval
        self._function = function
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self._function()


class SlideshowManager:
    """Advances through wallpaper ids at a fixed interval."""

    def __init__(self, config: ConfigManager) -> None:
        self._config = config
        self._playlist: list[str] = []
        self._index = 0
        self._interval = DEFAULT_INTERVAL
        self._running = False
        self._paused = False
        self._shuffle = False
        self._timer: _RepeatingTimer | None = None
        self._callback: WallpaperChangeCallback | None = None
        self._random = random.Random()
        self._lock = threading.RLock()

    @property
    def interval_seconds(self) -> int:
        return self._interval

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def playlist(self) -> list[str]:
        return list(self._playlist)

    @property
    def playlist_size(self) -> int:
        return len(self._playlist)

    @property
    def shuffle(self) -> bool:
        return self._shuffle

    def _start_timer(self) -> None:
        self._cancel_timer()
        self._timer = _RepeatingTimer(self._interval, self.tick)
        self._timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def start(self, wallpaper_ids: Sequence[str], interval_seconds: int) -> None:
        """Start a new slideshow, replacing any running one."""
        if interval_seconds <= 0:
            raise ValueError("interval must be positive")
        with self._lock:
            self.stop()
            self._playlist = list(wallpaper_ids)
            self._interval = interval_seconds
            self._index = 0
            if not self._playlist:
                logger.warning("Cannot start slideshow with empty playlist")
                return
            if self._shuffle:
                self._random.shuffle(self._playlist)
            self._running = True
            self._paused = False
            self._apply_current()
            self._start_timer()
            logger.info(
                "Slideshow started with %d wallpapers, interval: %ds",
                len(self._playlist),
                self._interval,
            )
            self.save_to_config()

    def stop(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._running = False
            self._paused = False
            self._playlist = []
            self._index = 0
            logger.info("Slideshow stopped")
            self.save_to_config()

    def pause(self) -> None:
        with self._lock:
            if not self._running or self._paused:
                return
            self._cancel_timer()
            self._paused = True
            logger.info("Slideshow paused")

    def resume(self) -> None:
        with self._lock:
            if not self._running or not self._paused:
                return
            self._paused = False
            self._start_timer()
            logger.info("Slideshow resumed")

    def next(self) -> None:
        """Show the following wallpaper and restart the interval."""
        with self._lock:
            if not self._running or not self._playlist:
                return
            self._index = (self._index + 1) % len(self._playlist)
            self._apply_current()
            self._restart_timer()

    def previous(self) -> None:
        """Show the preceding wallpaper and restart the interval."""
        with self._lock:
            if not self._running or not self._playlist:
                return
            self._index -= 1
            if self._index < 0:
                self._index = len(self._playlist) - 1
            self._apply_current()
            self._restart_timer()

    def _restart_timer(self) -> None:
        self._cancel_timer()
        if not self._paused:
            self._start_timer()

    def tick(self) -> None:
        """Advance by one, as the timer does when the interval elapses."""
        with self._lock:
            if self._paused or not self._playlist:
                return
            self._index = (self._index + 1) % len(self._playlist)
            self._apply_current()

    def is_running(self) -> bool:
        return self._running and not self._paused

    def is_paused(self) -> bool:
        return self._paused

    def current_wallpaper_id(self) -> str | None:
        with self._lock:
            if 0 <= self._index < len(self._playlist):
                return self._playlist[self._index]
            return None

    def set_shuffle(self, shuffle: bool) -> None:
        with self._lock:
            self._shuffle = shuffle
            if shuffle and self._running:
                self._random.shuffle(self._playlist)
                self._index = 0
            self.save_to_config()

    def set_change_callback(self, callback: WallpaperChangeCallback | None) -> None:
        self._callback = callback

    def _apply_current(self) -> None:
        wallpaper_id = self.current_wallpaper_id()
        if wallpaper_id is None:
            return
        logger.debug(
            "Slideshow: applying wallpaper %d/%d", self._index + 1, len(self._playlist)
        )
        if self._callback is not None:
            self._callback(wallpaper_id)

    def load_from_config(self) -> None:
        """Restore settings and resume a slideshow that was running."""
        conf = self._config
        shuffle = conf.get("slideshow.shuffle", False)
        self._shuffle = shuffle if isinstance(shuffle, bool) else False
        interval = conf.get("slideshow.interval", 0)
        if isinstance(interval, bool) or not isinstance(interval, int):
            interval = 0
        self._interval = interval if interval >= MIN_INTERVAL else DEFAULT_INTERVAL

        if conf.get("slideshow.running", False) is not True:
            return
        playlist = conf.get("slideshow.playlist", [])
        if not isinstance(playlist, list) or not playlist:
            return
        saved_index = conf.get("slideshow.current_index", 0)
        with self._lock:
            self.start([str(item) for item in playlist], self._interval)
            if isinstance(saved_index, bool) or not isinstance(saved_index, int):
                saved_index = 0
            if not 0 <= saved_index < len(self._playlist):
                saved_index = 0
            self._index = saved_index

    def save_to_config(self) -> None:
        conf = self._config
        conf.set("slideshow.running", self._running)
        conf.set("slideshow.shuffle", self._shuffle)
        conf.set("slideshow.interval", self._interval)
        conf.set("slideshow.playlist", list(self._playlist))
        conf.set("slideshow.current_index", self._index)