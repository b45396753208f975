"""Time-of-day profile switching."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from .config import ConfigManager

logger = logging.getLogger(__name__)

SCHEDULES_KEY = "schedules.list"
ALL_DAYS = 0b1111111
CHECK_INTERVAL = 60.0

ProfileActivateCallback = Callable[[str], None]


def _field(data: dict[str, Any], key: str, default: Any, kind: type) -> Any:
    if key not in data:
        return default
    value = data[key]
    if kind is int and isinstance(value, bool):
        raise TypeError(f"schedule field '{key}' must be an integer")
    if not isinstance(value, kind):
        raise TypeError(f"schedule field '{key}' must be of type {kind.__name__}")
    return value


@dataclass
class ScheduleEntry:
    """A time window during which a profile should be active.

    Times are minutes from midnight; an ``end_time`` of 0 means no end.
    ``days_of_week`` is a bit set with Sunday as bit 0.
    """

    id: str = ""
    profile_id: str = ""
    name: str = ""
    start_time: int = 0
    end_time: int = 0
    days_of_week: int = ALL_DAYS
    enabled: bool = True
    slideshow: bool = False
    slideshow_interval: int = 300

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "profileId": self.profile_id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "daysOfWeek": self.days_of_week,
            "enabled": self.enabled,
            "slideshow": self.slideshow,
            "slideshowInterval": self.slideshow_interval,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ScheduleEntry:
        """Build an entry; missing fields take defaults, mistyped ones raise TypeError."""
        if not isinstance(data, dict):
            raise TypeError("schedule entry must be an object")
        return cls(
            id=_field(data, "id", "", str),
            profile_id=_field(data, "profileId", "", str),
            name=_field(data, "name", "", str),
            start_time=_field(data, "startTime", 0, int),
            end_time=_field(data, "endTime", 0, int),
            days_of_week=_field(data, "daysOfWeek", ALL_DAYS, int),
            enabled=_field(data, "enabled", True, bool),
            slideshow=_field(data, "slideshow", False, bool),
            slideshow_interval=_field(data, "slideshowInterval", 300, int),
        )


def should_trigger(entry: ScheduleEntry, current_minutes: int, current_day: int) -> bool:
    """Whether ``entry`` covers the given minute of the day on the given weekday (0 = Sunday)."""
    if not entry.days_of_week & (1 << current_day):
        return False
    if entry.end_time == 0:
        return current_minutes >= entry.start_time
    if entry.end_time < entry.start_time:
        # Window crosses midnight.
        return current_minutes >= entry.start_time or current_minutes < entry.end_time
    return entry.start_time <= current_minutes < entry.end_time


class Scheduler:
    """Checks schedules every minute and asks for profile activations."""

    def __init__(self, config: ConfigManager) -> None:
        self._config = config
        self._schedules: list[ScheduleEntry] = []
        self._callback: ProfileActivateCallback | None = None
        self._running = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_triggered_profile = ""
        self._lock = threading.RLock()

    def start(self) -> None:
        if self._running:
            return
        self.load_from_config()
        self._running = True
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("Scheduler started with %d schedules", len(self._schedules))
        self.check_schedules()

    def stop(self) -> None:
        if not self._running:
            return
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
        self._running = False
        logger.info("Scheduler stopped")

    def _run(self) -> None:
        while not self._stop.wait(CHECK_INTERVAL):
            self.check_schedules()

    def is_running(self) -> bool:
        return self._running

    def add_schedule(self, entry: ScheduleEntry) -> None:
        with self._lock:
            self._schedules.append(entry)
        self.save_to_config()

    def update_schedule(self, entry: ScheduleEntry) -> None:
        """Replace the schedule with the same id, if there is one."""
        with self._lock:
            for position, existing in enumerate(self._schedules):
                if existing.id == entry.id:
                    self._schedules[position] = entry
                    break
            else:
                return
        self.save_to_config()

    def remove_schedule(self, schedule_id: str) -> None:
        with self._lock:
            self._schedules = [s for s in self._schedules if s.id != schedule_id]
        self.save_to_config()

    def set_schedule_enabled(self, schedule_id: str, enabled: bool) -> None:
        entry = self.get_schedule(schedule_id)
        if entry is None:
            return
        entry.enabled = enabled
        self.save_to_config()

    def schedules(self) -> list[ScheduleEntry]:
        with self._lock:
            return list(self._schedules)

    def get_schedule(self, schedule_id: str) -> ScheduleEntry | None:
        with self._lock:
            return next((s for s in self._schedules if s.id == schedule_id), None)

    def set_profile_activate_callback(self, callback: ProfileActivateCallback | None) -> None:
        self._callback = callback

    def check_schedules(self, now: datetime | None = None) -> None:
        """Activate the profile of every enabled schedule that covers ``now``."""
        if now is None:
            now = datetime.now()
        current_minutes = now.hour * 60 + now.minute
        current_day = now.isoweekday() % 7
        for entry in self.schedules():
            if not entry.enabled:
                continue
            if not should_trigger(entry, current_minutes, current_day):
                continue
            if self._last_triggered_profile == entry.profile_id:
                continue
            logger.info("Schedule trigger: %s -> %s", entry.name, entry.profile_id)
            self._last_triggered_profile = entry.profile_id
            if self._callback is not None:
                self._callback(entry.profile_id)

    def load_from_config(self) -> None:
        stored = self._config.get(SCHEDULES_KEY, [])
        if not isinstance(stored, list):
            stored = []
        entries = [ScheduleEntry.from_json(item) for item in stored]
        with self._lock:
            self._schedules = entries
        logger.debug("Loaded %d schedules", len(entries))

    def save_to_config(self) -> None:
        with self._lock:
            stored = [entry.to_json() for entry in self._schedules]
        self._config.set(SCHEDULES_KEY, stored)