"""Battery state monitoring through the kernel's power supply entries."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

POWER_SUPPLY_DIR = "/sys/class/power_supply"

BatteryCallback = Callable[[bool], None]


def read_battery_state(power_supply_dir: str | os.PathLike[str] = POWER_SUPPLY_DIR) -> bool:
    """True if any battery reports that it is discharging."""
    root = Path(power_supply_dir)
    if not root.exists():
        return False
    for entry in root.iterdir():
        if "BAT" not in entry.name:
            continue
        try:
            text = (entry / "status").read_text()
        except OSError:
            continue
        lines = text.splitlines()
        if lines and lines[0] == "Discharging":
            return True
    return False


class PowerManager:
    """Polls the battery state and reports changes to callbacks."""

    def __init__(
        self,
        power_supply_dir: str | os.PathLike[str] = POWER_SUPPLY_DIR,
        interval: float = 10.0,
    ) -> None:
        self._dir = Path(power_supply_dir)
        self._interval = interval
        self._callbacks: list[BatteryCallback] = []
        self._lock = threading.Lock()
        self._last_state = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def last_state(self) -> bool:
        return self._last_state

    def start_monitoring(self) -> None:
        if self._thread is not None:
            return
        self._last_state = read_battery_state(self._dir)
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("PowerManager: Monitoring started")

    def stop_monitoring(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.check_battery()

    def is_on_battery(self) -> bool:
        return read_battery_state(self._dir)

    def add_callback(self, callback: BatteryCallback) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def check_battery(self) -> None:
        """Read the state now and notify callbacks if it changed."""
        new_state = read_battery_state(self._dir)
        if new_state == self._last_state:
            return
        self._last_state = new_state
        logger.info("Power state changed: %s", "Battery" if new_state else "AC")
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(new_state)