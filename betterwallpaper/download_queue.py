"""A queue of Workshop downloads processed one at a time."""

from __future__ import annotations

import copy
import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .config import ConfigManager
from .workshop import DownloadProgress, SteamWorkshopClient

logger = logging.getLogger(__name__)

QUEUE_KEY = "download_queue"


class QueueStatus(enum.IntEnum):
    """State of a queued download; the numbers are what the settings store."""

    PENDING = 0
    DOWNLOADING = 1
    PAUSED = 2
    COMPLETED = 3
    FAILED = 4


@dataclass
class QueueItem:
    workshop_id: str
    title: str = ""
    progress: DownloadProgress = field(default_factory=DownloadProgress)
    status: QueueStatus = QueueStatus.PENDING
    error_message: str = ""


class DownloadClient(Protocol):
    """What the queue needs from the Workshop client."""

    def download(
        self,
        workshop_id: str,
        progress: Callable[[DownloadProgress], None] | None,
        finish: Callable[[bool, str], None] | None,
    ) -> object: ...

    def cancel_download(self) -> None: ...


QueueChangeCallback = Callable[[list[QueueItem]], None]
QueueProgressCallback = Callable[[str, DownloadProgress], None]
CompleteCallback = Callable[[str, bool, str], None]


class DownloadQueue:
    """Holds pending downloads and hands them to the client in order."""

    def __init__(self, config: ConfigManager, client: DownloadClient | None = None) -> None:
        self._config = config
        self._client: DownloadClient = client if client is not None else SteamWorkshopClient()
        self._queue: list[QueueItem] = []
        self._lock = threading.RLock()
        self._processing = False
        self._paused = False
        self.queue_change_callback: QueueChangeCallback | None = None
        self.progress_callback: QueueProgressCallback | None = None
        self.complete_callback: CompleteCallback | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def is_paused(self) -> bool:
        return self._paused

    def _find(self, workshop_id: str) -> QueueItem | None:
        return next((i for i in self._queue if i.workshop_id == workshop_id), None)

    def _front_downloading(self) -> bool:
        return bool(self._queue) and self._queue[0].status is QueueStatus.DOWNLOADING

    def add_to_queue(self, workshop_id: str, title: str = "") -> None:
        """Append an item and start downloading if the queue is idle."""
        with self._lock:
            if self._find(workshop_id) is not None:
                logger.warning("Item already in queue: %s", workshop_id)
                return
            display = title or f"Workshop Item {workshop_id}"
            item = QueueItem(
                workshop_id=workshop_id,
                title=display,
                progress=DownloadProgress(workshop_id=workshop_id, title=display),
            )
            self._queue.append(item)
            logger.info("Added to download queue: %s", display)
            self._notify_queue_change()
            self.save_to_config()
            start = not self._processing and not self._paused
        if start:
            self._process_next()

    def remove_from_queue(self, workshop_id: str) -> bool:
        """Drop an item; the one being downloaded must be cancelled first."""
        with self._lock:
            if self._front_downloading() and self._queue[0].workshop_id == workshop_id:
                logger.warning("Cannot remove item currently downloading. Cancel it first.")
                return False
            remaining = [i for i in self._queue if i.workshop_id != workshop_id]
            if len(remaining) == len(self._queue):
                return False
            self._queue = remaining
            logger.info("Removed from queue: %s", workshop_id)
            self._notify_queue_change()
            self.save_to_config()
            return True

    def clear_queue(self) -> None:
        with self._lock:
            if self._processing:
                self._client.cancel_download()
                self._processing = False
            self._queue = []
            self._notify_queue_change()
            self.save_to_config()

    def move_to_front(self, workshop_id: str) -> None:
        """Make an item the next to download, behind any running download."""
        with self._lock:
            position = next(
                (n for n, i in enumerate(self._queue) if i.workshop_id == workshop_id),
                None,
            )
            if position is None or position == 0:
                return
            item = self._queue.pop(position)
            self._queue.insert(1 if self._front_downloading() else 0, item)
            self._notify_queue_change()
            self.save_to_config()

    def start_queue(self) -> None:
        with self._lock:
            self._paused = False
            start = not self._processing and bool(self._queue)
        if start:
            self._process_next()

    def pause_queue(self) -> None:
        """Stop starting new downloads; a running one continues."""
        self._paused = True
        logger.info("Download queue paused")

    def resume_queue(self) -> None:
        self._paused = False
        if not self._processing:
            self._process_next()
        logger.info("Download queue resumed")

    def cancel_current(self) -> None:
        self._client.cancel_download()
        with self._lock:
            if self._front_downloading():
                self._queue[0].status = QueueStatus.FAILED
                self._queue[0].error_message = "Cancelled by user"
            self._processing = False
            self._notify_queue_change()

    def queue(self) -> list[QueueItem]:
        """Copies of the queued items, in order."""
        with self._lock:
            return copy.deepcopy(self._queue)

    def is_processing(self) -> bool:
        return self._processing

    def current_item(self) -> QueueItem | None:
        """The item being downloaded, if any."""
        with self._lock:
            return self._queue[0] if self._front_downloading() else None

    def _process_next(self) -> None:
        if self._paused:
            return
        with self._lock:
            item = next((i for i in self._queue if i.status is QueueStatus.PENDING), None)
            if item is None:
                self._processing = False
                return
            item.status = QueueStatus.DOWNLOADING
            self._processing = True
            self._notify_queue_change()
            workshop_id = item.workshop_id

        def on_progress(progress: DownloadProgress) -> None:
            with self._lock:
                found = self._find(workshop_id)
                if found is not None:
                    found.progress = progress
            if self.progress_callback is not None:
                self.progress_callback(workshop_id, progress)

        def on_finish(success: bool, detail: str) -> None:
            with self._lock:
                found = self._find(workshop_id)
                if found is not None:
                    found.status = QueueStatus.COMPLETED if success else QueueStatus.FAILED
                    if not success:
                        found.error_message = detail
                self._processing = False
            if self.complete_callback is not None:
                self.complete_callback(workshop_id, success, detail)
            with self._lock:
                self._notify_queue_change()
                self.save_to_config()
            self._process_next()

        self._client.download(workshop_id, on_progress, on_finish)

    def _notify_queue_change(self) -> None:
        if self.queue_change_callback is not None:
            self.queue_change_callback(copy.deepcopy(self._queue))

    def load_from_config(self) -> None:
        """Restore the queue; interrupted downloads become pending again."""
        stored: Any = self._config.get(QUEUE_KEY, [])
        if not isinstance(stored, list):
            stored = []
        items: list[QueueItem] = []
        for entry in stored:
            if not isinstance(entry, dict):
                raise TypeError("queue entry must be an object")
            workshop_id = entry.get("workshopId", "")
            title = entry.get("title", "")
            raw_status = entry.get("status", 0)
            if not isinstance(workshop_id, str) or not isinstance(title, str):
                raise TypeError("queue entry fields must be strings")
            if isinstance(raw_status, bool) or not isinstance(raw_status, int):
                raise TypeError("queue entry status must be an integer")
            status = QueueStatus(raw_status)
            if status is QueueStatus.DOWNLOADING:
                status = QueueStatus.PENDING
            if workshop_id:
                items.append(
                    QueueItem(
                        workshop_id=workshop_id,
                        title=title,
                        progress=DownloadProgress(workshop_id=workshop_id, title=title),
                        status=status,
                    )
                )
        with self._lock:
            self._queue = items

    def save_to_config(self) -> None:
        with self._lock:
            stored = [
                {
                    "workshopId": item.workshop_id,
                    "title": item.title,
                    "status": int(item.status),
                }
                for item in self._queue
            ]
        self._config.set(QUEUE_KEY, stored)