"""Client for the compositor's command and event sockets."""

from __future__ import annotations

import logging
import os
import socket
import threading
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

SIGNATURE_ENV = "HYPRLAND_INSTANCE_SIGNATURE"
RUNTIME_DIR_ENV = "XDG_RUNTIME_DIR"
COMMAND_SOCKET = ".socket.sock"
EVENT_SOCKET = ".socket2.sock"
EVENT_SEPARATOR = ">>"
RECONNECT_DELAY = 1.0
_POLL_INTERVAL = 0.2

EventCallback = Callable[[str, str], None]


def parse_event_line(line: str) -> tuple[str, str] | None:
    """Split an ``EVENT>>DATA`` line; None if it has no separator."""
    event, sep, data = line.partition(EVENT_SEPARATOR)
    if not sep:
        return None
    return event, data


class HyprlandIPC:
    """Sends commands and listens for events on the compositor sockets."""

    def __init__(
        self,
        instance_signature: str | None = None,
        runtime_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        if instance_signature is None:
            instance_signature = os.environ.get(SIGNATURE_ENV, "")
        self._signature = instance_signature
        self._runtime_dir = Path(runtime_dir) if runtime_dir is not None else None
        self._callback: EventCallback | None = None
        self._callback_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def instance_signature(self) -> str:
        return self._signature

    def socket_path(self, socket_name: str) -> Path | None:
        """Path of a named socket, or None when no runtime directory is known."""
        runtime = self._runtime_dir
        if runtime is None:
            env = os.environ.get(RUNTIME_DIR_ENV)
            if env is None:
                return None
            runtime = Path(env)
        return runtime / "hypr" / self._signature / socket_name

    def is_connected(self) -> bool:
        return bool(self._signature)

    def connect(self) -> bool:
        """Start listening for events; False if no compositor instance is known."""
        if not self._signature:
            signature = os.environ.get(SIGNATURE_ENV)
            if signature is None:
                logger.warning(
                    "%s not found. Hyprland integration disabled.", SIGNATURE_ENV
                )
                return False
            self._signature = signature

        if self._thread is not None:
            return True
        self._stop.clear()
        self._thread = threading.Thread(target=self._event_loop, daemon=True)
        self._thread.start()
        logger.info("Connected to Hyprland IPC.")
        return True

    def disconnect(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def dispatch(self, command: str) -> str:
        """Send a command and return the full reply, or "" on failure."""
        if not self._signature:
            return ""
        path = self.socket_path(COMMAND_SOCKET)
        if path is None:
            return ""
        chunks: list[bytes] = []
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.connect(str(path))
                sock.sendall(command.encode("utf-8"))
                while True:
                    chunk = sock.recv(4096)
                    if not chunk:
                        break
                    chunks.append(chunk)
        except OSError:
            return ""
        return b"".join(chunks).decode("utf-8", errors="replace")

    def set_event_callback(self, callback: EventCallback | None) -> None:
        with self._callback_lock:
            self._callback = callback

    def _emit(self, event: str, data: str) -> None:
        with self._callback_lock:
            callback = self._callback
            if callback is None:
                return
            try:
                callback(event, data)
            except Exception:
                logger.exception("Hyprland event callback failed")

    def _event_loop(self) -> None:
        path = self.socket_path(EVENT_SOCKET)
        while not self._stop.is_set():
            if path is not None:
                try:
                    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                        sock.connect(str(path))
                        sock.settimeout(_POLL_INTERVAL)
                        self._read_events(sock)
                except OSError:
                    pass
            self._stop.wait(RECONNECT_DELAY)

    def _read_events(self, sock: socket.socket) -> None:
        buffer = b""
        while not self._stop.is_set():
            try:
                chunk = sock.recv(1024)
            except TimeoutError:
                continue
            if not chunk:
                return
            buffer += chunk
            *lines, buffer = buffer.split(b"\n")
            for raw in lines:
                parsed = parse_event_line(raw.decode("utf-8", errors="replace"))
                if parsed is not None:
                    self._emit(*parsed)