"""Description of a connected output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MonitorInfo:
    """Geometry and identity of one monitor."""

    name: str = ""
    description: str = ""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    refresh_rate: int = 60000  # in mHz, 60000 = 60 Hz
    scale: float = 1.0
    id: int = 0
    enabled: bool = True
    primary: bool = False

    def logical_width(self) -> int:
        """Width in logical pixels, after scaling."""
        return int(self.width / self.scale)

    def logical_height(self) -> int:
        """Height in logical pixels, after scaling."""
        return int(self.height / self.scale)