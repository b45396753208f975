"""Dominant-colour extraction from wallpapers using k-means clustering."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_PALETTE_SIZE = 16
MAX_SAMPLES = 10000
MIN_SAMPLE_LUMINANCE = 0.05
MAX_SAMPLE_LUMINANCE = 0.95
CONVERGENCE_DISTANCE = 1.0


@dataclass(frozen=True)
class Color:
    """An RGB colour with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not isinstance(channel, int):
                raise TypeError("colour channels must be integers")
            if not 0 <= channel <= 255:
                raise ValueError("colour channels must be between 0 and 255")

    def to_hex(self) -> str:
        """The colour as ``#rrggbb``."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_rgb(self) -> str:
        """The colour as ``rgb(r, g, b)``."""
        return f"rgb({self.r}, {self.g}, {self.b})"

    def _normalized(self) -> tuple[float, float, float]:
        return self.r / 255.0, self.g / 255.0, self.b / 255.0

    def luminance(self) -> float:
        """Relative luminance, 0.0 to 1.0."""
        rn, gn, bn = self._normalized()
        return 0.2126 * rn + 0.7152 * gn + 0.0722 * bn

    def saturation(self) -> float:
        """HSL saturation, 0.0 to 1.0."""
        rn, gn, bn = self._normalized()
        max_c = max(rn, gn, bn)
        min_c = min(rn, gn, bn)
        if max_c == min_c:
            return 0.0
        lightness = (max_c + min_c) / 2.0
        if lightness <= 0.5:
            return (max_c - min_c) / (max_c + min_c)
        return (max_c - min_c) / (2.0 - max_c - min_c)

    def hue(self) -> int:
        """Hue in degrees, 0 to 359."""
        rn, gn, bn = self._normalized()
        max_c = max(rn, gn, bn)
        min_c = min(rn, gn, bn)
        delta = max_c - min_c
        if delta < 0.00001:
            return 0
        if max_c == rn:
            h = 60.0 * math.fmod((gn - bn) / delta, 6.0)
        elif max_c == gn:
            h = 60.0 * ((bn - rn) / delta + 2.0)
        else:
            h = 60.0 * ((rn - gn) / delta + 4.0)
        if h < 0:
            h += 360
        return int(h)

    def distance_to(self, other: Color) -> float:
        """Euclidean distance in RGB space."""
        return math.sqrt(
            (self.r - other.r) ** 2 + (self.g - other.g) ** 2 + (self.b - other.b) ** 2
        )

    def is_light(self) -> bool:
        return self.luminance() > 0.5

    def is_dark(self) -> bool:
        return not self.is_light()


@dataclass
class ColorPalette:
    """Colours chosen from an image for theming."""

    primary: Color = field(default_factory=Color)
    secondary: Color = field(default_factory=Color)
    accent: Color = field(default_factory=Color)
    background: Color = field(default_factory=Color)
    foreground: Color = field(default_factory=Color)
    all_colors: list[Color] = field(default_factory=list)

    def is_valid(self) -> bool:
        return bool(self.all_colors)


def kmeans(
    pixels: Sequence[Color],
    k: int,
    max_iterations: int = 20,
    rng: random.Random | None = None,
) -> list[Color]:
    """Cluster ``pixels`` into ``k`` centroids, seeded from random samples."""
    if not pixels or k <= 0:
        return []
    rng = rng if rng is not None else random.Random()
    centroids = [pixels[rng.randrange(len(pixels))] for _ in range(k)]

    for _ in range(max_iterations):
        counts = [0] * k
        sums = [[0, 0, 0] for _ in range(k)]
        for pixel in pixels:
            nearest = min(range(k), key=lambda j: pixel.distance_to(centroids[j]))
            counts[nearest] += 1
            total = sums[nearest]
            total[0] += pixel.r
            total[1] += pixel.g
            total[2] += pixel.b

        converged = True
        for j, (count, (sr, sg, sb)) in enumerate(zip(counts, sums)):
            if count == 0:
                continue
            updated = Color(int(sr / count), int(sg / count), int(sb / count))
            if updated.distance_to(centroids[j]) > CONVERGENCE_DISTANCE:
                converged = False
            centroids[j] = updated
        if converged:
            break

    return centroids


def sort_by_luminance(colors: Iterable[Color]) -> list[Color]:
    """Colours from darkest to lightest."""
    return sorted(colors, key=Color.luminance)


def sort_by_saturation(colors: Iterable[Color]) -> list[Color]:
    """Colours from most to least saturated."""
    return sorted(colors, key=Color.saturation, reverse=True)


def sort_by_hue(colors: Iterable[Color]) -> list[Color]:
    """Colours in order of hue."""
    return sorted(colors, key=Color.hue)


def select_primary(colors: Sequence[Color]) -> Color:
    """The most saturated colour of middling luminance."""
    best = Color()
    best_score = -1.0
    for color in colors:
        score = color.saturation() * (1.0 - abs(color.luminance() - 0.5))
        if score > best_score:
            best_score = score
            best = color
    return best


def select_secondary(colors: Sequence[Color], primary: Color) -> Color:
    """A vibrant colour far from ``primary``."""
    best = Color()
    best_score = -1.0
    for color in colors:
        score = color.distance_to(primary) * color.saturation()
        if score > best_score:
            best_score = score
            best = color
    return best


def select_accent(colors: Sequence[Color]) -> Color:
    """The most saturated colour."""
    best = Color()
    max_saturation = -1.0
    for color in colors:
        saturation = color.saturation()
        if saturation > max_saturation:
            max_saturation = saturation
            best = color
    return best


def select_background(colors: Sequence[Color]) -> Color:
    """The first colour (the darkest, once sorted by luminance), or black."""
    return colors[0] if colors else Color(0, 0, 0)


def select_foreground(background: Color) -> Color:
    """A text colour that contrasts with ``background``."""
    if background.is_light():
        return Color(30, 30, 30)
    return Color(240, 240, 240)


def build_palette(colors: Iterable[Color]) -> ColorPalette:
    """Sort ``colors`` by luminance and pick the palette roles from them."""
    ordered = sort_by_luminance(colors)
    primary = select_primary(ordered)
    background = select_background(ordered)
    return ColorPalette(
        primary=primary,
        secondary=select_secondary(ordered, primary),
        accent=select_accent(ordered),
        background=background,
        foreground=select_foreground(background),
        all_colors=ordered,
    )


def _usable(color: Color) -> bool:
    return MIN_SAMPLE_LUMINANCE < color.luminance() < MAX_SAMPLE_LUMINANCE


def extract_from_pixels(
    pixels: bytes | bytearray | memoryview,
    width: int,
    height: int,
    palette_size: int = DEFAULT_PALETTE_SIZE,
    rng: random.Random | None = None,
) -> ColorPalette:
    """Palette from raw RGBA pixel data."""
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    data = memoryview(pixels).cast("B") if not isinstance(pixels, (bytes, bytearray)) else pixels
    count = width * height
    if len(data) < count * 4:
        raise ValueError("pixel buffer is smaller than width * height * 4")

    step = max(1, count // MAX_SAMPLES)
    samples = [
        color
        for color in (
            Color(data[i * 4], data[i * 4 + 1], data[i * 4 + 2])
            for i in range(0, count, step)
        )
        if _usable(color)
    ]
    if not samples:
        return ColorPalette()
    return build_palette(kmeans(samples, palette_size, rng=rng))


def extract_from_image(
    image_path: str,
    palette_size: int = DEFAULT_PALETTE_SIZE,
    rng: random.Random | None = None,
) -> ColorPalette:
    """Palette from an image file; OSError if the file cannot be read as an image."""
    with Image.open(image_path) as source:
        image = source.convert("RGB")
    width, height = image.size
    access = image.load()

    step = max(1, (width * height) // MAX_SAMPLES)
    samples = []
    for y in range(0, height, step):
        for x in range(0, width, step):
            color = Color(*access[x, y][:3])
            if _usable(color):
                samples.append(color)

    if not samples:
        logger.warning("No suitable color samples found in image")
        return ColorPalette()

    palette = build_palette(kmeans(samples, palette_size, rng=rng))
    logger.info("Extracted %d colors from image", len(palette.all_colors))
    return palette