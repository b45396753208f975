import random

import pytest
from PIL import Image

from betterwallpaper.colors import (
    Color,
    ColorPalette,
    build_palette,
    extract_from_image,
    extract_from_pixels,
    kmeans,
    select_accent,
    select_background,
    select_foreground,
    select_primary,
    select_secondary,
    sort_by_hue,
    sort_by_luminance,
    sort_by_saturation,
)


def test_to_hex():
    assert Color(255, 0, 128).to_hex() == "#ff0080"


def test_to_rgb():
    assert Color(1, 2, 3).to_rgb() == "rgb(1, 2, 3)"


def test_channel_out_of_range_raises():
    with pytest.raises(ValueError):
        Color(256, 0, 0)


def test_light_and_dark():
    assert Color(255, 255, 255).is_light()
    assert Color(0, 0, 0).is_dark()
    assert not Color(0, 0, 0).is_light()


def test_gray_has_no_saturation_or_hue():
    gray = Color(100, 100, 100)
    assert gray.saturation() == 0.0
    assert gray.hue() == 0


def test_green_hue():
    assert Color(0, 255, 0).hue() == 120


def test_hue_range():
    for color in (Color(255, 0, 10), Color(10, 0, 255), Color(255, 200, 0)):
        assert 0 <= color.hue() < 360


def test_distance_symmetric_and_zero_to_self():
    a, b = Color(10, 20, 30), Color(200, 100, 50)
    assert a.distance_to(a) == 0.0
    assert a.distance_to(b) == b.distance_to(a)


def test_sort_by_luminance_orders_ascending():
    colors = [Color(255, 255, 255), Color(0, 0, 0), Color(120, 120, 120)]
    ordered = sort_by_luminance(colors)
    lums = [c.luminance() for c in ordered]
    assert lums == sorted(lums)


def test_sort_by_saturation_orders_descending():
    colors = [Color(100, 100, 100), Color(255, 0, 0), Color(200, 100, 100)]
    ordered = sort_by_saturation(colors)
    sats = [c.saturation() for c in ordered]
    assert sats == sorted(sats, reverse=True)


def test_sort_by_hue_orders_ascending():
    colors = [Color(0, 0, 255), Color(255, 0, 0), Color(0, 255, 0)]
    hues = [c.hue() for c in sort_by_hue(colors)]
    assert hues == sorted(hues)


def test_kmeans_empty_and_zero_k():
    assert kmeans([], 3) == []
    assert kmeans([Color(1, 2, 3)], 0) == []


def test_kmeans_identical_pixels():
    pixel = Color(50, 60, 70)
    assert kmeans([pixel] * 20, 1, rng=random.Random(1)) == [pixel]


def test_kmeans_returns_k_centroids():
    pixels = [Color(250, 10, 10)] * 10 + [Color(10, 10, 250)] * 10
    result = kmeans(pixels, 4, rng=random.Random(3))
    assert len(result) == 4
    assert all(c in (Color(250, 10, 10), Color(10, 10, 250)) for c in result)


def test_select_background_empty_is_black():
    assert select_background([]) == Color(0, 0, 0)


def test_select_foreground_contrasts():
    assert select_foreground(Color(255, 255, 255)) == Color(30, 30, 30)
    assert select_foreground(Color(0, 0, 0)) == Color(240, 240, 240)


def test_select_accent_picks_most_saturated():
    vivid = Color(255, 0, 0)
    colors = [Color(120, 120, 120), vivid, Color(150, 120, 120)]
    assert select_accent(colors) == vivid


def test_select_primary_and_secondary_are_members():
    colors = [Color(200, 30, 30), Color(30, 200, 30), Color(90, 90, 90)]
    primary = select_primary(colors)
    assert primary in colors
    assert select_secondary(colors, primary) in colors


def test_build_palette_roles():
    colors = [Color(200, 30, 30), Color(40, 40, 120), Color(220, 220, 100)]
    palette = build_palette(colors)
    assert palette.is_valid()
    assert palette.background == palette.all_colors[0]
    assert palette.all_colors == sort_by_luminance(colors)
    assert palette.foreground == select_foreground(palette.background)


def test_empty_palette_invalid():
    assert not ColorPalette().is_valid()


def test_extract_from_pixels_uniform():
    color = Color(200, 50, 50)
    data = bytes([color.r, color.g, color.b, 255]) * 64
    palette = extract_from_pixels(data, 8, 8, 4, rng=random.Random(0))
    assert palette.all_colors == [color] * 4
    assert palette.primary == color
    assert palette.foreground == Color(240, 240, 240)


def test_extract_from_pixels_all_black_gives_empty():
    data = bytes([0, 0, 0, 255]) * 16
    assert not extract_from_pixels(data, 4, 4).is_valid()


def test_extract_from_pixels_short_buffer_raises():
    with pytest.raises(ValueError):
        extract_from_pixels(bytes(10), 4, 4)


def test_extract_from_image(tmp_path):
    path = tmp_path / "wall.png"
    Image.new("RGB", (16, 16), (30, 120, 200)).save(path)
    palette = extract_from_image(str(path), 3, rng=random.Random(5))
    assert palette.all_colors == [Color(30, 120, 200)] * 3
    assert palette.accent == Color(30, 120, 200)


def test_extract_from_missing_image_raises(tmp_path):
    with pytest.raises(OSError):
        extract_from_image(str(tmp_path / "missing.png"))