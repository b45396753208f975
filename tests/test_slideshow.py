import pytest

from betterwallpaper.config import ConfigManager
from betterwallpaper.slideshow import DEFAULT_INTERVAL, SlideshowManager

IDS = ["a", "b", "c"]


@pytest.fixture
def config(tmp_path):
    return ConfigManager(tmp_path / "config.json")


@pytest.fixture
def show(config):
    manager = SlideshowManager(config)
    yield manager
    manager.stop()


def test_start_applies_first_wallpaper(show):
    applied = []
    show.set_change_callback(applied.append)
    show.start(IDS, 300)
    assert applied == ["a"]
    assert show.current_wallpaper_id() == "a"
    assert show.is_running()
    assert show.playlist_size == len(IDS)


def test_start_with_empty_playlist_does_not_run(show):
    show.start([], 300)
    assert not show.is_running()
    assert show.current_wallpaper_id() is None


def test_start_rejects_non_positive_interval(show):
    with pytest.raises(ValueError):
        show.start(IDS, 0)


def test_next_wraps_around(show):
    show.start(IDS, 300)
    seen = []
    for _ in IDS:
        show.next()
        seen.append(show.current_wallpaper_id())
    assert seen == IDS[1:] + IDS[:1]


def test_previous_wraps_to_end(show):
    show.start(IDS, 300)
    show.previous()
    assert show.current_wallpaper_id() == IDS[-1]
    assert show.current_index == len(IDS) - 1


def test_next_when_not_running_is_ignored(show):
    applied = []
    show.set_change_callback(applied.append)
    show.next()
    show.previous()
    assert applied == []
    assert show.current_index == 0


def test_pause_and_resume(show):
    show.start(IDS, 300)
    show.pause()
    assert show.is_paused()
    assert not show.is_running()
    show.tick()
    assert show.current_wallpaper_id() == "a"
    show.resume()
    assert show.is_running()
    show.tick()
    assert show.current_wallpaper_id() == "b"


def test_stop_clears_state_and_config(show, config):
    show.start(IDS, 300)
    show.stop()
    assert show.playlist_size == 0
    assert not show.is_running()
    assert config.get("slideshow.running") is False
    assert config.get("slideshow.playlist") == []


def test_start_saves_state(show, config):
    show.start(IDS, 120)
    assert config.get("slideshow.running") is True
    assert config.get("slideshow.playlist") == IDS
    assert config.get("slideshow.interval") == 120


def test_shuffle_keeps_same_items(show):
    ids = [str(n) for n in range(50)]
    show.set_shuffle(True)
    show.start(ids, 300)
    assert show.shuffle is True
    assert sorted(show.playlist) == sorted(ids)
    assert show.current_index == 0


def test_load_from_config_uses_default_interval_when_too_short(config):
    config.set("slideshow.interval", 5)
    manager = SlideshowManager(config)
    manager.load_from_config()
    assert manager.interval_seconds == DEFAULT_INTERVAL == 300
    assert not manager.is_running()


def test_load_from_config_resumes_running_slideshow(config):
    config.set("slideshow.interval", 60)
    config.set("slideshow.running", True)
    config.set("slideshow.playlist", IDS)
    config.set("slideshow.current_index", 2)
    manager = SlideshowManager(config)
    try:
        manager.load_from_config()
        assert manager.is_running()
        assert manager.interval_seconds == 60
        assert manager.current_wallpaper_id() == "c"
    finally:
        manager.stop()


def test_load_from_config_resets_out_of_range_index(config):
    config.set("slideshow.running", True)
    config.set("slideshow.playlist", IDS)
    config.set("slideshow.current_index", 99)
    manager = SlideshowManager(config)
    try:
        manager.load_from_config()
        assert manager.current_index == 0
    finally:
        manager.stop()