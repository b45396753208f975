import json
from pathlib import Path

import pytest

from betterwallpaper.config import ConfigManager, default_config_path
from betterwallpaper.schema import default_settings


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "betterwallpaper" / "config.json"


def test_missing_file_is_created_with_defaults(config_path):
    manager = ConfigManager(config_path)
    assert config_path.exists()
    assert json.loads(config_path.read_text()) == default_settings()
    assert manager.data == default_settings()


def test_saved_file_uses_four_space_indent(config_path):
    ConfigManager(config_path)
    assert config_path.read_text().startswith("{\n    ")


def test_load_merges_over_defaults_shallowly(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"general": {"autostart": False}, "extra": 1}))
    manager = ConfigManager(config_path)
    assert manager.data["general"] == {"autostart": False}
    assert manager.data["library"] == default_settings()["library"]
    assert manager.get("extra") == 1


def test_invalid_file_is_replaced_by_defaults(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json")
    manager = ConfigManager(config_path)
    assert manager.data == default_settings()
    assert json.loads(config_path.read_text()) == default_settings()


def test_load_returns_false_for_broken_file(config_path):
    manager = ConfigManager(config_path)
    config_path.write_text("[1, 2")
    assert manager.load() is False


def test_get_dotted_and_default(config_path):
    manager = ConfigManager(config_path)
    assert manager.get("general.language") == "en"
    assert manager.get("library.thumbnail_size") == 256
    assert manager.get("missing.key", "fallback") == "fallback"
    assert manager.get("missing") is None
    assert manager.get("", "empty") == "empty"


def test_get_through_scalar_returns_default(config_path):
    manager = ConfigManager(config_path)
    assert manager.get("version.deeper", "nope") == "nope"


def test_set_persists_and_creates_path(config_path):
    manager = ConfigManager(config_path)
    manager.set("schedules.list", [{"id": "a"}])
    manager.set("general.language", "de")
    reloaded = ConfigManager(config_path)
    assert reloaded.get("schedules.list") == [{"id": "a"}]
    assert reloaded.get("general.language") == "de"


def test_set_through_scalar_raises(config_path):
    manager = ConfigManager(config_path)
    with pytest.raises(TypeError):
        manager.set("version.inner", 3)


def test_watch_callback_receives_key_and_value(config_path):
    manager = ConfigManager(config_path)
    seen = []
    manager.watch(lambda key, value: seen.append((key, value)))
    manager.set("defaults.audio_volume", 75)
    assert seen == [("defaults.audio_volume", 75)]


def test_get_returns_copy(config_path):
    manager = ConfigManager(config_path)
    paths = manager.get("library.paths")
    paths.append("/x")
    assert manager.get("library.paths") == []


def test_reset_to_defaults(config_path):
    manager = ConfigManager(config_path)
    manager.set("general.language", "fr")
    manager.reset_to_defaults()
    assert manager.get("general.language") == "en"


def test_default_config_path_prefers_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_path() == tmp_path / "betterwallpaper" / "config.json"


def test_default_config_path_uses_home(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_config_path() == tmp_path / ".config" / "betterwallpaper" / "config.json"


def test_default_config_path_fallback(monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    assert default_config_path() == Path("config.json")