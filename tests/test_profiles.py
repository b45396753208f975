import json

import pytest

from betterwallpaper.config import ConfigManager
from betterwallpaper.profiles import ProfileManager, default_profiles_dir


@pytest.fixture
def config(tmp_path):
    return ConfigManager(tmp_path / "config.json")


@pytest.fixture
def manager(config, tmp_path):
    return ProfileManager(config, tmp_path / "profiles")


def test_default_profile_created(manager):
    assert manager.profile_names() == ["default"]
    assert manager.get_profile("default") == {
        "name": "default",
        "monitors": {},
        "triggers": [],
    }


def test_active_profile_from_config(manager):
    assert manager.active_profile == "default"


def test_create_and_get_round_trip(manager):
    content = {"name": "work", "monitors": {"DP-1": "/a.png"}, "triggers": []}
    assert manager.create_profile("work", content) is True
    assert manager.get_profile("work") == content
    assert "work" in manager.profile_names()


def test_update_overwrites(manager):
    manager.create_profile("work", {"name": "work"})
    manager.update_profile("work", {"name": "work", "monitors": {}})
    assert manager.get_profile("work") == {"name": "work", "monitors": {}}


def test_missing_and_broken_profiles_are_empty(manager):
    assert manager.get_profile("nothing") == {}
    (manager.profiles_dir / "broken.json").write_text("{oops")
    assert manager.get_profile("broken") == {}


def test_non_json_files_ignored(manager):
    (manager.profiles_dir / "notes.txt").write_text("hi")
    (manager.profiles_dir / "sub.json").mkdir()
    assert manager.profile_names() == ["default"]


def test_delete_rules(manager):
    assert manager.delete_profile("default") is False
    manager.create_profile("temp", {"name": "temp"})
    assert manager.delete_profile("temp") is True
    assert manager.profile_names() == ["default"]
    assert manager.delete_profile("temp") is False


def test_duplicate_renames(manager):
    assert manager.duplicate_profile("default", "copy") is True
    copy = manager.get_profile("copy")
    assert copy["name"] == "copy"
    assert copy["monitors"] == {}
    assert manager.get_profile("default")["name"] == "default"


def test_duplicate_missing_source(manager):
    assert manager.duplicate_profile("ghost", "copy") is False
    assert "copy" not in manager.profile_names()


def test_set_active_requires_existing_profile(manager, config):
    manager.set_active_profile("ghost")
    assert manager.active_profile == "default"
    manager.create_profile("night", {"name": "night"})
    manager.set_active_profile("night")
    assert manager.active_profile == "night"
    assert config.get("current_profile") == "night"
    stored = json.loads(config.path.read_text())
    assert stored["current_profile"] == "night"


def test_default_profiles_dir_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_profiles_dir() == tmp_path / "betterwallpaper" / "profiles"