import subprocess
from unittest import mock

import pytest

from betterwallpaper.autostart import (
    AutostartManager,
    AutostartMethod,
    method_to_string,
    string_to_method,
)
from betterwallpaper.config import ConfigManager


@pytest.fixture
def run_mock():
    with mock.patch(
        "betterwallpaper.autostart.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    ) as patched:
        yield patched


@pytest.fixture
def manager(tmp_path, monkeypatch, run_mock):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    config = ConfigManager(tmp_path / "config.json")
    return AutostartManager(config)


@pytest.mark.parametrize(
    "method, text",
    [
        (AutostartMethod.XDG_AUTOSTART, "xdg"),
        (AutostartMethod.SYSTEMD_USER, "systemd"),
        (AutostartMethod.HYPRLAND_EXEC_ONCE, "hyprland"),
        (AutostartMethod.NONE, "none"),
    ],
)
def test_method_strings(method, text):
    assert method_to_string(method) == text
    assert string_to_method(text) is method


def test_unknown_string_is_none():
    assert string_to_method("cron") is AutostartMethod.NONE


def test_paths_follow_xdg_config_home(manager, tmp_path):
    base = tmp_path / "xdg"
    assert manager.xdg_autostart_path() == base / "autostart" / "betterwallpaper.desktop"
    assert manager.systemd_service_path() == base / "systemd" / "user" / "betterwallpaper.service"


def test_paths_fall_back_to_home(tmp_path, monkeypatch, run_mock):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    manager = AutostartManager(ConfigManager(tmp_path / "c.json"))
    assert manager.xdg_autostart_path() == tmp_path / ".config" / "autostart" / "betterwallpaper.desktop"


def test_enable_xdg(manager):
    assert manager.enable(AutostartMethod.XDG_AUTOSTART) is True
    text = manager.xdg_autostart_path().read_text()
    assert text.startswith("[Desktop Entry]\n")
    assert f"Exec={manager.executable_path()}\n" in text
    assert "X-GNOME-Autostart-enabled=true\n" in text
    assert manager.is_enabled()
    assert manager.current_method is AutostartMethod.XDG_AUTOSTART
    assert manager._config.get("autostart.method") == "xdg"


def test_start_minimized_flag(manager):
    manager.start_minimized = True
    manager.enable(AutostartMethod.XDG_AUTOSTART)
    text = manager.xdg_autostart_path().read_text()
    assert f"Exec={manager.executable_path()} --minimized\n" in text


def test_enable_systemd(manager, run_mock):
    assert manager.enable(AutostartMethod.SYSTEMD_USER) is True
    text = manager.systemd_service_path().read_text()
    assert "WantedBy=default.target\n" in text
    assert f"ExecStart={manager.executable_path()}\n" in text
    commands = [c.args[0] for c in run_mock.call_args_list]
    assert ["systemctl", "--user", "enable", "betterwallpaper.service"] in commands


def test_disable_removes_entries(manager):
    manager.enable(AutostartMethod.XDG_AUTOSTART)
    manager.enable(AutostartMethod.SYSTEMD_USER)
    assert manager.disable() is True
    assert not manager.is_enabled()
    assert manager.current_method is AutostartMethod.NONE
    assert manager._config.get("autostart.method") == "none"


def test_enable_none_fails(manager):
    assert manager.enable(AutostartMethod.NONE) is False
    assert not manager.is_enabled()


def test_enable_hyprland_writes_nothing(manager):
    assert manager.enable(AutostartMethod.HYPRLAND_EXEC_ONCE) is True
    assert not manager.is_enabled()
    assert manager.current_method is AutostartMethod.HYPRLAND_EXEC_ONCE


def test_available_methods(manager, run_mock, monkeypatch):
    run_mock.return_value = subprocess.CompletedProcess([], 1)
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "Hyprland")
    assert manager.available_methods() == [
        AutostartMethod.XDG_AUTOSTART,
        AutostartMethod.HYPRLAND_EXEC_ONCE,
    ]


def test_available_methods_with_systemd(manager, monkeypatch):
    monkeypatch.delenv("XDG_CURRENT_DESKTOP", raising=False)
    assert manager.available_methods() == [
        AutostartMethod.XDG_AUTOSTART,
        AutostartMethod.SYSTEMD_USER,
    ]


def test_settings_round_trip(manager):
    manager.current_method = AutostartMethod.SYSTEMD_USER
    manager.start_minimized = True
    manager.save_settings()
    fresh = AutostartManager(manager._config)
    fresh.load_settings()
    assert fresh.current_method is AutostartMethod.SYSTEMD_USER
    assert fresh.start_minimized is True