from betterwallpaper.schema import Keys, default_settings

_CHECKED_KEYS = [
    Keys.AUTOSTART,
    Keys.AUTOSTART_METHOD,
    Keys.LIBRARY_PATHS,
    Keys.THUMBNAIL_SIZE,
    Keys.FPS_LIMIT,
    Keys.TRANSITIONS_EFFECT,
    Keys.THEMING_TOOL,
    Keys.CURRENT_PROFILE,
]


def _resolve(document, dotted):
    current = document
    for part in dotted.split("."):
        assert isinstance(current, dict), dotted
        assert part in current, dotted
        current = current[part]
    return current


def test_keys_resolve_in_defaults():
    defaults = default_settings()
    resolved = [_resolve(defaults, key) for key in _CHECKED_KEYS]
    assert len(resolved) == len(_CHECKED_KEYS)
    assert _resolve(defaults, Keys.AUTOSTART) is True
    assert _resolve(defaults, Keys.LIBRARY_PATHS) == []
    assert _resolve(defaults, Keys.FPS_LIMIT) == 60
    assert _resolve(defaults, Keys.THEMING_TOOL) == "auto"


def test_default_values_pinned_by_schema():
    defaults = default_settings()
    assert _resolve(defaults, Keys.AUTOSTART_METHOD) == "systemd"
    assert _resolve(defaults, Keys.THUMBNAIL_SIZE) == 256
    assert _resolve(defaults, Keys.TRANSITIONS_EFFECT) == "expanding_circle"
    assert _resolve(defaults, Keys.CURRENT_PROFILE) == "default"


def test_defaults_are_fresh_copies():
    first = default_settings()
    first["general"]["language"] = "changed"
    first["library"]["paths"].append("/somewhere")
    second = default_settings()
    assert second["general"]["language"] == "en"
    assert second["library"]["paths"] == []