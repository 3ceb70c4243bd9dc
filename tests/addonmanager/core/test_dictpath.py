import pytest

from addonmanager.core.dictpath import getByPath


DATA = {
    "packs": {"iconFileName": "pack_icon.png", "defaultPackPrefixes": ["experimental"]},
    "a.b": {"c": 3},
    "debug": {"logFile": None, "suppressRecurringMessages": {"enabled": False}},
}


@pytest.mark.parametrize("path, expected", [
    ("packs.iconFileName", "pack_icon.png"),
    ("packs/iconFileName", "pack_icon.png"),
    ("packs.defaultPackPrefixes", ["experimental"]),
    ("a\\.b.c", 3),
    ("debug.suppressRecurringMessages.enabled", False),
])
def test_getByPath_resolves(path, expected):
    assert getByPath(DATA, path) == expected


@pytest.mark.parametrize("path", [
    "packs.missing",
    "packs.iconFileName.deeper",
    "packs.defaultPackPrefixes.0",
    "packs..iconFileName",
    "",
    "packs\\",
])
def test_getByPath_returns_default(path):
    assert getByPath(DATA, path, "fallback") == "fallback"


def test_getByPath_non_string_path():
    assert getByPath(DATA, None, 1) == 1  # type: ignore[arg-type]
