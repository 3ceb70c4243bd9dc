import json
import sys
from pathlib import Path
from typing import Any, Callable
from uuid import UUID

import pytest

from addonmanager.app.settings import USER_SETTINGS_PATH_ENV, clearSettingsCache
from addonmanager.packs.scanner import PNG_SIGNATURE, fallbackIcon
from addonmanager.packs.types import NIL_PACK_ID, ManifestRecord, PackCategory



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Every test starts from the built-in defaults, never from ~/.addonmanager."""
    settingsPath = tmp_path / "user-settings" / "settings.json5"
    monkeypatch.setenv(USER_SETTINGS_PATH_ENV, str(settingsPath))
    clearSettingsCache()
    fallbackIcon.cache_clear()
    yield settingsPath
    clearSettingsCache()



def _makeManifest(
    *,
    uuid: str | None,
    name: str | None = "Pack",
    description: str | None = "A pack",
    version: Any = (1, 0, 0),
    moduleType: str | None = "resources",
) -> dict[str, Any]:
    header: dict[str, Any] = {}
    if name is not None:
        header["name"] = name
    if description is not None:
        header["description"] = description
    if uuid is not None:
        header["uuid"] = uuid
    if version is not None:
        header["version"] = list(version) if isinstance(version, tuple) else version
    manifest: dict[str, Any] = {"format_version": 2, "header": header}
    if moduleType is not None:
        manifest["modules"] = [{"type": moduleType, "uuid": "00000000-0000-4000-8000-00000000beef", "version": [1, 0, 0]}]
    return manifest



@pytest.fixture()
def make_manifest() -> Callable[..., dict[str, Any]]:
    return _makeManifest



@pytest.fixture()
def write_pack() -> Callable[..., Path]:
    """write_pack(root, folder, manifest=None, icon=None, rawManifest=None) -> pack dir"""
    def _write(
        root: Path,
        folder: str,
        manifest: dict[str, Any] | None = None,
        *,
        icon: bytes | None = None,
        rawManifest: str | None = None,
    ) -> Path:
        packDir = root / folder
        packDir.mkdir(parents=True, exist_ok=True)
        if rawManifest is not None:
            (packDir / "manifest.json").write_text(rawManifest, encoding="utf-8")
        elif manifest is not None:
            (packDir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        if icon is not None:
            (packDir / "pack_icon.png").write_bytes(icon)
        return packDir
    return _write



@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_SIGNATURE + b"\x00\x00\x00\rIHDR" + b"\x00" * 17



@pytest.fixture()
def world(tmp_path) -> dict[str, Path]:
    """A dedicated-server layout: <server>/worlds/<world> with both pack roots."""
    server = tmp_path / "bedrock-server"
    worldDir = server / "worlds" / "Bedrock level"
    worldDir.mkdir(parents=True)
    (worldDir / "level.dat").write_bytes(b"\x0a\x00\x00\x00")
    (worldDir / "levelname.txt").write_text("Survival Island\n", encoding="utf-8")
    resourceRoot = server / "resource_packs"
    behaviorRoot = server / "behavior_packs"
    resourceRoot.mkdir()
    behaviorRoot.mkdir()
    return {"server": server, "world": worldDir, "resource": resourceRoot, "behavior": behaviorRoot}



def _makeRecord(
    packId: str | None,
    name: str = "Pack",
    *,
    version: tuple[int, ...] = (1, 0, 0),
    category: PackCategory | None = PackCategory.RESOURCE,
    folder: str | None = None,
    root: Path = Path("/packs"),
) -> ManifestRecord:
    return ManifestRecord(
        sourcePath=root / (folder or name),
        id=UUID(packId) if packId else NIL_PACK_ID,
        name=name,
        description="",
        version=version,
        category=category,
    )



@pytest.fixture()
def make_record() -> Callable[..., ManifestRecord]:
    """In-memory ManifestRecord; nothing is written to disk."""
    return _makeRecord
