# addonmanager/packs/version.py
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

__all__ = ["PackVersion", "VERSION_STRING_RE", "parsePackVersion", "formatVersion"]


# Manifests and world order files carry versions as [major, minor, patch];
# newer manifests (format_version 3) may write "major.minor.patch" instead.
PackVersion = tuple[int, ...]


VERSION_STRING_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)



def _parseVersionString(raw: str) -> PackVersion:
    mtch = VERSION_STRING_RE.match(raw.strip())
    if not mtch:
        raise ValueError(f"Invalid pack version {raw!r}")
    # Prerelease/build labels have no place in the [int, int, int] order file format
    return (int(mtch.group("major")), int(mtch.group("minor")), int(mtch.group("patch")))



def parsePackVersion(value: Any) -> PackVersion:
    """
    Normalize a declared version into a tuple of non-negative ints.

      None          -> ()
      [1, 2, 3]     -> (1, 2, 3)
      "1.2.3"       -> (1, 2, 3)

    Raises ValueError for anything else (negative numbers, floats, bools, junk strings).
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return _parseVersionString(value)
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        parts: list[int] = []
        for part in value:
            # bool is an int subclass; true/false in a version array is a broken manifest
            if isinstance(part, bool) or not isinstance(part, int):
                raise ValueError(f"Version part {part!r} is not an integer")
            if part < 0:
                raise ValueError(f"Version part {part!r} is negative")
            parts.append(part)
        return tuple(parts)
    raise ValueError(f"Unsupported version value {value!r}")



def formatVersion(version: PackVersion | None) -> str:
    return ".".join(str(part) for part in (version or ()))
