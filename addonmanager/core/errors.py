# addonmanager/core/errors.py
from __future__ import annotations
from pathlib import Path

__all__ = [
    "AddonManagerError",
    "OrderFileParseError",
    "PersistError",
    "PersistFailures",
    "WorldValidationError",
    "PackNotFoundError",
    "SessionNotLoadedError",
]



class AddonManagerError(Exception):
    """Base class for failures that must reach the orchestrating layer."""
    pass



class OrderFileParseError(AddonManagerError):
    """Raised when a world order file is not a JSON array at all."""
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Order file '{path}' could not be parsed: {reason}")
        self.path = path
        self.reason = reason



class PersistError(AddonManagerError):
    """Raised when writing one order file fails. The OSError is the __cause__."""
    def __init__(self, path: Path, category: str, reason: str) -> None:
        super().__init__(f"Failed to write {category} order file '{path}': {reason}")
        self.path = path
        self.category = category
        self.reason = reason



class PersistFailures(AddonManagerError):
    """
    Raised after every category had its chance to be written.
    Categories not listed in `errors` were written successfully and are not rolled back.
    """
    def __init__(self, errors: list[PersistError]) -> None:
        joined = "; ".join(str(err) for err in errors)
        super().__init__(f"{len(errors)} order file(s) failed to save: {joined}")
        self.errors = list(errors)



class WorldValidationError(AddonManagerError):
    pass



class PackNotFoundError(AddonManagerError):
    pass



class SessionNotLoadedError(AddonManagerError):
    """Raised when pack lists are about to be written without a successful load behind them."""
    pass
