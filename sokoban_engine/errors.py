from __future__ import annotations
from enum import IntEnum
from typing import Optional


class LoadError(IntEnum):
    """Failure kinds reported by the level loader (non-positive codes)."""
    EMPTY_FILE = 0
    FILE_OPEN = -1
    OUT_OF_MEMORY = -2
    MALFORMED = -3
    TOO_MANY_LEVELS = -4


class LevelLoadError(ValueError):
    """Raised when a level collection cannot be loaded."""

    def __init__(self, kind: LoadError, message: str, level: Optional[int] = None) -> None:
        self.kind = kind
        self.level = level
        if level is not None:
            message = f"level {level}: {message}"
        super().__init__(message)

    @property
    def code(self) -> int:
        return int(self.kind)
