from __future__ import annotations
from dataclasses import dataclass, field as dc_field
from enum import IntEnum, IntFlag
from typing import List, Optional, Tuple

import numpy as np

from .cells import ATOM, GRID_SIZE

__all__ = [
    "Puzzle",
    "GameState",
    "Direction",
    "MoveResult",
    "REJECTED",
    "HISTORY_CAPACITY",
    "new_field",
]

# letters the history can hold
HISTORY_CAPACITY = 4095

# returned by move() when the attempt is refused
REJECTED = -1


class Direction(IntEnum):
    UP = 1
    LEFT = 2
    DOWN = 3
    RIGHT = 4

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

    @property
    def angle(self) -> int:
        return _ANGLES[self]

    @property
    def letter(self) -> str:
        return _LETTERS[self]

    @classmethod
    def from_letter(cls, ch: str) -> "Direction":
        """'u'/'U' -> UP, etc. Raises ValueError on anything else."""
        try:
            return _BY_LETTER[ch.lower()]
        except (KeyError, AttributeError):
            raise ValueError(f"Not a move letter: {ch!r}") from None


_VECTORS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}
_ANGLES = {Direction.UP: 0, Direction.RIGHT: 90, Direction.DOWN: 180, Direction.LEFT: 270}
_LETTERS = {Direction.UP: "u", Direction.RIGHT: "r", Direction.DOWN: "d", Direction.LEFT: "l"}
_BY_LETTER = {v: k for k, v in _LETTERS.items()}


class MoveResult(IntFlag):
    PUSHED = 1
    ON_GOAL = 2
    SOLVED = 4


def new_field(fill: int = 0) -> np.ndarray:
    return np.full((GRID_SIZE, GRID_SIZE), fill, dtype=np.uint8)


@dataclass(frozen=True, eq=False)
class Puzzle:
    """
    Immutable parsed level (a template for games).

    field is a 64x64 uint8 grid of cell bits indexed field[y, x]; only the
    width x height window holds the level, the rest is exterior padding.
    (x, y) is the player start, level is the 1-based ordinal in its file.
    """

    field: np.ndarray
    width: int
    height: int
    x: int
    y: int
    level: int
    fingerprint: int
    best_solution: Optional[str] = None

    def __post_init__(self) -> None:
        self.field.flags.writeable = False

    def cell(self, x: int, y: int) -> int:
        return int(self.field[y, x])

    def count(self, flag: int) -> int:
        return int(np.count_nonzero(self.field & flag))


@dataclass
class GameState:
    """Mutable game in progress: a working copy of a puzzle plus its move history."""

    puzzle: Puzzle
    field: np.ndarray
    x: int
    y: int
    history: List[str] = dc_field(default_factory=list)
    angle: int = 0

    @classmethod
    def from_puzzle(cls, puzzle: Puzzle) -> "GameState":
        return cls(puzzle=puzzle, field=puzzle.field.copy(), x=puzzle.x, y=puzzle.y)

    @property
    def history_str(self) -> str:
        return "".join(self.history)

    @property
    def moves(self) -> int:
        return len(self.history)

    @property
    def pushes(self) -> int:
        return sum(1 for ch in self.history if ch.isupper())

    # ---- cell checks
    def has_atom(self, x: int, y: int) -> bool:
        return bool(self.field[y, x] & ATOM)