"""Cell bits and bit helpers for the 64x64 playfield grid."""

__all__ = [
    "FLOOR",
    "ATOM",
    "GOAL",
    "WALL",
    "GRID_SIZE",
    "MAX_FIELD",
    "has_bit",
    "set_bit",
    "clear_bit",
]

FLOOR = 1
ATOM = 2
GOAL = 4
WALL = 8

# the grid is oversized so that neighbour lookups around the level never leave it
GRID_SIZE = 64
# usable cells per axis
MAX_FIELD = 62


def has_bit(cell: int, flag: int) -> bool:
    return (int(cell) & flag) != 0


def set_bit(cell: int, flag: int) -> int:
    return int(cell) | flag


def clear_bit(cell: int, flag: int) -> int:
    # int() first: numpy uint8 cells reject negative masks
    return int(cell) & ~flag
