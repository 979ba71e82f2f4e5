# --- file: sokoban_engine/levels/resolve.py
from __future__ import annotations
from typing import Optional, Tuple

from ..parser import parse_level_file
from ..state import Puzzle
from ..store import SolutionStore


def parse_level_id(level_id: str) -> Tuple[str, int]:
    """Parses a string of the form "path/to/file.xsb#3" into (path, level number).

    Level numbers are 1-based; a missing or unparsable number means level 1.
    """
    if "#" not in level_id:
        return level_id, 1
    path, idx = level_id.rsplit("#", 1)
    try:
        k = int(idx)
    except ValueError:
        k = 1
    return path, k


def load_level_by_id(level_id: str, store: Optional[SolutionStore] = None) -> Puzzle:
    """Loads a SPECIFIC level file#N even if the file contains dozens of levels."""
    path, wanted = parse_level_id(level_id)
    coll = parse_level_file(path, store=store)
    if wanted < 1 or wanted > len(coll):
        raise IndexError(f"Level {wanted} out of range for {path} (total {len(coll)})")
    return coll[wanted - 1]
