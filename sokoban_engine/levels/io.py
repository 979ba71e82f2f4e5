from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
import os

from sokoban_engine.errors import LevelLoadError
from sokoban_engine.parser import (
    DEFAULT_MAX_COMMENT,
    DEFAULT_MAX_LEVELS,
    LevelCollection,
    parse_level_file,
)
from sokoban_engine.store import SolutionStore

LEVEL_EXTENSIONS = (".xsb", ".txt", ".sok")


@dataclass
class LevelRef:
    path: str
    index: int  # 1-based level number inside the file


def iterate_level_files(root_dir: str, rel_dirs: List[str]) -> Iterator[str]:
    """Iterate over all level files in the given subfolders, sorted by name."""
    for rel in rel_dirs:
        abs_dir = os.path.join(root_dir, rel)
        if not os.path.isdir(abs_dir):
            continue
        for fname in sorted(os.listdir(abs_dir)):
            if not fname.lower().endswith(LEVEL_EXTENSIONS):
                continue
            yield os.path.join(abs_dir, fname)


def load_collections(root_dir: str, rel_dirs: List[str], *,
                     max_levels: int = DEFAULT_MAX_LEVELS,
                     max_comment_len: int = DEFAULT_MAX_COMMENT,
                     store: Optional[SolutionStore] = None
                     ) -> Iterator[Tuple[str, Optional[LevelCollection], Optional[LevelLoadError]]]:
    """Yields (path, collection, None) for each readable file, (path, None, error) otherwise."""
    for fpath in iterate_level_files(root_dir, rel_dirs):
        try:
            coll = parse_level_file(fpath, max_levels=max_levels,
                                    max_comment_len=max_comment_len, store=store)
        except LevelLoadError as err:
            yield fpath, None, err
            continue
        yield fpath, coll, None


def level_refs(path: str, coll: LevelCollection) -> List[LevelRef]:
    return [LevelRef(path=path, index=p.level) for p in coll]
