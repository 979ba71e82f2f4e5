from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field as dc_field
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple, Union

import numpy as np

from .cells import ATOM, FLOOR, GOAL, GRID_SIZE, MAX_FIELD, WALL
from .errors import LevelLoadError, LoadError
from .fingerprint import field_fingerprint
from .state import Puzzle, new_field

if TYPE_CHECKING:
    from .store import SolutionStore

TOK_WALL = "#"
TOK_GOAL = "."
TOK_BOX = "$"
TOK_BOX_ON_GOAL = "*"
TOK_PLAYER = "@"
TOK_PLAYER_ON_GOAL = "+"
TOK_FLOOR = " "
TOK_FLOOR_ALT = ("-", "_")
TOK_ROW_END = ("\n", "|")
TOK_CR = "\r"

DEFAULT_MAX_LEVELS = 4096
DEFAULT_MAX_COMMENT = 256

# glyph -> (cell bits to OR in, marks the player start)
_GLYPHS = {
    ord(TOK_FLOOR): (FLOOR, False),
    ord(TOK_FLOOR_ALT[0]): (FLOOR, False),
    ord(TOK_FLOOR_ALT[1]): (FLOOR, False),
    ord(TOK_PLAYER): (FLOOR, True),
    ord(TOK_PLAYER_ON_GOAL): (FLOOR | GOAL, True),
    ord(TOK_BOX): (FLOOR | ATOM, False),
    ord(TOK_BOX_ON_GOAL): (FLOOR | ATOM | GOAL, False),
    ord(TOK_GOAL): (FLOOR | GOAL, False),
}
_WALL = ord(TOK_WALL)
_ROW_END = tuple(ord(c) for c in TOK_ROW_END)
_CR = ord(TOK_CR)
_NL = ord("\n")
_DIGITS = range(ord("0"), ord("9") + 1)


@dataclass
class LevelCollection:
    """Puzzles read from one source, in file order.

    comment: the collection comment (first comment line of the first level).
    error: the failure that stopped parsing after at least one good level, if any.
    """
    puzzles: List[Puzzle]
    comment: str = ""
    error: Optional[LevelLoadError] = dc_field(default=None, repr=False)

    def __len__(self) -> int:
        return len(self.puzzles)

    def __iter__(self) -> Iterator[Puzzle]:
        return iter(self.puzzles)

    def __getitem__(self, i: int) -> Puzzle:
        return self.puzzles[i]


class _ByteReader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def read(self) -> int:
        """Next byte, or -1 at end of input."""
        if self.pos >= len(self.data):
            return -1
        b = self.data[self.pos]
        self.pos += 1
        return b

    def read_rle(self) -> Tuple[int, int]:
        """Reads an optional decimal repeat count and the byte it applies to."""
        count = -1
        while True:
            b = self.read()
            if b in _DIGITS:
                count = (max(count, 0) * 10) + (b - 48)
                continue
            break
        return (1 if count < 0 else count), b

    def read_line(self) -> Tuple[bytes, bool]:
        """Rest of the current line (without the newline) and whether EOF was hit."""
        end = self.data.find(b"\n", self.pos)
        if end < 0:
            line = self.data[self.pos:]
            self.pos = len(self.data)
            return line, True
        line = self.data[self.pos:end]
        self.pos = end + 1
        return line, False


@dataclass
class _Draft:
    canvas: np.ndarray
    width: int
    height: int
    x: int
    y: int


def _flood_exterior(canvas: np.ndarray) -> None:
    """Clears every plain-FLOOR cell reachable from the bottom-right corner."""
    last = GRID_SIZE - 1
    todo = [(last, last)]
    while todo:
        x, y = todo.pop()
        if x < 0 or y < 0 or x >= GRID_SIZE or y >= GRID_SIZE:
            continue
        if canvas[y, x] != FLOOR:
            continue
        canvas[y, x] = 0
        todo.extend(((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)))


def _mark_interior(field: np.ndarray, x0: int, y0: int, width: int, height: int) -> None:
    """Sets FLOOR on every non-wall cell the player can reach inside the level box."""
    seen = {(x0, y0)}
    q = deque([(x0, y0)])
    while q:
        x, y = q.popleft()
        field[y, x] |= FLOOR
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            if (nx, ny) in seen or field[ny, nx] & WALL:
                continue
            seen.add((nx, ny))
            q.append((nx, ny))


def _trim_comment(raw: bytes, max_len: int) -> str:
    text = raw.replace(b"\r", b"").decode("utf-8", errors="replace")
    if max_len > 0:
        text = text[:max_len - 1]
    return text.strip(" ")


def _read_level(reader: _ByteReader, level: int, want_comment: bool,
                max_comment_len: int) -> Tuple[Optional[_Draft], bool, Optional[str]]:
    """Reads one level body.

    Returns (draft or None when the input held no more level data,
    end-of-input flag, captured comment).
    """
    canvas = new_field(FLOOR)
    x = y = 0
    width = height = 0
    px = py = -1
    started = False
    eof = False
    comment: Optional[str] = None

    while True:
        count, b = reader.read_rle()
        if b < 0:
            eof = True
            break
        if b == _CR:
            continue
        if b in _ROW_END:
            # row terminators are never repeated
            if started:
                y += 1
            x = 0
            continue

        glyph = _GLYPHS.get(b)
        if glyph is None and b != _WALL:
            # comment: skip to end of line
            text, eof = reader.read_line()
            if want_comment and comment is None:
                comment = _trim_comment(text, max_comment_len)
            if started or eof:
                break
            continue

        if glyph is not None and glyph[0] == FLOOR and not glyph[1]:
            # plain floor only moves the cursor: blank rows and trailing
            # spaces never start a level or widen it
            x += count
            continue

        for _ in range(count):
            if x >= MAX_FIELD or y >= MAX_FIELD:
                raise LevelLoadError(LoadError.MALFORMED,
                                     f"level exceeds {MAX_FIELD}x{MAX_FIELD} cells", level)
            if glyph is None:
                canvas[y + 1, x + 1] = WALL
            else:
                bits, is_player = glyph
                canvas[y + 1, x + 1] |= bits
                if is_player:
                    px, py = x, y
            x += 1
            started = True
            width = max(width, x)
            height = max(height, y + 1)

    if not started:
        return None, eof, comment
    if px < 0:
        raise LevelLoadError(LoadError.MALFORMED, "no player start found", level)
    if width < 1 or height < 1:
        raise LevelLoadError(LoadError.MALFORMED, "empty playfield", level)
    return _Draft(canvas=canvas, width=width, height=height, x=px, y=py), eof, comment


def _finish(draft: _Draft, level: int, store: Optional["SolutionStore"]) -> Puzzle:
    canvas = draft.canvas
    _flood_exterior(canvas)
    # drop the one-cell margin used by the flood fill
    field = new_field(0)
    field[:GRID_SIZE - 1, :GRID_SIZE - 1] = canvas[1:, 1:]
    _mark_interior(field, draft.x, draft.y, draft.width, draft.height)
    fp = field_fingerprint(field, draft.width, draft.height)
    best = store.load(fp) if store is not None else None
    return Puzzle(field=field, width=draft.width, height=draft.height,
                  x=draft.x, y=draft.y, level=level, fingerprint=fp, best_solution=best)


def parse_levels(source: Union[str, bytes], *,
                 max_levels: int = DEFAULT_MAX_LEVELS,
                 max_comment_len: int = DEFAULT_MAX_COMMENT,
                 store: Optional["SolutionStore"] = None) -> LevelCollection:
    """Parses an XSB level collection (with run-length encoding).

    The first level failing raises LevelLoadError. A later malformed level
    stops parsing: the levels read so far are returned and the error is kept
    in LevelCollection.error. More than max_levels levels is always an error.
    When a store is given, each puzzle gets its saved best solution attached.
    """
    data = source.encode("utf-8") if isinstance(source, str) else bytes(source)
    reader = _ByteReader(data)
    puzzles: List[Puzzle] = []
    comment = ""
    error: Optional[LevelLoadError] = None

    while True:
        level = len(puzzles) + 1
        try:
            draft, eof, found = _read_level(reader, level, level == 1, max_comment_len)
        except LevelLoadError as err:
            if not puzzles:
                raise
            error = err
            break
        except MemoryError:
            raise LevelLoadError(LoadError.OUT_OF_MEMORY, "out of memory", level) from None
        if found is not None:
            comment = found
        if draft is None:
            if not puzzles:
                raise LevelLoadError(LoadError.EMPTY_FILE, "no level data found")
            break
        if len(puzzles) >= max_levels:
            raise LevelLoadError(LoadError.TOO_MANY_LEVELS,
                                 f"more than {max_levels} levels", level)
        puzzles.append(_finish(draft, level, store))
        if eof:
            break

    return LevelCollection(puzzles=puzzles, comment=comment, error=error)


def parse_level_str(level_str: str) -> Puzzle:
    """Parses the first level of an XSB string."""
    return parse_levels(level_str, max_levels=DEFAULT_MAX_LEVELS)[0]


def parse_level_file(path: str, *,
                     max_levels: int = DEFAULT_MAX_LEVELS,
                     max_comment_len: int = DEFAULT_MAX_COMMENT,
                     store: Optional["SolutionStore"] = None) -> LevelCollection:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as err:
        raise LevelLoadError(LoadError.FILE_OPEN, f"cannot read {path}: {err.strerror}") from err
    return parse_levels(data, max_levels=max_levels, max_comment_len=max_comment_len, store=store)
