from __future__ import annotations
from typing import NamedTuple, Optional, TYPE_CHECKING

from .moves import move
from .state import Direction, GameState, MoveResult, Puzzle

if TYPE_CHECKING:
    from .store import SolutionStore

MOVE_LETTERS = frozenset("uUrRdDlL")


class Score(NamedTuple):
    moves: int
    pushes: int


def is_legal_solution(s: Optional[str]) -> bool:
    """Non-empty and made of move letters only."""
    if not s:
        return False
    return all(ch in MOVE_LETTERS for ch in s)


def history_moves(s: str) -> int:
    return len(s)


def history_pushes(s: str) -> int:
    return sum(1 for ch in s if ch.isupper())


def score(s: str) -> Score:
    return Score(history_moves(s), history_pushes(s))


class Playback:
    """Feeds a move string to a game one letter per tick.

    The letter case is ignored: the engine decides itself whether a step
    pushes. Playback is finished when the string is exhausted or a move
    solves the puzzle.
    """

    def __init__(self, moves: str, store: Optional["SolutionStore"] = None) -> None:
        if not is_legal_solution(moves):
            raise ValueError(f"Not a solution string: {moves!r}")
        self.moves = moves
        self.store = store
        self.cursor = 0
        self.solved = False

    @property
    def done(self) -> bool:
        return self.solved or self.cursor >= len(self.moves)

    def step(self, game: GameState) -> Optional[int]:
        """Plays the next letter. Returns the move result, or None once done."""
        if self.done:
            return None
        direction = Direction.from_letter(self.moves[self.cursor])
        self.cursor += 1
        res = move(game, direction, store=self.store)
        if res >= 0 and res & MoveResult.SOLVED:
            self.solved = True
        return res


def play(game: GameState, moves: str, store: Optional["SolutionStore"] = None) -> bool:
    """Plays a whole move string at once. Returns True if it solved the puzzle."""
    pb = Playback(moves, store=store)
    while not pb.done:
        pb.step(game)
    return pb.solved


def verify_solution(puzzle: Puzzle, moves: Optional[str]) -> bool:
    """True if moves solves a fresh game of puzzle. Malformed strings are just False."""
    if not is_legal_solution(moves):
        return False
    return play(GameState.from_puzzle(puzzle), moves)
