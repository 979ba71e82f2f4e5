from __future__ import annotations
from dataclasses import replace
from typing import List, Optional, Union

from .moves import is_solved
from .parser import (
    DEFAULT_MAX_COMMENT,
    DEFAULT_MAX_LEVELS,
    LevelCollection,
    parse_level_file,
    parse_levels,
)
from .state import GameState, Puzzle
from .store import SolutionStore

UNSOLVED_AHEAD = 3


class Session:
    """A loaded level collection together with its best solutions."""

    def __init__(self, collection: LevelCollection, store: Optional[SolutionStore] = None,
                 unsolved_ahead: int = UNSOLVED_AHEAD) -> None:
        self.puzzles: List[Puzzle] = list(collection.puzzles)
        self.comment = collection.comment
        self.error = collection.error
        self.store = store
        self.unsolved_ahead = unsolved_ahead

    @classmethod
    def load(cls, source: Union[str, bytes], store: Optional[SolutionStore] = None, *,
             from_file: bool = True,
             max_levels: int = DEFAULT_MAX_LEVELS,
             max_comment_len: int = DEFAULT_MAX_COMMENT,
             unsolved_ahead: int = UNSOLVED_AHEAD) -> "Session":
        """Loads a collection from a file path (or, with from_file=False, from XSB text)."""
        if from_file:
            coll = parse_level_file(source, max_levels=max_levels,
                                    max_comment_len=max_comment_len, store=store)
        else:
            coll = parse_levels(source, max_levels=max_levels,
                                max_comment_len=max_comment_len, store=store)
        return cls(coll, store, unsolved_ahead)

    def __len__(self) -> int:
        return len(self.puzzles)

    def __getitem__(self, i: int) -> Puzzle:
        return self.puzzles[i]

    def best_solution(self, i: int) -> Optional[str]:
        return self.puzzles[i].best_solution

    def reload_solutions(self) -> None:
        """Re-reads the best solution of every puzzle from the store.

        The puzzles are replaced, not changed: games started earlier keep
        the puzzle (and best_solution) they were created from.
        """
        if self.store is None:
            return
        self.puzzles = [replace(p, best_solution=self.store.load(p.fingerprint))
                        for p in self.puzzles]

    def first_unsolved(self) -> int:
        for i, p in enumerate(self.puzzles):
            if p.best_solution is None:
                return i
        return 0

    def max_allowed(self, ahead: Optional[int] = None) -> int:
        """How many puzzles may be browsed when only `ahead` unsolved ones are open.

        ahead defaults to the session's unsolved_ahead.
        """
        if ahead is None:
            ahead = self.unsolved_ahead
        unsolved = 0
        i = 0
        while i < len(self.puzzles):
            if self.puzzles[i].best_solution is None:
                unsolved += 1
            if unsolved > ahead:
                break
            i += 1
        return i

    def is_last_unsolved(self, i: int) -> bool:
        """True if puzzle i is unsolved and every other puzzle is solved."""
        if i < 0 or i >= len(self.puzzles):
            return False
        if self.puzzles[i].best_solution is not None:
            return False
        return all(p.best_solution is not None for j, p in enumerate(self.puzzles) if j != i)

    def new_game(self, i: int) -> GameState:
        return GameState.from_puzzle(self.puzzles[i])

    def record(self, game: GameState) -> bool:
        """Offers a finished game to the store. Returns True if it became the new best."""
        if self.store is None or not is_solved(game):
            return False
        saved = self.store.save(game.puzzle.fingerprint, game.history_str)
        if saved:
            self.reload_solutions()
        return saved
