from __future__ import annotations
from typing import TYPE_CHECKING, Optional

import numpy as np

from .cells import ATOM, GOAL, MAX_FIELD, WALL, has_bit, set_bit, clear_bit
from .state import Direction, GameState, MoveResult, REJECTED, HISTORY_CAPACITY

if TYPE_CHECKING:
    from .store import SolutionStore


def _inside(game: GameState, x: int, y: int) -> bool:
    """Inside the level box (never beyond the usable grid)."""
    p = game.puzzle
    return 0 <= x < min(p.width, MAX_FIELD) and 0 <= y < min(p.height, MAX_FIELD)


def _shift_atom(game: GameState, fx: int, fy: int, tx: int, ty: int) -> None:
    game.field[fy, fx] = clear_bit(game.field[fy, fx], ATOM)
    game.field[ty, tx] = set_bit(game.field[ty, tx], ATOM)


def reset(game: GameState) -> None:
    """Puts the game back to its puzzle's start position with an empty history."""
    p = game.puzzle
    np.copyto(game.field, p.field)
    game.x = p.x
    game.y = p.y
    game.history.clear()
    game.angle = 0


def is_solved(game: GameState) -> bool:
    """True if every goal cell carries an atom."""
    p = game.puzzle
    window = game.field[:p.height, :p.width]
    goals = (window & GOAL) != 0
    return bool(np.all((window[goals] & ATOM) != 0))


def move(game: GameState, direction: Direction, dry_run: bool = False,
         store: Optional["SolutionStore"] = None) -> int:
    """Tries to move the player one cell.

    Returns REJECTED (negative) if the move is not allowed, otherwise a
    MoveResult bitfield. The facing angle follows the requested direction
    even when the move is refused; with dry_run nothing else changes and
    SOLVED is never reported. When a committed move solves the puzzle, the
    history is offered to store.
    """
    direction = Direction(direction)
    game.angle = direction.angle
    vx, vy = direction.vector
    tx, ty = game.x + vx, game.y + vy

    if not _inside(game, tx, ty):
        return REJECTED
    target = game.field[ty, tx]
    if has_bit(target, WALL):
        return REJECTED
    # nothing moves once the puzzle is solved, undo first
    if is_solved(game):
        return REJECTED
    if not dry_run and len(game.history) >= HISTORY_CAPACITY:
        return REJECTED

    res = MoveResult(0)
    if has_bit(target, ATOM):
        bx, by = tx + vx, ty + vy
        if not _inside(game, bx, by):
            return REJECTED
        behind = game.field[by, bx]
        if has_bit(behind, WALL | ATOM):
            return REJECTED
        res |= MoveResult.PUSHED
        if has_bit(behind, GOAL):
            res |= MoveResult.ON_GOAL

    if dry_run:
        return res

    letter = direction.letter
    if res & MoveResult.PUSHED:
        letter = letter.upper()
        _shift_atom(game, tx, ty, tx + vx, ty + vy)
    game.history.append(letter)
    game.x, game.y = tx, ty

    if is_solved(game):
        res |= MoveResult.SOLVED
        if store is not None:
            store.save(game.puzzle.fingerprint, game.history_str)
    return res


def undo(game: GameState) -> None:
    """Takes back the last recorded move. No-op on an empty history."""
    if not game.history:
        return
    letter = game.history.pop()
    direction = Direction.from_letter(letter)
    vx, vy = direction.vector
    game.angle = direction.angle
    game.x -= vx
    game.y -= vy
    if letter.isupper():
        # the atom sits two cells ahead of the restored player
        _shift_atom(game, game.x + 2 * vx, game.y + 2 * vy, game.x + vx, game.y + vy)
