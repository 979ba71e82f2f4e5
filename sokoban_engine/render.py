from __future__ import annotations
from typing import Optional, Union

from .cells import ATOM, GOAL, WALL
from .fingerprint import format_fingerprint
from .playback import score
from .state import GameState, Puzzle


def _glyph(cell: int, is_player: bool) -> str:
    if cell & WALL:
        return '#'
    has_goal = bool(cell & GOAL)
    if cell & ATOM:
        return '*' if has_goal else '$'
    if is_player:
        return '+' if has_goal else '@'
    return '.' if has_goal else ' '


def render_ascii(game: Union[GameState, Puzzle]) -> str:
    """ASCII view of a puzzle or of a game in progress (canonical XSB glyphs)."""
    p = game.puzzle if isinstance(game, GameState) else game
    out_lines = []
    for y in range(p.height):
        row_chars = []
        for x in range(p.width):
            row_chars.append(_glyph(int(game.field[y, x]), x == game.x and y == game.y))
        out_lines.append(''.join(row_chars))
    return "\n".join(out_lines)


def export_level(game: Union[GameState, Puzzle], history: Optional[str] = None) -> str:
    """Text export of a level: id line, the board, then the solution if any."""
    p = game.puzzle if isinstance(game, GameState) else game
    lines = [f"; Level id: {format_fingerprint(p.fingerprint)}", ""]
    lines.extend(render_ascii(game).split("\n"))
    lines.append("")
    if history:
        lines.append("; Solution")
        lines.append(f"; {history}")
    else:
        lines.append("; No solution available")
    return "\n".join(lines) + "\n"


def describe_best(puzzle: Puzzle) -> str:
    if puzzle.best_solution is None:
        return "no solution yet"
    moves, pushes = score(puzzle.best_solution)
    return f"best score: {moves}/{pushes}"
