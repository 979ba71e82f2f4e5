from __future__ import annotations
import argparse

from sokoban_engine.config import load_config
from sokoban_engine.levels.resolve import load_level_by_id
from sokoban_engine.playback import Playback, is_legal_solution, score
from sokoban_engine.render import describe_best, render_ascii
from sokoban_engine.state import GameState, MoveResult
from sokoban_engine.store import SolutionStore


def main():
    p = argparse.ArgumentParser()
    p.add_argument("level_id", help="Level id like 'path/to/pack.xsb#3'.")
    p.add_argument("--solution", type=str, default=None, help="move letters (default: stored best)")
    p.add_argument("--config", type=str, default="configs/sok.yaml")
    p.add_argument("--save", action="store_true", help="offer the result to the solution store")
    p.add_argument("--quiet", action="store_true", help="only print the final position")
    args = p.parse_args()

    cfg = load_config(args.config)
    store = SolutionStore(cfg.save_dir)
    puzzle = load_level_by_id(args.level_id, store=store)

    moves = args.solution if args.solution is not None else puzzle.best_solution
    if not is_legal_solution(moves):
        raise SystemExit(f"no playable solution for {args.level_id}")

    print(f"Level {puzzle.level} [{puzzle.fingerprint:08X}], {describe_best(puzzle)}")
    game = GameState.from_puzzle(puzzle)
    pb = Playback(moves, store=store if args.save else None)
    while not pb.done:
        res = pb.step(game)
        if res < 0:
            print(f"-- step {pb.cursor}: '{moves[pb.cursor - 1]}' rejected --")
            continue
        if not args.quiet:
            print(f"\n-- step {pb.cursor} --\n{render_ascii(game)}")
    if args.quiet:
        print(render_ascii(game))

    m, pu = score(game.history_str)
    status = "SOLVED" if pb.solved else "not solved"
    print(f"Result: {status}, moves {m}, pushes {pu}, history {game.history_str}")

if __name__ == "__main__":
    main()
