from __future__ import annotations
import argparse

from sokoban_engine.config import load_config
from sokoban_engine.levels.resolve import load_level_by_id
from sokoban_engine.render import export_level
from sokoban_engine.store import SolutionStore


def main():
    p = argparse.ArgumentParser()
    p.add_argument("level_id", help="Level id like 'path/to/pack.xsb#3'.")
    p.add_argument("--config", type=str, default="configs/sok.yaml")
    p.add_argument("--snapshot", action="store_true", help="export the saved game instead of the best solution")
    args = p.parse_args()

    cfg = load_config(args.config)
    store = SolutionStore(cfg.save_dir)
    puzzle = load_level_by_id(args.level_id, store=store)
    history = store.load_snapshot(puzzle.fingerprint) if args.snapshot else puzzle.best_solution
    print(export_level(puzzle, history), end="")

if __name__ == "__main__":
    main()
