"""Per-collection progress: solved levels and how far browsing is open.

Usage:
  python -m scripts.progress --config configs/sok.yaml
"""
from __future__ import annotations
import argparse

from sokoban_engine.config import load_config, open_session
from sokoban_engine.errors import LevelLoadError
from sokoban_engine.levels.io import iterate_level_files
from sokoban_engine.store import SolutionStore


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--config", type=str, default="configs/sok.yaml")
    args = p.parse_args()

    cfg = load_config(args.config)
    store = SolutionStore(cfg.save_dir)

    for path in iterate_level_files(cfg.levels_root, cfg.level_sources):
        try:
            session = open_session(path, cfg, store)
        except LevelLoadError as err:
            print(f"[skip] {path}: {err} (code {err.code})")
            continue
        solved = sum(1 for pz in session.puzzles if pz.best_solution is not None)
        print(f"{path} '{session.comment}': {solved}/{len(session)} solved, "
              f"next level {session.first_unsolved() + 1}, "
              f"open up to {session.max_allowed()} (unsolved ahead: {cfg.unsolved_ahead})")

if __name__ == "__main__":
    main()
