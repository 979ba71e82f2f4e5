"""Replay every stored best solution against the bundled collections.

Usage:
  python -m scripts.verify_solutions --config configs/sok.yaml
"""
from __future__ import annotations
import argparse
from tqdm import tqdm

from sokoban_engine.config import load_config
from sokoban_engine.levels.io import load_collections
from sokoban_engine.playback import is_legal_solution, verify_solution
from sokoban_engine.store import SolutionStore


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--config", type=str, default="configs/sok.yaml")
    args = p.parse_args()

    cfg = load_config(args.config)
    store = SolutionStore(cfg.save_dir)

    puzzles = []
    for path, coll, err in load_collections(cfg.levels_root, cfg.level_sources,
                                            max_levels=cfg.max_levels,
                                            max_comment_len=cfg.max_comment_len, store=store):
        if err is None:
            puzzles.extend((path, pz) for pz in coll if pz.best_solution is not None)

    good = 0
    broken = []
    for path, pz in tqdm(puzzles, desc="Replaying", unit="level"):
        tag = f"{path}#{pz.level} [{pz.fingerprint:08X}]"
        if not is_legal_solution(pz.best_solution):
            broken.append(f"{tag} (not a move string)")
        elif verify_solution(pz, pz.best_solution):
            good += 1
        else:
            broken.append(tag)
    for b in broken:
        print(f"[broken] {b}")
    print(f"solutions verified: {good}, broken: {len(broken)}")

if __name__ == "__main__":
    main()
