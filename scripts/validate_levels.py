from __future__ import annotations
import argparse
from tqdm import tqdm

from sokoban_engine.config import load_config
from sokoban_engine.levels.io import iterate_level_files, load_collections


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--config", type=str, default="configs/sok.yaml")
    args = p.parse_args()

    cfg = load_config(args.config)
    total = len(list(iterate_level_files(cfg.levels_root, cfg.level_sources)))

    ok = 0
    bad = 0
    for path, coll, err in tqdm(load_collections(cfg.levels_root, cfg.level_sources,
                                                 max_levels=cfg.max_levels,
                                                 max_comment_len=cfg.max_comment_len),
                                total=total, desc="Parsing", unit="file"):
        if err is not None:
            bad += 1
            tqdm.write(f"[skip] {path}: {err} (code {err.code})")
            continue
        ok += len(coll)
        note = f", stopped early: {coll.error}" if coll.error is not None else ""
        tqdm.write(f"{path}: {len(coll)} levels '{coll.comment}'{note}")
    print(f"valid levels: {ok}, skipped files: {bad}")

if __name__ == "__main__":
    main()
