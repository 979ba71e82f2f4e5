from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from .parser import DEFAULT_MAX_COMMENT, DEFAULT_MAX_LEVELS
from .session import UNSOLVED_AHEAD, Session
from .store import SolutionStore

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LEVELS_ROOT = os.path.join(PACKAGE_DIR, "levels")


def default_save_dir() -> str:
    """SOK_SAVE_DIR, else $XDG_DATA_HOME/simplesok, else ~/.local/share/simplesok."""
    env = os.environ.get("SOK_SAVE_DIR")
    if env:
        return env
    base = os.environ.get("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, "simplesok")


@dataclass
class Settings:
    save_dir: str = field(default_factory=default_save_dir)
    levels_root: str = DEFAULT_LEVELS_ROOT
    level_sources: List[str] = field(default_factory=lambda: ["examples"])
    max_levels: int = DEFAULT_MAX_LEVELS
    max_comment_len: int = DEFAULT_MAX_COMMENT
    unsolved_ahead: int = UNSOLVED_AHEAD


def load_config(path: Optional[str] = None) -> Settings:
    """Reads settings from a YAML file; a missing file or key falls back to defaults."""
    cfg = {}
    if path is not None and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    s = Settings()
    if cfg.get("save_dir"):
        s.save_dir = os.path.expandvars(os.path.expanduser(str(cfg["save_dir"])))
    levels = cfg.get("levels") or {}
    if levels.get("root_dir"):
        s.levels_root = os.path.expanduser(str(levels["root_dir"]))
    if levels.get("sources"):
        s.level_sources = [str(x) for x in levels["sources"]]
    s.max_levels = int(cfg.get("max_levels", s.max_levels))
    s.max_comment_len = int(cfg.get("max_comment_len", s.max_comment_len))
    s.unsolved_ahead = int(cfg.get("unsolved_ahead", s.unsolved_ahead))
    return s


def open_session(path: str, settings: Settings, store: Optional[SolutionStore] = None) -> Session:
    """Loads one collection file with the parser limits and browsing policy of settings."""
    return Session.load(path, store,
                        max_levels=settings.max_levels,
                        max_comment_len=settings.max_comment_len,
                        unsolved_ahead=settings.unsolved_ahead)
