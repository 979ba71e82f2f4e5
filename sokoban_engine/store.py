from __future__ import annotations
import os
from typing import Optional

SNAPSHOT_SUFFIX = ".sav"


class SolutionStore:
    """Best known solution per puzzle fingerprint, one file per fingerprint.

    Files live in `directory`, named by the 8-digit lowercase hex fingerprint,
    and hold the raw move letters. Snapshots (saved games in progress) use
    the same name with a .sav suffix. Nothing is cached between calls.

    The store never fails the caller: a file that cannot be read counts as
    absent and a write that cannot be done is reported by a False return.
    """

    def __init__(self, directory: str) -> None:
        self.directory = os.path.expanduser(directory)

    def path_for(self, fingerprint: int, suffix: str = "") -> str:
        return os.path.join(self.directory, f"{fingerprint & 0xFFFFFFFF:08x}{suffix}")

    def _read(self, path: str) -> Optional[str]:
        try:
            with open(path, "r", encoding="ascii", errors="replace") as f:
                text = f.read().strip()
        except OSError:
            return None
        return text or None

    def _write(self, path: str, moves: str) -> bool:
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "w", encoding="ascii") as f:
                f.write(moves)
        except OSError:
            return False
        return True

    def load(self, fingerprint: int) -> Optional[str]:
        """Stored best solution, or None."""
        return self._read(self.path_for(fingerprint))

    def save(self, fingerprint: int, history: str) -> bool:
        """Stores history if it is strictly shorter than the current best.

        Returns True when the file was written. Ties keep the old solution.
        """
        if not history:
            return False
        path = self.path_for(fingerprint)
        current = self._read(path)
        if current is not None and len(current) <= len(history):
            return False
        return self._write(path, history)

    # ---- snapshot slot (overwritten unconditionally)
    def save_snapshot(self, fingerprint: int, history: str) -> bool:
        return self._write(self.path_for(fingerprint, SNAPSHOT_SUFFIX), history)

    def load_snapshot(self, fingerprint: int) -> Optional[str]:
        return self._read(self.path_for(fingerprint, SNAPSHOT_SUFFIX))
