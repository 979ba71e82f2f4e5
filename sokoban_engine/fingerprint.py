import zlib

import numpy as np


def field_fingerprint(field: np.ndarray, width: int, height: int) -> int:
    """CRC-32 (IEEE, reflected) of the playfield.

    Only the width x height window is hashed, row by row, one byte per cell.
    The player position is not part of the fingerprint: it identifies the
    static layout (walls, goals, atom start cells, floor/exterior).
    """
    window = np.ascontiguousarray(field[:height, :width], dtype=np.uint8)
    return zlib.crc32(window.tobytes()) & 0xFFFFFFFF


def format_fingerprint(fp: int) -> str:
    """Display form used in exported text: uppercase hex, no leading zeros."""
    return f"{fp:X}"
