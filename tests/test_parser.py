import numpy as np
import pytest

from sokoban_engine.cells import ATOM, FLOOR, GOAL, WALL
from sokoban_engine.errors import LevelLoadError, LoadError
from sokoban_engine.parser import parse_level_file, parse_level_str, parse_levels

LVL = """
  #####
###   #
#.@$  #
#######
"""

PACK = """; My pack  
; second comment line

#####
#@$.#
#####

; Level 2
######
#@$ .#
######
"""


def _big_level(width, height):
    rows = [f"{width}#", f"#@{width - 3}-#"]
    rows += [f"#{width - 2}-#"] * (height - 3)
    rows.append(f"{width}#")
    return "\n".join(rows) + "\n"


def test_rle_row():
    p = parse_level_str("3#@2 $.\n")
    assert (p.width, p.height) == (8, 1)
    assert (p.x, p.y) == (3, 0)
    assert all(p.cell(x, 0) == WALL for x in range(3))
    assert p.cell(6, 0) & ATOM
    assert p.cell(7, 0) & GOAL
    assert not p.cell(7, 0) & ATOM


def test_flood_fill_clears_exterior():
    p = parse_level_str(LVL)
    assert (p.width, p.height) == (7, 4)
    assert (p.x, p.y) == (2, 2)
    # outside the walls
    assert p.cell(0, 0) == 0 and p.cell(1, 0) == 0
    # inside the walls
    assert p.cell(3, 1) == FLOOR
    assert p.cell(1, 2) == FLOOR | GOAL
    assert p.cell(3, 2) == FLOOR | ATOM


def test_template_invariants():
    for text in (LVL, "#@$.#", "3#@2 $.\n", "#@ $ .#"):
        p = parse_level_str(text)
        assert p.cell(p.x, p.y) & FLOOR
        assert not p.cell(p.x, p.y) & WALL
        f = p.field
        assert not np.any(((f & WALL) != 0) & ((f & (FLOOR | ATOM | GOAL)) != 0))
        marked = (f & (ATOM | GOAL)) != 0
        assert np.all(f[marked] & FLOOR)


def test_template_is_read_only():
    p = parse_level_str(LVL)
    with pytest.raises(ValueError):
        p.field[0, 0] = WALL


def test_collection_comment_and_levels():
    coll = parse_levels(PACK)
    assert len(coll) == 2
    assert coll.comment == "My pack"
    assert coll.error is None
    assert [p.level for p in coll] == [1, 2]
    assert coll[1].width == 6


def test_comment_is_capped():
    coll = parse_levels("; abcdefghij\n#@$.#\n", max_comment_len=5)
    assert coll.comment == "abc"


def test_pipe_rows_and_floor_glyphs():
    a = parse_level_str("5#|#@$.#|5#")
    b = parse_level_str("#####\n#@$.#\n#####\n")
    assert a.fingerprint == b.fingerprint
    c = parse_level_str("######\n#@$-.#\n######")
    d = parse_level_str("######\n#@$_.#\n######")
    e = parse_level_str("######\n#@$ .#\n######")
    assert c.fingerprint == d.fingerprint == e.fingerprint


def test_row_terminator_ignores_count():
    a = parse_level_str("5#\n#@$.#3\n5#\n")
    b = parse_level_str("5#\n#@$.#\n5#\n")
    assert a.height == b.height == 3
    assert a.fingerprint == b.fingerprint


def test_crlf_line_endings():
    a = parse_levels(PACK.replace("\n", "\r\n"))
    b = parse_levels(PACK)
    assert [p.fingerprint for p in a] == [p.fingerprint for p in b]
    assert a.comment == "My pack"


def test_blank_rows_before_content_ignored():
    p = parse_level_str("\n\n\n#@$.#\n")
    assert (p.height, p.y) == (1, 0)


def test_whitespace_row_before_title():
    coll = parse_levels("   \n; Title\n#####\n#@$.#\n#####\n")
    assert len(coll) == 1
    assert coll.comment == "Title"
    assert (coll[0].height, coll[0].y) == (3, 1)


def test_trailing_spaces_do_not_widen():
    a = parse_level_str("#####\n#@$.#\n#####\n")
    b = parse_level_str("#####   \n#@$.#  \n#####\n")
    assert a.width == b.width == 5
    assert a.fingerprint == b.fingerprint


def test_whitespace_rows_between_levels():
    plain = parse_levels("#####\n#@$.#\n#####\n; two\n######\n#@$ .#\n######\n")
    spaced = parse_levels("#####\n#@$.#\n#####\n; two\n    \n  -\n######\n#@$ .#\n######\n")
    assert len(plain) == len(spaced) == 2
    assert plain[1].height == spaced[1].height == 3
    assert plain[1].fingerprint == spaced[1].fingerprint


def test_62x62_loads():
    p = parse_level_str(_big_level(62, 62))
    assert (p.width, p.height) == (62, 62)


@pytest.mark.parametrize("w,h", [(63, 62), (62, 63)])
def test_63_fails(w, h):
    with pytest.raises(LevelLoadError) as exc:
        parse_levels(_big_level(w, h))
    assert exc.value.kind == LoadError.MALFORMED


def test_missing_player():
    with pytest.raises(LevelLoadError) as exc:
        parse_levels("#####\n#$. #\n#####\n")
    assert exc.value.kind == LoadError.MALFORMED
    assert exc.value.code < 0


@pytest.mark.parametrize("text", ["", "\n\n", "; just a comment\n\n"])
def test_empty_input(text):
    with pytest.raises(LevelLoadError) as exc:
        parse_levels(text)
    assert exc.value.kind == LoadError.EMPTY_FILE
    assert exc.value.code == 0


def test_later_bad_level_keeps_prefix():
    text = "#####\n#@$.#\n#####\n; broken\n#####\n#$. #\n#####\n; never read\n#@$.#\n"
    coll = parse_levels(text)
    assert len(coll) == 1
    assert coll.error is not None
    assert coll.error.kind == LoadError.MALFORMED
    assert coll.error.level == 2


def test_later_oversized_level_keeps_prefix():
    coll = parse_levels("#@$.#\n; big\n" + _big_level(63, 5))
    assert len(coll) == 1
    assert coll.error.kind == LoadError.MALFORMED


def test_too_many_levels():
    with pytest.raises(LevelLoadError) as exc:
        parse_levels(PACK, max_levels=1)
    assert exc.value.kind == LoadError.TOO_MANY_LEVELS
    assert len(parse_levels(PACK, max_levels=2)) == 2


def test_trailing_comments_are_not_an_error():
    coll = parse_levels("#@$.#\n\n; the end\n; really\n\n")
    assert len(coll) == 1
    assert coll.error is None


def test_file_open_error(tmp_path):
    with pytest.raises(LevelLoadError) as exc:
        parse_level_file(str(tmp_path / "missing.xsb"))
    assert exc.value.kind == LoadError.FILE_OPEN


def test_parse_level_file(tmp_path):
    path = tmp_path / "pack.xsb"
    path.write_bytes(PACK.encode("ascii"))
    coll = parse_level_file(str(path))
    assert len(coll) == 2
    assert coll.comment == "My pack"
