import pytest

from sokoban_engine.moves import move
from sokoban_engine.session import Session
from sokoban_engine.state import Direction
from sokoban_engine.store import SolutionStore

# level i needs i+1 pushes to the right
PACK = "; Session pack\n" + "".join(
    f"; {i + 1}\n#@${' ' * i}.#\n" for i in range(5)
)


@pytest.fixture
def store(tmp_path):
    return SolutionStore(str(tmp_path))


def _solve(store, session, indices):
    for i in indices:
        store.save(session[i].fingerprint, "R" * (i + 1))
    session.reload_solutions()


def test_load_from_text(store):
    s = Session.load(PACK, store, from_file=False)
    assert len(s) == 5
    assert s.comment == "Session pack"
    assert len({p.fingerprint for p in s.puzzles}) == 5


def test_load_from_file(tmp_path, store):
    path = tmp_path / "pack.xsb"
    path.write_text(PACK)
    s = Session.load(str(path), store)
    assert len(s) == 5


def test_nothing_solved(store):
    s = Session.load(PACK, store, from_file=False)
    assert s.first_unsolved() == 0
    assert s.max_allowed() == 3
    assert not s.is_last_unsolved(0)


def test_progression(store):
    s = Session.load(PACK, store, from_file=False)
    _solve(store, s, [0, 1])
    assert s.best_solution(1) == "RR"
    assert s.first_unsolved() == 2
    assert s.max_allowed() == 5
    assert s.max_allowed(ahead=1) == 3


def test_last_unsolved(store):
    s = Session.load(PACK, store, from_file=False)
    _solve(store, s, [0, 1, 2, 3])
    assert s.is_last_unsolved(4)
    assert not s.is_last_unsolved(3)
    assert not s.is_last_unsolved(-1)
    _solve(store, s, [4])
    assert s.first_unsolved() == 0
    assert not s.is_last_unsolved(4)


def test_solutions_attached_at_load(store):
    s = Session.load(PACK, store, from_file=False)
    _solve(store, s, [2])
    again = Session.load(PACK, store, from_file=False)
    assert again.best_solution(2) == "RRR"
    assert again.best_solution(0) is None


def test_record_finished_game(store):
    s = Session.load(PACK, store, from_file=False)
    g = s.new_game(1)
    assert s.record(g) is False
    move(g, Direction.RIGHT)
    move(g, Direction.RIGHT)
    assert s.record(g) is True
    assert s.best_solution(1) == "RR"
    assert s.record(g) is False


def test_session_without_store():
    s = Session.load(PACK, from_file=False)
    s.reload_solutions()
    assert s.first_unsolved() == 0
    assert s.record(s.new_game(0)) is False


def test_unsolved_ahead_from_session(store):
    s = Session.load(PACK, store, from_file=False, unsolved_ahead=1)
    assert s.max_allowed() == 1
    _solve(store, s, [0])
    assert s.max_allowed() == 2
    assert s.max_allowed(ahead=3) == 4


def test_games_keep_their_puzzle_across_reload(store):
    s = Session.load(PACK, store, from_file=False)
    g = s.new_game(1)
    _solve(store, s, [1])
    assert g.puzzle is not s[1]
    assert g.puzzle.fingerprint == s[1].fingerprint
    assert g.puzzle.best_solution is None
    assert s.best_solution(1) == "RR"
    assert s.new_game(1).puzzle.best_solution == "RR"
