"""
Tests for the reversible primitives, trail undo and fixpoint propagation.
"""

from collections import deque
from pathlib import Path

from Solver.diagnostics import brute_force_solutions
from Solver.propagation import CellState, PropagationEngine
from Solver.puzzle import AkariPuzzle

DATA_DIR = Path(__file__).parent.parent / "data" / "puzzles"


def _snapshot(engine: PropagationEngine):
    idx = engine.index
    return (
        list(engine.cell_state),
        list(engine.lit_count),
        [(s.light, s.free_cnt) for s in idx.row_segs],
        [(s.light, s.free_cnt) for s in idx.col_segs],
        [(n.on, n.unk) for n in idx.num_cells],
    )


def test_place_light_blocks_segments_and_counts():
    engine = PropagationEngine(AkariPuzzle(["...", "...", "..."]))
    queue = deque()
    assert engine.place_light(4, queue)  # centre

    assert engine.cell_state[4] is CellState.LIGHT
    for cid in (1, 3, 5, 7):
        assert engine.cell_state[cid] is CellState.BLOCKED
    for cid in (0, 2, 6, 8):
        assert engine.cell_state[cid] is CellState.UNKNOWN
    assert engine.lit_count == [0, 1, 0, 1, 1, 1, 0, 1, 0]
    assert engine.index.row_seg(4).light == 4
    assert engine.index.col_seg(4).light == 4
    assert engine.index.row_seg(4).free_cnt == 1
    assert engine.index.row_seg(0).free_cnt == 2


def test_primitives_refuse_conflicting_states():
    engine = PropagationEngine(AkariPuzzle([".."]))
    queue = deque()
    assert engine.place_light(0, queue)
    assert engine.place_light(0, queue)  # already lit: no-op
    assert not engine.place_blocked(0, queue)
    assert engine.place_blocked(1, queue)  # already blocked: no-op
    assert not engine.place_light(1, queue)


def test_second_light_in_segment_fails():
    engine = PropagationEngine(AkariPuzzle([".#", ".."]))
    # (0,0) and (1,0) share a column segment
    queue = deque()
    assert engine.place_light(0, queue)
    assert engine.cell_state[1] is CellState.BLOCKED
    assert not engine.place_light(1, queue)


def test_numbered_neighbours_update_counters():
    engine = PropagationEngine(AkariPuzzle([['.', '2', '.']]))
    num = engine.index.num_cells[0]
    queue = deque()
    assert engine.place_light(0, queue)
    assert (num.on, num.unk) == (1, 1)
    assert list(queue) == [0]
    assert engine.place_blocked(1, queue)
    assert (num.on, num.unk) == (1, 0)


def test_undo_restores_exact_state():
    puzzle = AkariPuzzle.from_file(DATA_DIR / "sample_5x5.txt")
    engine = PropagationEngine(puzzle)
    before = _snapshot(engine)
    cp = engine.checkpoint()

    queue = deque()
    engine.place_light(0, queue)
    engine.place_blocked(5, queue)
    engine.propagate()
    assert _snapshot(engine) != before

    engine.undo(cp)
    assert _snapshot(engine) == before
    assert len(engine.trail) == cp


def test_nested_checkpoints():
    engine = PropagationEngine(AkariPuzzle(["...", "...", "..."]))
    engine.place_light(0, deque())
    mid = _snapshot(engine)
    cp = engine.checkpoint()
    engine.place_light(4, deque())
    engine.undo(cp)
    assert _snapshot(engine) == mid


def test_zero_forces_neighbours_blocked_then_fails():
    # Both neighbours of the 0 are blocked and nothing else can light them
    engine = PropagationEngine(AkariPuzzle([['.', '0', '.']]))
    assert not engine.propagate()


def test_zero_forces_neighbours_blocked_then_lit_from_below():
    engine = PropagationEngine(AkariPuzzle([['.', '0', '.'], ['.', '#', '.']]))
    assert engine.propagate()
    assert engine.cell_state == [CellState.BLOCKED, CellState.BLOCKED,
                                 CellState.LIGHT, CellState.LIGHT]
    assert engine.is_solved()


def test_four_forces_all_neighbours_lit():
    engine = PropagationEngine(AkariPuzzle([['#', '.', '#'], ['.', '4', '.'], ['#', '.', '#']]))
    assert engine.propagate()
    assert all(s is CellState.LIGHT for s in engine.cell_state)
    assert engine.is_solved()


def test_overfull_number_fails():
    engine = PropagationEngine(AkariPuzzle([['3', '.'], ['.', '#']]))
    assert not engine.propagate()


def test_single_open_cell_lights_itself():
    engine = PropagationEngine(AkariPuzzle(["."]))
    assert engine.propagate()
    assert engine.cell_state == [CellState.LIGHT]


def test_open_board_needs_search():
    engine = PropagationEngine(AkariPuzzle(["...", "...", "..."]))
    assert engine.propagate()
    assert all(s is CellState.UNKNOWN for s in engine.cell_state)
    assert engine.candidate_count(0) == 5
    assert engine.candidates(0) == [0, 1, 2, 3, 6]
    assert not engine.is_solved()


def test_propagation_is_idempotent():
    for rows in (["...", "...", "..."],
                 [['.', '0', '.'], ['.', '#', '.']],
                 AkariPuzzle.from_file(DATA_DIR / "sample_5x5.txt").to_rows()):
        engine = PropagationEngine(AkariPuzzle(rows))
        assert engine.propagate()
        before = _snapshot(engine)
        trail_len = len(engine.trail)
        assert engine.propagate()
        assert _snapshot(engine) == before
        assert len(engine.trail) == trail_len


def test_forced_moves_are_sound():
    grids = [
        [['.', '1', '.'], ['.', '.', '.'], ['.', '.', '2']],
        [['.', '.', '.', '.'], ['.', '#', '1', '.'], ['.', '0', '.', '.']],
        [['2', '.', '.'], ['.', '#', '.'], ['.', '.', '1']],
    ]
    for rows in grids:
        puzzle = AkariPuzzle(rows)
        solutions = [set(s) for s in brute_force_solutions(puzzle)]
        engine = PropagationEngine(puzzle)
        if not engine.propagate():
            assert solutions == []
            continue
        for cid, state in enumerate(engine.cell_state):
            pos = engine.index.pos_of[cid]
            if state is CellState.LIGHT:
                assert all(pos in s for s in solutions)
            elif state is CellState.BLOCKED:
                assert all(pos not in s for s in solutions)
