"""
Trail-based reversible state and constraint propagation for Akari

Every mutation of cell states, segment lights, free counts, lit counts and
numbered-cell counters is logged on the trail as (kind, target, previous).
Undoing to a checkpoint pops entries in reverse and restores each previous
value, so a failed branch leaves no trace.
"""

from collections import deque
from enum import Enum
from typing import Deque, List, Optional, Tuple

from .constraints import ConstraintIndex
from .puzzle import AkariPuzzle


class CellState(Enum):
    UNKNOWN = 0
    LIGHT = 1
    BLOCKED = 2


class Mutation(Enum):
    CELL_STATE = 0
    ROW_LIGHT = 1
    COL_LIGHT = 2
    ROW_FREE = 3
    COL_FREE = 4
    LIT_COUNT = 5
    NUM_ON = 6
    NUM_UNK = 7


TrailEntry = Tuple[Mutation, int, object]


class PropagationEngine:
    """Mutable board state over a ConstraintIndex, with forced-move inference."""

    def __init__(self, puzzle: AkariPuzzle):
        self.puzzle = puzzle
        self.index = ConstraintIndex(puzzle)
        n = self.index.n_empty
        self.cell_state: List[CellState] = [CellState.UNKNOWN] * n
        self.lit_count: List[int] = [0] * n
        self.trail: List[TrailEntry] = []

    # -------------------------------------------------------------------------
    # Trail
    # -------------------------------------------------------------------------
    def checkpoint(self) -> int:
        return len(self.trail)

    def undo(self, checkpoint: int) -> None:
        """Rewind every mutation recorded after `checkpoint`."""
        idx = self.index
        while len(self.trail) > checkpoint:
            kind, target, prev = self.trail.pop()
            if kind is Mutation.CELL_STATE:
                self.cell_state[target] = prev
            elif kind is Mutation.ROW_LIGHT:
                idx.row_segs[target].light = prev
            elif kind is Mutation.COL_LIGHT:
                idx.col_segs[target].light = prev
            elif kind is Mutation.ROW_FREE:
                idx.row_segs[target].free_cnt = prev
            elif kind is Mutation.COL_FREE:
                idx.col_segs[target].free_cnt = prev
            elif kind is Mutation.LIT_COUNT:
                self.lit_count[target] = prev
            elif kind is Mutation.NUM_ON:
                idx.num_cells[target].on = prev
            elif kind is Mutation.NUM_UNK:
                idx.num_cells[target].unk = prev

    # -------------------------------------------------------------------------
    # Reversible primitives
    # -------------------------------------------------------------------------
    def place_blocked(self, cell: int, queue: Deque[int]) -> bool:
        """Mark `cell` as unable to hold a light. False if it already holds one."""
        state = self.cell_state[cell]
        if state is CellState.BLOCKED:
            return True
        if state is CellState.LIGHT:
            return False

        idx = self.index
        self.trail.append((Mutation.CELL_STATE, cell, state))
        self.cell_state[cell] = CellState.BLOCKED

        rs = idx.row_seg_of[cell]
        self.trail.append((Mutation.ROW_FREE, rs, idx.row_segs[rs].free_cnt))
        idx.row_segs[rs].free_cnt -= 1

        cs = idx.col_seg_of[cell]
        self.trail.append((Mutation.COL_FREE, cs, idx.col_segs[cs].free_cnt))
        idx.col_segs[cs].free_cnt -= 1

        for k in idx.num_adj_of[cell]:
            num = idx.num_cells[k]
            self.trail.append((Mutation.NUM_UNK, k, num.unk))
            num.unk -= 1
            queue.append(k)

        return True

    def place_light(self, cell: int, queue: Deque[int]) -> bool:
        """Put a light on `cell` and block the rest of its segments. False on contradiction."""
        state = self.cell_state[cell]
        if state is CellState.LIGHT:
            return True
        if state is CellState.BLOCKED:
            return False

        idx = self.index
        self.trail.append((Mutation.CELL_STATE, cell, state))
        self.cell_state[cell] = CellState.LIGHT

        for lit in idx.lit_list[cell]:
            self.trail.append((Mutation.LIT_COUNT, lit, self.lit_count[lit]))
            self.lit_count[lit] += 1

        for k in idx.num_adj_of[cell]:
            num = idx.num_cells[k]
            self.trail.append((Mutation.NUM_ON, k, num.on))
            num.on += 1
            self.trail.append((Mutation.NUM_UNK, k, num.unk))
            num.unk -= 1
            queue.append(k)

        for seg_id, segs, kind in ((idx.row_seg_of[cell], idx.row_segs, Mutation.ROW_LIGHT),
                                   (idx.col_seg_of[cell], idx.col_segs, Mutation.COL_LIGHT)):
            seg = segs[seg_id]
            if seg.light is not None:
                if seg.light != cell:
                    return False
                continue
            self.trail.append((kind, seg_id, None))
            seg.light = cell
            for other in seg.cells:
                if other != cell and not self.place_blocked(other, queue):
                    return False

        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def needs_light(self, cell: int) -> bool:
        """Dark cell whose row and column segments both still lack a light"""
        if self.lit_count[cell] > 0:
            return False
        return self.index.row_seg(cell).light is None and self.index.col_seg(cell).light is None

    def candidate_count(self, cell: int) -> int:
        """Number of distinct cells in the row/column segments that could still light `cell`"""
        self_free = 1 if self.cell_state[cell] is not CellState.BLOCKED else 0
        return self.index.row_seg(cell).free_cnt + self.index.col_seg(cell).free_cnt - self_free

    def candidates(self, cell: int) -> List[int]:
        """Non-blocked row members, then non-blocked column members not already listed"""
        out = [x for x in self.index.row_seg(cell).cells
               if self.cell_state[x] is not CellState.BLOCKED]
        seen = set(out)
        for x in self.index.col_seg(cell).cells:
            if self.cell_state[x] is not CellState.BLOCKED and x not in seen:
                out.append(x)
        return out

    def _single_candidate(self, cell: int) -> Optional[int]:
        """The unique non-blocked cell across both segments, or None if they disagree"""
        only = None
        for seg in (self.index.row_seg(cell), self.index.col_seg(cell)):
            for x in seg.cells:
                if self.cell_state[x] is CellState.BLOCKED:
                    continue
                if only is not None and only != x:
                    return None
                only = x
        return only

    def is_solved(self) -> bool:
        if any(count == 0 for count in self.lit_count):
            return False
        return all(num.on == num.target for num in self.index.num_cells)

    def lights(self) -> List[int]:
        return [cid for cid, state in enumerate(self.cell_state) if state is CellState.LIGHT]

    # -------------------------------------------------------------------------
    # Fixpoint inference
    # -------------------------------------------------------------------------
    def _drain_constraints(self, queue: Deque[int]) -> Optional[bool]:
        """
        Process the numbered-cell worklist until empty.

        Returns None on contradiction, otherwise whether any cell changed.
        """
        changed = False
        while queue:
            num = self.index.num_cells[queue.popleft()]
            if num.on > num.target or num.on + num.unk < num.target:
                return None

            if num.on == num.target:
                force = self.place_blocked
            elif num.on + num.unk == num.target:
                force = self.place_light
            else:
                continue

            for cell in list(num.adj):
                if self.cell_state[cell] is CellState.UNKNOWN:
                    if not force(cell, queue):
                        return None
                    changed = True
        return changed

    def _sweep_illumination(self, queue: Deque[int]) -> Optional[bool]:
        """
        Check every dark cell still needing a light.

        No remaining candidate is a contradiction (None); exactly one
        candidate forces a light there.
        """
        changed = False
        for cell in range(self.index.n_empty):
            if not self.needs_light(cell):
                continue
            cand = self.candidate_count(cell)
            if cand == 0:
                return None
            if cand == 1:
                only = self._single_candidate(cell)
                if only is None:
                    # Segments disagree; leave it to the search
                    continue
                if not self.place_light(only, queue):
                    return None
                changed = True
        return changed

    def propagate(self) -> bool:
        """Run deduction to a fixpoint. False if the board is contradictory."""
        queue: Deque[int] = deque(range(len(self.index.num_cells)))

        while True:
            changed = self._drain_constraints(queue)
            if changed is None:
                return False

            swept = self._sweep_illumination(queue)
            if swept is None:
                return False

            if not (changed or swept) and not queue:
                return True

    def __repr__(self):
        n_light = sum(1 for s in self.cell_state if s is CellState.LIGHT)
        n_blocked = sum(1 for s in self.cell_state if s is CellState.BLOCKED)
        return (f"PropagationEngine(open={self.index.n_empty}, lights={n_light}, "
                f"blocked={n_blocked}, trail={len(self.trail)})")
