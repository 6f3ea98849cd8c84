"""
Constraint index and solution checking for the Akari solver

Key points:
 - Open cells get dense ids in row-major order
 - Row and column segments are maximal runs of open cells
 - Each numbered cell becomes a NumConstraint over its open neighbours
 - Illumination sets (lit_list) are row segment + column segment, self once
 - ConstraintChecker validates a finished light set against the raw grid
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .puzzle import AkariPuzzle


Pos = Tuple[int, int]


@dataclass
class Segment:
    """Maximal run of open cells within one row or column"""
    cells: List[int]
    light: Optional[int] = None  # member holding the light, if any
    free_cnt: int = 0  # members not yet blocked

    def __post_init__(self):
        self.free_cnt = len(self.cells)


@dataclass
class NumConstraint:
    """Numbered opaque cell: exactly `target` of `adj` must hold a light"""
    row: int
    col: int
    target: int
    adj: List[int] = field(default_factory=list)
    on: int = 0
    unk: int = 0

    def __post_init__(self):
        self.unk = len(self.adj)

    def __repr__(self):
        return f"NumConstraint(({self.row},{self.col}) target={self.target}, on={self.on}, unk={self.unk})"


# -----------------------------------------------------------------------------
# Constraint index (built once per solve)
# -----------------------------------------------------------------------------
class ConstraintIndex:
    """One-time build of segments, numbered constraints and illumination sets."""

    def __init__(self, puzzle: AkariPuzzle):
        self.puzzle = puzzle
        h, w = puzzle.height, puzzle.width

        # Dense ids for open cells
        self.pos_of: List[Pos] = []
        self._id_at: Dict[Pos, int] = {}
        for r in range(h):
            for c in range(w):
                if puzzle.is_open(r, c):
                    self._id_at[(r, c)] = len(self.pos_of)
                    self.pos_of.append((r, c))

        self.n_empty = len(self.pos_of)
        self.row_seg_of: List[int] = [0] * self.n_empty
        self.col_seg_of: List[int] = [0] * self.n_empty

        self.row_segs: List[Segment] = []
        self.col_segs: List[Segment] = []
        self._build_row_segments()
        self._build_col_segments()

        self.num_cells: List[NumConstraint] = []
        self.num_adj_of: List[List[int]] = [[] for _ in range(self.n_empty)]
        self._build_num_constraints()

        self.lit_list: List[List[int]] = []
        self._build_lit_lists()

    def id_at(self, row: int, col: int) -> Optional[int]:
        """Open-cell id at (row, col), or None for opaque cells"""
        return self._id_at.get((row, col))

    def _build_row_segments(self) -> None:
        for r in range(self.puzzle.height):
            c = 0
            while c < self.puzzle.width:
                if not self.puzzle.is_open(r, c):
                    c += 1
                    continue
                cells = []
                while c < self.puzzle.width and self.puzzle.is_open(r, c):
                    cid = self._id_at[(r, c)]
                    self.row_seg_of[cid] = len(self.row_segs)
                    cells.append(cid)
                    c += 1
                self.row_segs.append(Segment(cells))

    def _build_col_segments(self) -> None:
        for c in range(self.puzzle.width):
            r = 0
            while r < self.puzzle.height:
                if not self.puzzle.is_open(r, c):
                    r += 1
                    continue
                cells = []
                while r < self.puzzle.height and self.puzzle.is_open(r, c):
                    cid = self._id_at[(r, c)]
                    self.col_seg_of[cid] = len(self.col_segs)
                    cells.append(cid)
                    r += 1
                self.col_segs.append(Segment(cells))

    def _build_num_constraints(self) -> None:
        for r, c, target in self.puzzle.numbered_cells():
            adj = []
            for nr, nc in self.puzzle.neighbors(r, c):
                cid = self._id_at.get((nr, nc))
                if cid is not None:
                    adj.append(cid)
                    self.num_adj_of[cid].append(len(self.num_cells))
            self.num_cells.append(NumConstraint(row=r, col=c, target=target, adj=adj))

    def _build_lit_lists(self) -> None:
        for cid in range(self.n_empty):
            lit = list(self.row_segs[self.row_seg_of[cid]].cells)
            seen = set(lit)
            for other in self.col_segs[self.col_seg_of[cid]].cells:
                if other not in seen:
                    lit.append(other)
                    seen.add(other)
            self.lit_list.append(lit)

    def row_seg(self, cid: int) -> Segment:
        return self.row_segs[self.row_seg_of[cid]]

    def col_seg(self, cid: int) -> Segment:
        return self.col_segs[self.col_seg_of[cid]]

    def __repr__(self):
        return (f"ConstraintIndex(open={self.n_empty}, row_segs={len(self.row_segs)}, "
                f"col_segs={len(self.col_segs)}, numbered={len(self.num_cells)})")


# -----------------------------------------------------------------------------
# Solution checking
# -----------------------------------------------------------------------------
class ConstraintChecker:
    """Validates a complete light placement against the puzzle rules."""

    @staticmethod
    def _ray(puzzle: AkariPuzzle, row: int, col: int, dr: int, dc: int) -> Iterable[Pos]:
        """Open cells seen from (row, col) in one direction, up to an opaque cell or the edge"""
        r, c = row + dr, col + dc
        while puzzle.in_bounds(r, c) and puzzle.is_open(r, c):
            yield (r, c)
            r, c = r + dr, c + dc

    @staticmethod
    def illuminated(puzzle: AkariPuzzle, lights: Iterable[Pos]) -> Set[Pos]:
        """All open cells lit by the given lights (lights light themselves)"""
        lit: Set[Pos] = set()
        for r, c in lights:
            if not (puzzle.in_bounds(r, c) and puzzle.is_open(r, c)):
                continue
            lit.add((r, c))
            for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                lit.update(ConstraintChecker._ray(puzzle, r, c, dr, dc))
        return lit

    @staticmethod
    def find_violations(puzzle: AkariPuzzle, lights: Iterable[Pos]) -> List[str]:
        """Return a list of rule violations; empty when the placement is a valid solution."""
        lights = [tuple(p) for p in lights]
        light_set = set(lights)
        problems: List[str] = []

        for r, c in lights:
            if not (puzzle.in_bounds(r, c) and puzzle.is_open(r, c)):
                problems.append(f"light at ({r},{c}) is not on an open cell")

        # Two lights seeing each other (looking right and down is enough)
        for r, c in sorted(light_set):
            if not (puzzle.in_bounds(r, c) and puzzle.is_open(r, c)):
                continue
            for dr, dc in ((0, 1), (1, 0)):
                for other in ConstraintChecker._ray(puzzle, r, c, dr, dc):
                    if other in light_set:
                        problems.append(f"lights at ({r},{c}) and {other} share a segment")

        lit = ConstraintChecker.illuminated(puzzle, light_set)
        for pos in puzzle.open_cells():
            if pos not in lit:
                problems.append(f"open cell {pos} is not illuminated")

        for r, c, target in puzzle.numbered_cells():
            count = sum(1 for p in puzzle.neighbors(r, c) if p in light_set)
            if count != target:
                problems.append(f"numbered cell ({r},{c}) wants {target} lights, has {count}")

        return problems

    @staticmethod
    def is_valid_solution(puzzle: AkariPuzzle, lights: Iterable[Pos]) -> bool:
        return not ConstraintChecker.find_violations(puzzle, lights)
