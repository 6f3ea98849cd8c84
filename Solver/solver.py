"""
Backtracking solver for Akari puzzles

Strategy:
1. Propagate numbered-cell and illumination deductions to a fixpoint
2. Stop if every open cell is lit and every number is satisfied
3. Otherwise branch on the dark cell with the fewest possible light sources
   (ties broken in row-major order), trying each source in turn
4. Undo through the trail on failure

The first solution under this fixed ordering is returned; the solver does
not look for alternatives.
"""

import time
from collections import deque
from typing import List, Optional, Sequence, Tuple

from .output import SolutionFormatter
from .propagation import PropagationEngine
from .puzzle import AkariPuzzle


Pos = Tuple[int, int]


class AkariSolver:
    def __init__(self, puzzle: AkariPuzzle, verbose: bool = False, timeout_seconds: Optional[float] = None):
        self.puzzle = puzzle
        self.verbose = verbose
        self.timeout = timeout_seconds
        self.engine = PropagationEngine(puzzle)
        self.stats = {
            'propagations': 0,
            'search_moves': 0,
            'backtracks': 0,
            'max_depth': 0,
            'elapsed': 0.0,
            'timed_out': False,
        }
        self.solution: Optional[List[Pos]] = None

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self) -> Optional[List[Pos]]:
        """
        Solve the puzzle.

        Returns the light positions sorted by (row, col), or None if the
        puzzle is unsatisfiable or the timeout expired.
        """
        self.start_time = time.time()

        if self.verbose:
            print(f"Starting solver: {self.puzzle}")
            print(f"Index: {self.engine.index}")
            print("Strategy: propagation + min-candidate backtracking\n")

        solved = self._search(0)
        self.stats['elapsed'] = time.time() - self.start_time

        if solved:
            self.solution = SolutionFormatter.extract_lights(self.engine)

        if self.verbose:
            if solved:
                print("\n✓ Puzzle solved!")
            elif self.stats['timed_out']:
                print(f"\n✗ Timed out after {self.timeout}s")
            else:
                print("\n✗ No solution exists")
            self._print_stats()

        return self.solution

    def _timed_out(self) -> bool:
        if self.timeout is None:
            return False
        if time.time() - self.start_time > self.timeout:
            self.stats['timed_out'] = True
            return True
        return False

    # -------------------------------------------------------------------------
    # Depth-first search
    # -------------------------------------------------------------------------
    def _search(self, depth: int) -> bool:
        if self._timed_out():
            return False

        self.stats['max_depth'] = max(self.stats['max_depth'], depth)
        self.stats['propagations'] += 1
        if not self.engine.propagate():
            return False

        if self.engine.is_solved():
            return True

        branch = self._choose_branch_cell()
        if branch is None:
            return False

        cell, candidates = branch
        if self.verbose and depth < 3:
            r, c = self.engine.index.pos_of[cell]
            print(f"{'  ' * depth}Branching on ({r},{c}) ({len(candidates)} options)")

        for pos in candidates:
            cp = self.engine.checkpoint()
            self.stats['search_moves'] += 1

            if self.verbose and depth < 3:
                r, c = self.engine.index.pos_of[pos]
                print(f"{'  ' * depth}  Light at ({r},{c})")

            if self.engine.place_light(pos, deque()) and self._search(depth + 1):
                return True

            self.engine.undo(cp)
            self.stats['backtracks'] += 1
            if self.stats['timed_out']:
                return False

            if self.verbose and depth < 3:
                print(f"{'  ' * depth}  Backtrack")

        return False

    def _choose_branch_cell(self) -> Optional[Tuple[int, List[int]]]:
        """
        Pick the dark cell with the fewest possible light sources.

        Cells with zero or one source are left to propagation.
        """
        engine = self.engine
        best_cell = None
        best_count = 0
        for cell in range(engine.index.n_empty):
            if not engine.needs_light(cell):
                continue
            count = engine.candidate_count(cell)
            if count <= 1:
                continue
            if best_cell is None or count < best_count:
                best_cell, best_count = cell, count

        if best_cell is None:
            return None
        return best_cell, engine.candidates(best_cell)

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSolving Statistics:")
        print(f"  Propagation rounds: {self.stats['propagations']}")
        print(f"  Search moves: {self.stats['search_moves']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        print(f"  Max depth: {self.stats['max_depth']}")
        print(f"  Elapsed: {self.stats['elapsed']:.3f}s")
        if self.solution is not None:
            print(f"  Lights placed: {len(self.solution)}")


def solve_puzzle_rows(rows: Sequence[Sequence[str]]) -> Optional[List[Pos]]:
    """Solve a grid given as rows of symbols; None when unsatisfiable."""
    return AkariSolver(AkariPuzzle(rows)).solve()
