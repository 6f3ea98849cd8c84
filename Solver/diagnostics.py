"""
Diagnostic helpers: brute-force reference enumeration and solver cross-checks

The brute-force enumerator tries every subset of open cells, so it is only
usable on small grids. It exists to check the solver, not to replace it.
"""

import sys
import time
from itertools import combinations
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .constraints import ConstraintChecker
from .puzzle import AkariPuzzle
from .solver import AkariSolver


Pos = Tuple[int, int]


def brute_force_solutions(puzzle: AkariPuzzle, limit: Optional[int] = None) -> Iterator[List[Pos]]:
    """Yield every valid light set, smallest sets first."""
    open_cells = puzzle.open_cells()
    found = 0
    for size in range(len(open_cells) + 1):
        for subset in combinations(open_cells, size):
            if ConstraintChecker.is_valid_solution(puzzle, subset):
                yield list(subset)
                found += 1
                if limit is not None and found >= limit:
                    return


def cross_check(puzzle: AkariPuzzle) -> Dict:
    """Compare the solver result with the brute-force oracle."""
    lights = AkariSolver(puzzle).solve()
    oracle = [sorted(s) for s in brute_force_solutions(puzzle)]

    solver_solvable = lights is not None
    oracle_solvable = bool(oracle)
    solver_valid = solver_solvable and lights in oracle
    return {
        'solver_solvable': solver_solvable,
        'oracle_solvable': oracle_solvable,
        'solver_valid': solver_valid,
        'oracle_count': len(oracle),
        'agrees': solver_solvable == oracle_solvable and (solver_valid or not solver_solvable),
    }


def analyze_puzzle(path: str, timeout: Optional[float] = 60) -> Dict:
    """Solve one puzzle file verbosely and summarise what happened."""
    puzzle = AkariPuzzle.from_file(path)
    solver = AkariSolver(puzzle, verbose=True, timeout_seconds=timeout)

    print(f"\n{'='*80}")
    print(f"ANALYZING: {Path(path).name}")
    print(f"{'='*80}")
    print(f"Grid: {puzzle.height}x{puzzle.width}")
    print(f"Open cells: {len(puzzle.open_cells())}")
    print(f"Numbered cells: {len(puzzle.numbered_cells())}")
    print(f"Segments: {len(solver.engine.index.row_segs)} row, {len(solver.engine.index.col_segs)} column")

    start = time.time()
    lights = solver.solve()
    elapsed = time.time() - start

    print(f"\n{'='*80}")
    if lights is not None:
        violations = ConstraintChecker.find_violations(puzzle, lights)
        print(f"✓ SOLVED in {elapsed:.2f}s with {len(lights)} lights")
        if violations:
            print("⚠️  Solution failed validation:")
            for v in violations:
                print(f"    {v}")
    elif solver.stats['timed_out']:
        print(f"✗ TIMEOUT after {elapsed:.2f}s")
        print("   Search did not finish; the puzzle may still be solvable")
    else:
        print(f"✗ UNSATISFIABLE (search exhausted in {elapsed:.2f}s)")
    print(f"{'='*80}\n")

    return {
        'file': Path(path).name,
        'solved': lights is not None,
        'elapsed': elapsed,
        'stats': dict(solver.stats),
    }


def main():
    """Analyze every puzzle given on the command line (or in data/puzzles/)."""
    if len(sys.argv) > 1:
        files = sys.argv[1:]
    else:
        data_dir = Path(__file__).parent.parent / "data" / "puzzles"
        files = [str(p) for p in sorted(data_dir.glob("*")) if p.suffix in ('.txt', '.json')]

    if not files:
        print("ERROR: No puzzle files found!")
        return

    results = [analyze_puzzle(f) for f in files]
    solved = sum(1 for r in results if r['solved'])
    print(f"Solved: {solved}/{len(results)}")
    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s} {r['stats']['backtracks']} backtracks, {r['elapsed']:.3f}s")


if __name__ == "__main__":
    main()
