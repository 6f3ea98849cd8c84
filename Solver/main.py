#!/usr/bin/env python3
"""
Akari Solver - Main Entry Point

Usage:
    python -m Solver.main data/puzzles/sample_5x5.txt
    python -m Solver.main  # Solves all puzzles in data/puzzles/
"""

import os
import sys
from pathlib import Path

from .output import SolutionFormatter
from .puzzle import AkariPuzzle
from .solver import AkariSolver

# ============================================================================
# CONFIGURATION
# ============================================================================
PUZZLE_PATH = "data/puzzles/sample_5x5.txt"   # Puzzle to solve by default
DATA_DIR = "data/puzzles"                      # Where SOLVE_ALL looks for puzzles
OUTPUT_DIR = "data/debug"                      # Base output directory
SOLVE_ALL = True                               # Set True to solve all puzzles in DATA_DIR

TIMEOUT_SECONDS = 300
# Maximum time to spend solving a single puzzle
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent


def solve_puzzle(input_path: str, output_dir: str = None, verbose: bool = True,
                 timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve a single puzzle and save results.

    Args:
        input_path: Path to a level-text or JSON puzzle file
        output_dir: Directory for output files (default: data/debug/<puzzle_name>/)
        verbose: Print detailed solving progress
        timeout_seconds: Maximum solving time in seconds

    Returns:
        (lights or None, puzzle, solver)
    """
    puzzle_name = Path(input_path).stem

    if output_dir is None:
        output_dir = PROJECT_ROOT / OUTPUT_DIR / puzzle_name

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Loading puzzle: {input_path}")
    print(f"Output directory: {output_dir}")
    print(f"{'='*60}")

    try:
        puzzle = AkariPuzzle.from_file(input_path)
        solver = AkariSolver(puzzle, verbose=verbose, timeout_seconds=timeout_seconds)

        if verbose:
            print(f"\n{puzzle}\n")

        lights = solver.solve()

        SolutionFormatter.save_solution(puzzle, lights, solver.stats, str(output_dir / "solution.json"))
        SolutionFormatter.save_human_readable(puzzle, lights, str(output_dir / "solution.txt"))

        if lights is not None:
            print(f"\n{'='*60}")
            print("SUCCESS! Puzzle solved ✓")
            print(f"{'='*60}")
            if verbose:
                print("\n" + SolutionFormatter.format_solution_human_readable(puzzle, lights))
        else:
            print(f"\n{'='*60}")
            if solver.stats['timed_out']:
                print(f"FAILED: Timed out after {timeout_seconds}s ✗")
            else:
                print("FAILED: Puzzle has no solution ✗")
            print(f"{'='*60}")

        return lights, puzzle, solver

    except KeyboardInterrupt:
        print(f"\n\n{'='*60}")
        print("⚠ Solving interrupted by user (Ctrl+C)")
        print(f"{'='*60}")
        return None, None, None

    except Exception as e:
        print(f"\nError while solving {input_path}: {e}")
        import traceback
        traceback.print_exc()
        return None, None, None


def solve_all_puzzles(data_dir: str = None, output_dir: str = None,
                      timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve all puzzles in data/puzzles/ (or a specified directory)

    Outputs go to <output_dir>/<puzzle_name>/ (default: data/debug/<puzzle_name>/)
    """
    data_path = Path(data_dir) if data_dir else PROJECT_ROOT / DATA_DIR
    if not data_path.exists():
        print(f"Error: Directory not found: {data_path}")
        return []

    files = sorted(p for p in data_path.iterdir() if p.suffix.lower() in ('.txt', '.json'))
    if not files:
        print(f"No puzzles found in {data_path}")
        return []

    print(f"\nFound {len(files)} puzzle(s) to solve")
    print(f"  Timeout per puzzle: {timeout_seconds}s\n")

    results = []
    for i, path in enumerate(files, 1):
        print(f"\n[{i}/{len(files)}] Solving {path.name}...")
        puzzle_out = Path(output_dir) / path.stem if output_dir else None
        lights, puzzle, solver = solve_puzzle(str(path), output_dir=puzzle_out, verbose=False,
                                              timeout_seconds=timeout_seconds)
        results.append({
            'file': path.name,
            'solved': lights is not None,
            'lights': len(lights) if lights is not None else None,
            'backtracks': solver.stats['backtracks'] if solver else None,
            'elapsed': solver.stats['elapsed'] if solver else None,
        })
        print(f"  {'✓ SOLVED' if lights is not None else '✗ FAILED'}")

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    solved_count = sum(1 for r in results if r['solved'])
    solve_rate = solved_count / len(results) * 100
    print(f"Solved: {solved_count}/{len(results)} puzzles ({solve_rate:.1f}%)")
    print(f"{'='*60}\n")

    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s}", end="")
        if r['solved']:
            print(f" - {r['lights']} lights, {r['backtracks']} backtracks, {r['elapsed']:.3f}s")
        else:
            print(" - Failed")

    return results


def main():
    """Main entry point"""
    if len(sys.argv) > 1:
        input_file = sys.argv[1]
        if not os.path.isabs(input_file) and not os.path.exists(input_file):
            input_file = PROJECT_ROOT / input_file

        if not os.path.exists(input_file):
            print(f"Error: File not found: {input_file}")
            sys.exit(1)

        lights, _, _ = solve_puzzle(str(input_file), verbose=True)
        sys.exit(0 if lights is not None else 2)

    elif SOLVE_ALL:
        print(f"SOLVE_ALL mode enabled - solving all puzzles in {DATA_DIR}/")
        solve_all_puzzles()

    else:
        print(f"Using configured PUZZLE_PATH: {PUZZLE_PATH}")
        input_file = PROJECT_ROOT / PUZZLE_PATH
        if not os.path.exists(input_file):
            print(f"Error: File not found: {input_file}")
            sys.exit(1)
        solve_puzzle(str(input_file), verbose=True)


if __name__ == "__main__":
    main()
