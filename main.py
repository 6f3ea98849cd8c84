# main.py
# Driver: puzzle text → board screenshot cell detection → solve → click plan
# Saves an overlay, the solution and a JSON click plan for the replay driver.

# ==================================================================
# CONFIGURATION: Easy Toggle
# ==================================================================
IMAGE_PATH = "data/samples/board.png"          # Screenshot of the rendered board
PUZZLE_PATH = "data/puzzles/sample_5x5.txt"    # Level text for the same board
OUTPUT_DIR = "data/debug"
CLICK_DELAY_MS = 100                           # Pause between replayed clicks
DISPLAY_SCALE = (1.0, 1.0)                     # canvas px / display px (x, y)
TIMEOUT_SECONDS = 300
# ==================================================================

import os, sys
import cv2

from Solver import AkariPuzzle, AkariSolver, SolutionFormatter
from Vision.board_crop import load_board_image
from Vision.cell_grid import detect_cells, draw_cells, CellDetectConfig


def ensure_dir(p):
    os.makedirs(p, exist_ok=True)


def process_board(image_path: str, puzzle_path: str, output_dir: str = OUTPUT_DIR,
                  scale=DISPLAY_SCALE):
    """
    Run the full pipeline for one board.

    Args:
        image_path: Screenshot of the rendered board
        puzzle_path: Level text (or JSON) describing the same board
        output_dir: Base directory for output (creates subfolder per puzzle)
        scale: Canvas-to-display scale factors for the click plan

    Returns:
        The click plan, or None if the puzzle has no solution
    """
    name = os.path.splitext(os.path.basename(puzzle_path))[0]
    out_dir = os.path.join(output_dir, name)
    ensure_dir(out_dir)

    print(f"\n{'='*70}")
    print("Starting Akari Pipeline")
    print(f"{'='*70}")
    print(f"Image: {image_path}")
    print(f"Puzzle: {puzzle_path}")
    print(f"Output directory: {out_dir}")

    # Phase 1: puzzle text
    puzzle = AkariPuzzle.from_file(puzzle_path)
    print(f"\nLoaded {puzzle}")

    # Phase 2: cell centres
    print(f"\n{'='*70}")
    print("Phase 1: Cell Detection")
    print(f"{'='*70}")
    img = load_board_image(image_path)
    grid = detect_cells(img, puzzle.height, puzzle.width, CellDetectConfig())
    x, y, w, h = grid.board_rect
    print(f"Board at ({x},{y}) size {w}x{h}, {len(grid.cells)} cells")

    # Phase 3: solve
    print(f"\n{'='*70}")
    print("Phase 2: Solving")
    print(f"{'='*70}")
    solver = AkariSolver(puzzle, verbose=True, timeout_seconds=TIMEOUT_SECONDS)
    lights = solver.solve()

    SolutionFormatter.save_solution(puzzle, lights, solver.stats, os.path.join(out_dir, "solution.json"))
    SolutionFormatter.save_human_readable(puzzle, lights, os.path.join(out_dir, "solution.txt"))

    if lights is None:
        print("\n✗ No solution; nothing to replay")
        return None

    # Phase 4: click plan + overlay
    plan = SolutionFormatter.build_click_plan(lights, grid.cells, scale)
    SolutionFormatter.save_click_plan(plan, os.path.join(out_dir, "click_plan.json"), CLICK_DELAY_MS)

    overlay = draw_cells(img, grid.cells, lights)
    out_overlay = os.path.join(out_dir, "board_cells.png")
    cv2.imwrite(out_overlay, overlay)
    print(f"[output] Cell overlay: {out_overlay}")

    print(f"\n✓ {len(plan)} clicks planned")
    return plan


def main():
    image_path = sys.argv[1] if len(sys.argv) > 1 else IMAGE_PATH
    puzzle_path = sys.argv[2] if len(sys.argv) > 2 else PUZZLE_PATH

    for p in (image_path, puzzle_path):
        if not os.path.exists(p):
            print(f"Error: File not found: {p}")
            sys.exit(1)

    plan = process_board(image_path, puzzle_path)
    sys.exit(0 if plan is not None else 2)


if __name__ == "__main__":
    main()
