import json
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from .constraints import ConstraintChecker
from .propagation import CellState, PropagationEngine
from .puzzle import AkariPuzzle


Pos = Tuple[int, int]


class SolutionFormatter:
    """Formats puzzle solutions for output"""

    @staticmethod
    def extract_lights(engine: PropagationEngine) -> List[Pos]:
        """
        Every cell holding a light as (row, col), ordered by row then column.
        """
        lights = [engine.index.pos_of[cid]
                  for cid, state in enumerate(engine.cell_state)
                  if state is CellState.LIGHT]
        return sorted(lights)

    @staticmethod
    def format_solution_json(puzzle: AkariPuzzle, lights: Optional[Sequence[Pos]], stats: Dict) -> Dict:
        """
        Format solution as JSON
        """
        solved = lights is not None
        violations = ConstraintChecker.find_violations(puzzle, lights) if solved else []
        return {
            'puzzle_info': {
                'height': puzzle.height,
                'width': puzzle.width,
                'open_cells': len(puzzle.open_cells()),
                'numbered_cells': len(puzzle.numbered_cells()),
                'solved': solved,
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': stats,
            'lights': [[r, c] for r, c in lights] if solved else [],
            'validation': {
                'valid': solved and not violations,
                'violations': violations
            }
        }

    @staticmethod
    def format_grid_visualization(puzzle: AkariPuzzle, lights: Sequence[Pos] = ()) -> str:
        """
        Text grid: L light, + lit, . dark, # opaque, digits for numbered cells.
        """
        if puzzle.height == 0:
            return "Empty puzzle"

        light_set = {tuple(p) for p in lights}
        lit = ConstraintChecker.illuminated(puzzle, light_set)

        lines = []
        lines.append("-" * (puzzle.width * 2 + 3))
        for r in range(puzzle.height):
            row = []
            for c in range(puzzle.width):
                sym = puzzle.symbol_at(r, c)
                if not sym.is_open:
                    row.append(sym.value)
                elif (r, c) in light_set:
                    row.append('L')
                elif (r, c) in lit:
                    row.append('+')
                else:
                    row.append('.')
            lines.append("  " + " ".join(row))
        lines.append("-" * (puzzle.width * 2 + 3))
        return "\n".join(lines)

    @staticmethod
    def format_solution_human_readable(puzzle: AkariPuzzle, lights: Optional[Sequence[Pos]]) -> str:
        """
        Format solution as human-readable text
        """
        lines = []
        lines.append("=" * 60)
        lines.append("AKARI PUZZLE SOLUTION")
        lines.append("=" * 60)
        lines.append(f"\nPuzzle is {puzzle.height}x{puzzle.width}, "
                     f"{len(puzzle.open_cells())} open cells, {len(puzzle.numbered_cells())} numbered cells")

        if lights is None:
            lines.append("\nNo solution exists.")
            lines.append("=" * 60)
            return "\n".join(lines)

        lines.append(f"Placed {len(lights)} lights\n")
        lines.append("LIGHTS:")
        lines.append("-" * 60)
        for i, (r, c) in enumerate(lights, 1):
            lines.append(f"{i:2d}. ({r},{c})")

        lines.append("\n" + "=" * 60)
        lines.append("NUMBERED CELLS:")
        lines.append("-" * 60)
        light_set = set(map(tuple, lights))
        for r, c, target in puzzle.numbered_cells():
            count = sum(1 for p in puzzle.neighbors(r, c) if p in light_set)
            satisfied = "✓" if count == target else "✗"
            lines.append(f"({r},{c}): wants {target} → has {count} {satisfied}")

        lines.append("=" * 60)
        lines.append("\nGRID:")
        lines.append(SolutionFormatter.format_grid_visualization(puzzle, lights))
        return "\n".join(lines)

    @staticmethod
    def build_click_plan(lights: Sequence[Pos], cells, scale: Tuple[float, float] = (1.0, 1.0)) -> List[Dict]:
        """
        Map light positions to display coordinates for a replay driver.

        `cells` are located cells with `row`, `col` and a canvas-pixel
        `center`; `scale` is (canvas width / display width, canvas height /
        display height).
        """
        by_pos = {(cell.row, cell.col): cell for cell in cells}
        scale_x, scale_y = scale

        plan = []
        for row, col in sorted(tuple(p) for p in lights):
            cell = by_pos.get((row, col))
            if cell is None:
                print(f"[click-plan] Cell not found for light ({row},{col}), skipping")
                continue
            cx, cy = cell.center
            plan.append({
                'row': row,
                'col': col,
                'x': cx / scale_x,
                'y': cy / scale_y,
            })
        return plan

    @staticmethod
    def save_solution(puzzle: AkariPuzzle, lights: Optional[Sequence[Pos]], stats: Dict, output_path: str):
        """
        Save solution to JSON file
        """
        solution = SolutionFormatter.format_solution_json(puzzle, lights, stats)

        with open(output_path, 'w') as f:
            json.dump(solution, f, indent=2)

        print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(puzzle: AkariPuzzle, lights: Optional[Sequence[Pos]], output_path: str):
        """
        Save human-readable solution to text file
        """
        text = SolutionFormatter.format_solution_human_readable(puzzle, lights)

        with open(output_path, 'w') as f:
            f.write(text)

        print(f"✓ Human-readable solution saved to: {output_path}")

    @staticmethod
    def save_click_plan(plan: List[Dict], output_path: str, delay_ms: int = 100):
        """
        Save the click plan with the delay the replay driver should wait between clicks
        """
        with open(output_path, 'w') as f:
            json.dump({'delay_ms': delay_ms, 'clicks': plan}, f, indent=2)

        print(f"✓ Click plan saved to: {output_path}")
