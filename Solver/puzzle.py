"""
Core data structures for Akari (Light Up) puzzle representation
"""
import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union


class CellSymbol(Enum):
    """Fixed content of a grid cell"""
    OPAQUE = '#'
    OPEN = '.'
    NUM0 = '0'
    NUM1 = '1'
    NUM2 = '2'
    NUM3 = '3'
    NUM4 = '4'

    @classmethod
    def parse(cls, symbol: str) -> "CellSymbol":
        """Parse a single text symbol. Unknown symbols are read as open cells."""
        try:
            return cls(str(symbol).strip())
        except ValueError:
            return cls.OPEN

    @property
    def is_open(self) -> bool:
        return self is CellSymbol.OPEN

    @property
    def number(self) -> Optional[int]:
        """Required light count for numbered opaque cells, else None"""
        if self.value.isdigit():
            return int(self.value)
        return None

    def __str__(self):
        return self.value


Rows = Sequence[Union[str, Sequence[str]]]


def parse_level_text(text: str) -> List[List[str]]:
    """
    Parse level text into rows of symbols.

    The grid block ends at the first blank line; anything after it is
    trailer data and ignored. Rows are whitespace separated ("# . 1"), but
    compact rows ("#.1") are accepted too.
    """
    block = text.replace('\r\n', '\n').split('\n\n')[0]
    rows = []
    for line in block.split('\n'):
        line = line.strip()
        if not line:
            continue
        tokens = line.split()
        if len(tokens) == 1 and len(line) > 1:
            tokens = list(line)
        rows.append(tokens)
    return rows


class AkariPuzzle:
    """Rectangular Akari grid; immutable after construction"""

    def __init__(self, rows: Rows):
        self.grid: List[List[CellSymbol]] = [
            [CellSymbol.parse(sym) for sym in row] for row in rows
        ]
        self.height = len(self.grid)
        self.width = len(self.grid[0]) if self.grid else 0

    @classmethod
    def from_text(cls, text: str) -> "AkariPuzzle":
        rows = parse_level_text(text)
        if not rows:
            raise ValueError("No grid rows found in puzzle text")
        return cls(rows)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AkariPuzzle":
        """Load a puzzle from a level-text file or a JSON file"""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Puzzle file not found: {path}")

        if path.suffix.lower() == '.json':
            with open(path, 'r') as f:
                data = json.load(f)
            rows = data['rows'] if isinstance(data, dict) else data
            if not rows:
                raise ValueError(f"No grid rows found in {path}")
            return cls(rows)

        with open(path, 'r') as f:
            return cls.from_text(f.read())

    def symbol_at(self, row: int, col: int) -> CellSymbol:
        return self.grid[row][col]

    def is_open(self, row: int, col: int) -> bool:
        return self.grid[row][col].is_open

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Orthogonal in-bounds neighbours: up, down, left, right"""
        out = []
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            r, c = row + dr, col + dc
            if self.in_bounds(r, c):
                out.append((r, c))
        return out

    def open_cells(self) -> List[Tuple[int, int]]:
        """All open cells in row-major order"""
        return [(r, c) for r in range(self.height) for c in range(self.width)
                if self.grid[r][c].is_open]

    def numbered_cells(self) -> List[Tuple[int, int, int]]:
        """All numbered cells as (row, col, target) in row-major order"""
        out = []
        for r in range(self.height):
            for c in range(self.width):
                n = self.grid[r][c].number
                if n is not None:
                    out.append((r, c, n))
        return out

    def to_rows(self) -> List[List[str]]:
        return [[sym.value for sym in row] for row in self.grid]

    def __str__(self):
        return "\n".join(" ".join(row) for row in self.to_rows())

    def __repr__(self):
        return (f"AkariPuzzle({self.height}x{self.width}, open={len(self.open_cells())}, "
                f"numbered={len(self.numbered_cells())})")
