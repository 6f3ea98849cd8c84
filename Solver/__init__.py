"""
Akari (Light Up) Puzzle Solver Package

Constraint propagation with trail-based backtracking for Akari puzzles.
"""

from .puzzle import AkariPuzzle, CellSymbol, parse_level_text
from .constraints import ConstraintIndex, ConstraintChecker, Segment, NumConstraint
from .propagation import PropagationEngine, CellState, Mutation
from .solver import AkariSolver, solve_puzzle_rows
from .output import SolutionFormatter

__version__ = "1.0.0"
__all__ = [
    'AkariPuzzle',
    'CellSymbol',
    'parse_level_text',
    'ConstraintIndex',
    'ConstraintChecker',
    'Segment',
    'NumConstraint',
    'PropagationEngine',
    'CellState',
    'Mutation',
    'AkariSolver',
    'solve_puzzle_rows',
    'SolutionFormatter'
]
