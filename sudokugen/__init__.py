"""Sudoku solver and puzzle generator.

This package exposes the public API surface via:

- ``sudokugen.engine.board.Board``: parse, inspect and print a board.
- ``sudokugen.engine.solver.solve``: fill a board in place using naked and
  hidden singles plus guessing with backtracking.
- ``sudokugen.engine.generator.Puzzle``: generate a minimized puzzle with its
  solution.
"""

from .core.constants import BoardSize
from .core.exceptions import SudokuError, UnsolvableError
from .engine.board import Board
from .engine.generator import GeneratorConfig, Puzzle, PuzzleGenerator, generate, generate_board
from .engine.solver import SudokuSolver, solve, solved_copy

__all__ = [
    "Board",
    "BoardSize",
    "GeneratorConfig",
    "Puzzle",
    "PuzzleGenerator",
    "SudokuError",
    "SudokuSolver",
    "UnsolvableError",
    "generate",
    "generate_board",
    "solve",
    "solved_copy",
]

__version__ = "0.1.0"
