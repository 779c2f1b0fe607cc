"""Custom exception hierarchy for solving and generating sudoku puzzles."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import CellLoc


class SudokuError(Exception):
    """Base exception for solver and generator failures."""


class UnsolvableError(SudokuError):
    """Raised when the board admits no valid completion."""

    def __init__(self, message: str = "The board has no solution") -> None:
        super().__init__(message)


class NoCandidatesLeftError(SudokuError):
    """Raised by the candidate cache when a placement empties a cell's candidates."""

    def __init__(self, cell: "CellLoc") -> None:
        super().__init__(f"No candidates left for cell {cell}")
        self.cell = cell


class BoardParseError(SudokuError):
    """Raised when a textual board cannot be parsed."""


class ValidationError(SudokuError):
    """Raised when a board fails an integrity check."""


class GenerationError(SudokuError):
    """Raised when puzzle generation reaches an impossible state."""
