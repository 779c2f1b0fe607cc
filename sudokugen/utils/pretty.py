"""Pretty-print helpers for sudoku boards and generated puzzles."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional

from ..core.constants import VALUE_ALPHABET

if TYPE_CHECKING:
    from ..engine.board import Board
    from ..engine.generator import Puzzle


def format_board(board: Board) -> str:
    """Render a board with ``|`` and ``-`` separators between squares."""

    base = board.base_size
    lines: List[str] = []
    row_width = 0
    for line in range(board.side):
        if line and line % base == 0:
            lines.append("-" * row_width)
        chunks = []
        for start in range(0, board.side, base):
            symbols = []
            for col in range(start, start + base):
                value = board.get_at(line, col)
                symbols.append("." if value is None else VALUE_ALPHABET[value - 1])
            chunks.append(" ".join(symbols))
        row = " | ".join(chunks)
        row_width = len(row)
        lines.append(row)
    return "\n".join(lines)


def pretty_print_board(board: Board, *, label: Optional[str] = None, stream=None) -> None:
    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_board(board), file=stream)


def print_puzzle_stats(puzzle: Puzzle, *, unique: Optional[bool] = None, stream=None) -> None:
    """Print puzzle, solution and a short summary."""

    stream = stream or sys.stdout
    board = puzzle.board
    total = board.side ** 2

    pretty_print_board(board, label="Puzzle", stream=stream)
    print(file=stream)
    pretty_print_board(puzzle.solution, label="Solution", stream=stream)

    print(file=stream)
    print("--- Puzzle ---", file=stream)
    print(f"  Size:          {board.side} x {board.side} ({total} cells)", file=stream)
    print(f"  Givens:        {puzzle.givens_count} ({puzzle.givens_count / total * 100:.0f}%)", file=stream)
    print(f"  Guess points:  {len(puzzle.guesses)}", file=stream)
    if unique is not None:
        print(f"  Unique:        {'yes' if unique else 'no'}", file=stream)
    if puzzle.seed is not None:
        print(f"  Seed:          {puzzle.seed}", file=stream)
