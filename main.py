"""CLI entrypoint for the sudoku solver and generator."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from sudokugen.core.exceptions import BoardParseError, UnsolvableError
from sudokugen.engine.board import Board
from sudokugen.engine.cp_verifier import has_unique_solution
from sudokugen.engine.generator import GeneratorConfig, PuzzleGenerator
from sudokugen.engine.puzzle_store import PuzzleStore
from sudokugen.engine.solver import SudokuSolver
from sudokugen.utils.logger import configure_logging, resolve_level
from sudokugen.utils.pretty import format_board, print_puzzle_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve and generate sudoku puzzles")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Solve a puzzle")
    solve_parser.add_argument(
        "board",
        nargs="?",
        help="Board as text, '.' for empty cells; separators and whitespace are ignored",
    )
    solve_parser.add_argument("--file", type=Path, help="Read the board from a file")
    solve_parser.add_argument(
        "--format",
        choices=["grid", "line"],
        default="grid",
        help="Output format for the solved board",
    )
    solve_parser.add_argument("--output", type=Path, help="Optional path to JSON output")

    gen_parser = subparsers.add_parser("generate", help="Generate new puzzles")
    gen_parser.add_argument(
        "--base-size",
        type=int,
        default=3,
        help="Square size; 3 gives the classic 9x9 board",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    gen_parser.add_argument("--count", type=int, default=1, help="Number of puzzles to generate")
    gen_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum parallel trial solves (default: one per trial)",
    )
    gen_parser.add_argument(
        "--verify",
        action="store_true",
        help="Check uniqueness exhaustively with CP-SAT in addition to the guess probe",
    )
    gen_parser.add_argument(
        "--store",
        type=Path,
        metavar="DIR",
        help="Save each puzzle as a JSON document in DIR",
    )
    gen_parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    return parser


def read_board(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Board:
    if args.file and args.board:
        parser.error("pass either a board string or --file, not both")
    if args.file:
        text = args.file.read_text(encoding="utf-8")
    elif args.board:
        text = args.board
    else:
        text = sys.stdin.read()
    try:
        return Board.parse(text)
    except BoardParseError as exc:
        parser.error(str(exc))
        raise  # pragma: no cover


def run_solve(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    board = read_board(args, parser)
    puzzle_line = board.to_line()
    solver = SudokuSolver(board)
    try:
        solver.solve()
    except UnsolvableError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.output:
        payload: Dict[str, Any] = {
            "board": puzzle_line,
            "solution": board.to_line(),
            "stats": {
                "naked_singles": solver.stats.naked_singles,
                "hidden_singles": solver.stats.hidden_singles,
                "guesses": solver.stats.guesses,
                "backtracks": solver.stats.backtracks,
            },
        }
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    elif args.format == "line":
        print(board.to_line())
    else:
        print(format_board(board))
    return 0


def run_generate(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if not 2 <= args.base_size <= 5:
        parser.error("--base-size must be between 2 and 5")
    if args.count < 1:
        parser.error("--count must be positive")

    store = PuzzleStore(args.store) if args.store else None
    config = GeneratorConfig(base_size=args.base_size, seed=args.seed, max_workers=args.workers)
    generator = PuzzleGenerator(config)

    payload: List[Dict[str, Any]] = []
    for _ in range(args.count):
        puzzle = generator.generate()
        unique = puzzle.is_solution_unique(max_workers=args.workers)
        if args.verify:
            unique = unique and has_unique_solution(puzzle.board)

        entry = puzzle.to_dict()
        entry["unique"] = unique
        if store is not None:
            entry["id"] = store.save(puzzle, unique=unique)
        payload.append(entry)
        if not args.output:
            print_puzzle_stats(puzzle, unique=unique)
            print()

    if args.output:
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(resolve_level(args.log_level))

    if args.command == "solve":
        return run_solve(args, parser)
    return run_generate(args, parser)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
