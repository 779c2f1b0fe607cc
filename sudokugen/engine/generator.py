"""Puzzle generation: random solve, forced-cell stripping, then minimization.

  1. Solve an empty board with randomized guesses.
  2. Clear every cell the solver deduced (naked or hidden single); only the
     guessed cells remain as givens since the rest follows from them.
  3. Drop each remaining given whose cell admits no other completable value.
  4. Re-solve the minimized board deterministically and remember, for every
     guess made on the way, which alternative values were still open.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, FrozenSet, Optional, Union

from ..core.constants import BoardSize, Strategy
from ..core.exceptions import GenerationError, UnsolvableError
from ..core.models import CellLoc
from ..utils.logger import get_logger
from .board import Board
from .solver import SudokuSolver, solve
from .trials import all_trials_fail, any_trial_succeeds


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    base_size: int = BoardSize.NINE_BY_NINE.base_size
    seed: Optional[int] = None
    max_workers: Optional[int] = None

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


class Puzzle:
    """A minimized board, its solution and the guess points of its re-solve."""

    def __init__(
        self,
        board: Board,
        solution: Board,
        guesses: Dict[CellLoc, FrozenSet[int]],
        seed: Optional[int] = None,
    ) -> None:
        self._board = board
        self._solution = solution
        self._guesses = guesses
        self.seed = seed

    @classmethod
    def generate(
        cls,
        board_size: Union[int, BoardSize] = BoardSize.NINE_BY_NINE,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ) -> "Puzzle":
        config = GeneratorConfig(base_size=int(board_size), seed=seed, max_workers=max_workers)
        return PuzzleGenerator(config).generate()

    @property
    def board(self) -> Board:
        return self._board

    @property
    def solution(self) -> Board:
        return self._solution

    @property
    def guesses(self) -> Dict[CellLoc, FrozenSet[int]]:
        return dict(self._guesses)

    @property
    def givens_count(self) -> int:
        return len(self._board.givens())

    def is_solution_unique(self, max_workers: Optional[int] = None) -> bool:
        """Probe the recorded guess alternatives for a second solution.

        Only cells that were guess points during the deterministic re-solve
        are checked, so a True result is not an exhaustive proof.
        """

        for cell, options in sorted(self._guesses.items()):
            trial = partial(_solves_with, self._board, cell)
            if any_trial_succeeds(trial, sorted(options), max_workers=max_workers):
                LOGGER.info("Alternative value at %s also solves the puzzle", cell)
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_size": self._board.base_size,
            "board": self._board.to_line(),
            "solution": self._solution.to_line(),
            "givens": self.givens_count,
            "seed": self.seed,
        }


class PuzzleGenerator:
    """Drives the solver in random mode and minimizes the result."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.rng = config.make_rng()

    def generate(self) -> Puzzle:
        board = Board(self.config.base_size)
        solver = SudokuSolver(board, rng=self.rng)
        try:
            solver.solve()
        except UnsolvableError as exc:
            raise GenerationError("An empty board must always be solvable") from exc

        forced = [move.cell for move in solver.move_log if move.strategy.is_forced]
        for cell in forced:
            board.unset(cell)
        LOGGER.info(
            "Random fill used %d guesses; cleared %d deduced cells",
            len(solver.move_log) - len(forced),
            len(forced),
        )

        remove_redundant_givens(board, max_workers=self.config.max_workers)

        solution = board.copy()
        resolver = SudokuSolver(solution)
        try:
            resolver.solve()
        except UnsolvableError as exc:
            raise GenerationError("Minimized board lost its solution") from exc

        givens = set(board.givens())
        guesses: Dict[CellLoc, FrozenSet[int]] = {}
        for move in resolver.move_log:
            if move.strategy == Strategy.GUESS and move.cell not in givens:
                guesses[move.cell] = move.undo.alternative_options - {move.value}

        LOGGER.info(
            "Generated %sx%s puzzle with %d givens (%d guess points)",
            board.side, board.side, len(givens), len(guesses),
        )
        return Puzzle(board, solution, guesses, seed=self.config.seed)


def remove_redundant_givens(board: Board, max_workers: Optional[int] = None) -> int:
    """Unset every given whose cell has no other completable value.

    Givens are visited once each, in index order, against the board as
    already minimized. Returns the number of givens removed.
    """

    removed = 0
    for cell in board.givens():
        value = board.unset(cell)
        if value is None:
            raise GenerationError(f"Given at {cell} vanished during minimization")
        alternatives = sorted((board.possible_values(cell) or set()) - {value})

        snapshot = board.copy()
        if all_trials_fail(partial(_solves_with, snapshot, cell), alternatives, max_workers=max_workers):
            removed += 1
            continue
        board.set(cell, value)

    LOGGER.debug("Minimization removed %d givens, %d remain", removed, len(board.givens()))
    return removed


def generate(
    board_size: Union[int, BoardSize] = BoardSize.NINE_BY_NINE,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> Puzzle:
    """Generate a new minimized puzzle together with its solution."""

    return Puzzle.generate(board_size, seed=seed, max_workers=max_workers)


def generate_board(board_size: Union[int, BoardSize] = BoardSize.NINE_BY_NINE) -> Board:
    return generate(board_size).board


def _solves_with(board: Board, cell: CellLoc, value: int) -> bool:
    trial_board = board.copy()
    trial_board.set(cell, value)
    try:
        solve(trial_board)
    except UnsolvableError:
        return False
    return True
