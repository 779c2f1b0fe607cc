"""Constraint-propagation sudoku solver with chronological backtracking.

Search order on every iteration:
  1. Naked singles: cells with exactly one candidate, committed as a batch.
  2. Hidden singles: (region, value) pairs with exactly one candidate cell.
  3. Guess: the open cell with the fewest candidates.

Every committed assignment is pushed on a move log together with the undo
token from the candidate cache, so backtracking is an explicit pop loop that
only resumes at guess points.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.constants import Strategy
from ..core.exceptions import NoCandidatesLeftError, UnsolvableError
from ..core.models import CellLoc
from ..utils.logger import get_logger
from .board import Board
from .candidate_cache import CandidateCache, UndoSetValue
from .validator import find_conflicts


LOGGER = get_logger(__name__)

Move = Tuple[CellLoc, int]


@dataclass
class MoveLogEntry:
    """A committed assignment and the token that reverts it."""

    strategy: Strategy
    cell: CellLoc
    value: int
    undo: UndoSetValue


@dataclass
class SolveStats:
    naked_singles: int = 0
    hidden_singles: int = 0
    guesses: int = 0
    backtracks: int = 0

    def record(self, strategy: Strategy) -> None:
        if strategy == Strategy.NAKED_SINGLE:
            self.naked_singles += 1
        elif strategy == Strategy.HIDDEN_SINGLE:
            self.hidden_singles += 1
        else:
            self.guesses += 1


class SudokuSolver:
    """Owns the board, its candidate cache and the move log for one solve.

    Passing ``rng`` switches guessing to randomized mode: the guessed cell is
    drawn uniformly among the cells with fewest candidates and the value
    uniformly among that cell's candidates.
    """

    def __init__(self, board: Board, rng: Optional[random.Random] = None) -> None:
        self.board = board
        self.rng = rng
        self.cache = CandidateCache.from_board(board)
        self.move_log: List[MoveLogEntry] = []
        self.stats = SolveStats()

    @property
    def is_random(self) -> bool:
        return self.rng is not None

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self) -> None:
        """Fill the board in place or raise :class:`UnsolvableError`."""

        conflicts = find_conflicts(self.board)
        if conflicts:
            LOGGER.debug("Rejecting board with conflicting givens: %s", conflicts[0])
            raise UnsolvableError(f"The board has no solution: {conflicts[0]}")

        for cell, values in self.cache.possible_values.items():
            if not values:
                LOGGER.debug("Rejecting board: no candidates at %s", cell)
                raise UnsolvableError(f"The board has no solution: no candidates at {cell}")

        while not self.cache.possible_values.is_empty():
            self._solve_iteration()

        LOGGER.debug(
            "Solved with %d naked, %d hidden, %d guesses, %d backtracks",
            self.stats.naked_singles,
            self.stats.hidden_singles,
            self.stats.guesses,
            self.stats.backtracks,
        )

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    def naked_singles(self) -> List[Move]:
        return [
            (cell, next(iter(values)))
            for cell, values in self.cache.possible_values.items()
            if len(values) == 1
        ]

    def hidden_singles(self) -> List[Move]:
        singles = {
            (next(iter(cells)), value)
            for _, value, cells in self.cache.iter_candidates()
            if len(cells) == 1
        }
        return sorted(singles)

    def _choose_guess(self) -> Move:
        best: List[CellLoc] = []
        best_count = 0
        for cell, values in self.cache.possible_values.items():
            count = len(values)
            if not best or count < best_count:
                best = [cell]
                best_count = count
            elif count == best_count and self.rng is not None:
                best.append(cell)

        if self.rng is None:
            cell = best[0]
            return cell, min(self.cache.possible_values[cell])

        cell = self.rng.choice(best)
        return cell, self.rng.choice(sorted(self.cache.possible_values[cell]))

    # ------------------------------------------------------------------
    # Search loop
    # ------------------------------------------------------------------
    def _solve_iteration(self) -> None:
        naked = self.naked_singles()
        if naked:
            self._commit_batch(Strategy.NAKED_SINGLE, naked)
            return

        hidden = self.hidden_singles()
        if hidden:
            self._commit_batch(Strategy.HIDDEN_SINGLE, hidden)
            return

        cell, value = self._choose_guess()
        try:
            self._register_move(Strategy.GUESS, cell, value)
        except NoCandidatesLeftError:
            self._backtrack()

    def _commit_batch(self, strategy: Strategy, moves: List[Move]) -> None:
        for cell, value in moves:
            try:
                self._register_move(strategy, cell, value)
            except NoCandidatesLeftError as exc:
                LOGGER.debug("%s %s=%s contradicts: %s", strategy.value, cell, value, exc)
                self._backtrack()
                return

    def _register_move(self, strategy: Strategy, cell: CellLoc, value: int) -> None:
        undo = self.cache.set_value(value, cell)
        self.board.set(cell, value)
        self.move_log.append(MoveLogEntry(strategy=strategy, cell=cell, value=value, undo=undo))
        self.stats.record(strategy)

    def _undo_move(self, move: MoveLogEntry) -> None:
        self.board.unset(move.cell)
        self.cache.undo(move.undo)

    def _backtrack(self) -> CellLoc:
        """Unwind to the most recent guess that still has an untried value."""

        self.stats.backtracks += 1
        while self.move_log:
            move = self.move_log.pop()
            self._undo_move(move)
            if move.strategy.is_forced:
                continue

            cell = move.cell
            if self.cache.possible_values.get(cell):
                self.cache.remove_candidate(move.value, cell)
                for next_value in sorted(self.cache.possible_values[cell]):
                    try:
                        self._register_move(Strategy.GUESS, cell, next_value)
                    except NoCandidatesLeftError:
                        continue
                    LOGGER.debug(
                        "Backtracked to %s, trying %s (log depth %d)",
                        cell, next_value, len(self.move_log),
                    )
                    return cell

            # Every value at this guess point failed.
            options = self.board.possible_values(cell)
            self.cache.reset_candidates(cell, options or set())

        raise UnsolvableError()


def solve(board: Board, rng: Optional[random.Random] = None) -> None:
    """Solve ``board`` in place, raising :class:`UnsolvableError` when impossible."""

    SudokuSolver(board, rng=rng).solve()


def solved_copy(board: Board) -> Board:
    """Return a solved copy of ``board`` leaving the original untouched."""

    clone = board.copy()
    solve(clone)
    return clone
