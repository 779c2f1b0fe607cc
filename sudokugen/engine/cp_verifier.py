"""Exhaustive solution counting with OR-Tools CP-SAT.

Used as an independent oracle next to the propagation solver: it proves
whether a puzzle has exactly one completion instead of sampling alternatives.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ortools.sat.python import cp_model

from ..core.models import CellLoc, all_regions, region_cells
from ..utils.logger import get_logger
from .board import Board

LOGGER = get_logger(__name__)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Counts solutions and stops the search once ``limit`` is reached."""

    def __init__(self, cell_vars: Dict[CellLoc, cp_model.IntVar], limit: int) -> None:
        super().__init__()
        self._cell_vars = cell_vars
        self._limit = limit
        self.count = 0
        self.first_solution: Optional[Dict[CellLoc, int]] = None

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.first_solution is None:
            self.first_solution = {cell: self.value(var) for cell, var in self._cell_vars.items()}
        if self.count >= self._limit:
            self.stop_search()


def _build_model(board: Board):
    model = cp_model.CpModel()
    cell_vars: Dict[CellLoc, cp_model.IntVar] = {}
    for cell in board.iter_cells():
        given = board.get(cell)
        if given is None:
            cell_vars[cell] = model.new_int_var(1, board.side, f"c_{cell.line}_{cell.col}")
        else:
            cell_vars[cell] = model.new_int_var(given, given, f"g_{cell.line}_{cell.col}")

    for region in all_regions(board.base_size):
        members: List[cp_model.IntVar] = [
            cell_vars[cell] for cell in region_cells(region, board.base_size)
        ]
        model.add_all_different(members)
    return model, cell_vars


def count_solutions(board: Board, limit: int = 2, timeout: float = 30.0) -> int:
    """Count completions of ``board``, stopping once ``limit`` are found.

    A search that times out before the count is settled reports ``limit``,
    so an undecided run never passes for a unique one.
    """

    model, cell_vars = _build_model(board)
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1
    solver.parameters.max_time_in_seconds = timeout

    counter = _SolutionCounter(cell_vars, limit)
    status = solver.solve(model, counter)
    if status == cp_model.UNKNOWN and counter.count < limit:
        LOGGER.warning(
            "CP-SAT: solution count undecided after %.1fs (%d found)", timeout, counter.count
        )
        return limit
    LOGGER.debug(
        "CP-SAT: %d solution(s) found (status=%s, %.2fs)",
        counter.count, solver.status_name(status), solver.wall_time,
    )
    return counter.count


def has_unique_solution(board: Board, timeout: float = 30.0) -> bool:
    return count_solutions(board, limit=2, timeout=timeout) == 1


def cp_solve(board: Board, timeout: float = 30.0) -> Optional[Board]:
    """Solve ``board`` with CP-SAT, returning a solved copy or None."""

    model, cell_vars = _build_model(board)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    status = solver.solve(model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.debug("CP-SAT: no solution (status=%s)", solver.status_name(status))
        return None

    solved = board.copy()
    for cell, var in cell_vars.items():
        solved.set(cell, solver.value(var))
    return solved
