"""Deterministic rule validation for sudoku boards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.exceptions import ValidationError
from ..core.models import all_regions, region_cells
from ..utils.logger import get_logger
from .board import Board


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


def find_conflicts(board: Board) -> List[str]:
    """Describe every value that appears twice in one line, column or square."""

    conflicts: List[str] = []
    for region in all_regions(board.base_size):
        seen: Dict[int, str] = {}
        for cell in region_cells(region, board.base_size):
            value = board.get(cell)
            if value is None:
                continue
            if value in seen:
                conflicts.append(f"Value {value} repeated in {region} at {seen[value]} and {cell}")
            else:
                seen[value] = str(cell)
    return conflicts


class BoardValidator:
    """Runs integrity checks over a board, optionally against a reference solution."""

    def validate(
        self,
        board: Board,
        reference: Optional[Board] = None,
        require_complete: bool = False,
    ) -> ValidationResult:
        try:
            self._check_no_duplicates(board)
            if require_complete:
                self._check_complete(board)
            if reference is not None:
                self._check_matches_reference(board, reference)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def is_valid_solution(self, board: Board) -> bool:
        return self.validate(board, require_complete=True).ok

    @staticmethod
    def _check_no_duplicates(board: Board) -> None:
        conflicts = find_conflicts(board)
        if conflicts:
            raise ValidationError(conflicts[0])

    @staticmethod
    def _check_complete(board: Board) -> None:
        for cell in board.iter_cells():
            if board.get(cell) is None:
                raise ValidationError(f"Cell {cell} is empty")

    @staticmethod
    def _check_matches_reference(board: Board, reference: Board) -> None:
        if board.base_size != reference.base_size:
            raise ValidationError(
                f"Board size {board.side} does not match reference size {reference.side}"
            )
        for cell in board.iter_cells():
            value = board.get(cell)
            if value is not None and value != reference.get(cell):
                raise ValidationError(
                    f"Cell {cell} holds {value} but the reference holds {reference.get(cell)}"
                )
