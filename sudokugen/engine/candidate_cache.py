"""Incremental candidate bookkeeping with reversible single-cell assignment.

The cache keeps two derived indexes over a board snapshot:

- ``possible_values``: for every empty cell, the values it can still take.
- ``candidate_cells``: for every ``(region, value)`` pair, the cells of that
  region where the value can still go.

Between two completed moves ``v in possible_values[c]`` holds exactly when
``c in candidate_cells[(r, v)]`` for every region ``r`` containing ``c``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, List, Optional, Set, Tuple

from ..core.exceptions import NoCandidatesLeftError
from ..core.models import CellLoc, Region
from ..utils.logger import get_logger
from .board import Board
from .indexed_map import IndexedMap


LOGGER = get_logger(__name__)

RegionValue = Tuple[Region, int]


@dataclass
class UndoSetValue:
    """Everything a :meth:`CandidateCache.set_value` call removed from the cache."""

    cell: CellLoc
    options: Set[int]
    moves: List[Tuple[int, CellLoc, Region]] = field(default_factory=list)
    affected_cell_options: List[Tuple[CellLoc, int]] = field(default_factory=list)
    consumed: bool = field(default=False, compare=False)

    @property
    def alternative_options(self) -> FrozenSet[int]:
        """The candidates the cell had when the value was placed."""
        return frozenset(self.options)


class CandidateCache:
    """Per-cell candidate values and per-(region, value) candidate cells."""

    def __init__(self, base_size: int) -> None:
        self.base_size = base_size
        self.side = base_size ** 2
        side = self.side
        self._possible_values: IndexedMap[CellLoc, Set[int]] = IndexedMap(side ** 2)
        self._candidate_cells: IndexedMap[RegionValue, Set[CellLoc]] = IndexedMap(
            3 * side * side,
            index_of=lambda key: key[0].dense_index(side) * side + key[1] - 1,
        )

    @classmethod
    def from_board(cls, board: Board) -> "CandidateCache":
        cache = cls(board.base_size)
        for cell in board.iter_cells():
            values = board.possible_values(cell)
            if values is not None:
                cache._possible_values.insert(cell, values)

        for cell, values in cache._possible_values.items():
            for value in sorted(values):
                cache._add_candidate(value, cell)
        return cache

    build = from_board

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def possible_values(self) -> IndexedMap[CellLoc, Set[int]]:
        return self._possible_values

    def candidates_at(self, region: Region, value: int) -> Optional[Set[CellLoc]]:
        return self._candidate_cells.get((region, value))

    def open_cells(self) -> List[CellLoc]:
        return list(self._possible_values.keys())

    def iter_candidates(self) -> Iterator[Tuple[Region, int, Set[CellLoc]]]:
        for (region, value), cells in self._candidate_cells.items():
            yield region, value, cells

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_value(self, value: int, cell: CellLoc) -> UndoSetValue:
        """Place ``value`` at ``cell`` and return the token that reverts it.

        Raises :class:`NoCandidatesLeftError` when the placement leaves a peer
        without candidates; the cache is rolled back before raising. The board
        itself is not touched.
        """

        options = self._possible_values.get(cell)
        if options is None or value not in options:
            raise NoCandidatesLeftError(cell)

        self._possible_values.remove(cell)
        undo = UndoSetValue(cell=cell, options=options)
        moves = undo.moves

        # The value is settled in each of the cell's regions.
        for region in cell.regions():
            dropped = self._candidate_cells.remove((region, value))
            if dropped is not None:
                moves.extend((value, candidate, region) for candidate in dropped)

            for other_value in options:
                if other_value == value:
                    continue
                cells = self._candidate_cells.get((region, other_value))
                if cells is not None and cell in cells:
                    cells.remove(cell)
                    moves.append((other_value, cell, region))

        for peer in cell.peers():
            values = self._possible_values.get(peer)
            if values is None:
                continue

            if value in values:
                values.remove(value)
                undo.affected_cell_options.append((peer, value))
                for region in peer.regions():
                    cells = self._candidate_cells.get((region, value))
                    if cells is not None and peer in cells:
                        cells.remove(peer)
                        moves.append((value, peer, region))

            if not values:
                self._revert(undo)
                raise NoCandidatesLeftError(peer)

        return undo

    def undo(self, token: UndoSetValue) -> None:
        if token.consumed:
            raise ValueError(f"Undo token for cell {token.cell} was already consumed")
        self._revert(token)

    def _revert(self, token: UndoSetValue) -> None:
        token.consumed = True
        self._possible_values.insert(token.cell, token.options)

        for peer, value in token.affected_cell_options:
            self._possible_values.setdefault(peer, set).add(value)

        for value, cell, region in token.moves:
            self._candidate_cells.setdefault((region, value), set).add(cell)

    def remove_candidate(self, value: int, cell: CellLoc) -> None:
        """Rule ``value`` out at ``cell`` without placing anything."""

        options = self._possible_values.get(cell)
        if options is None or value not in options:
            return
        options.remove(value)
        for region in cell.regions():
            cells = self._candidate_cells.get((region, value))
            if cells is not None:
                cells.discard(cell)

    def reset_candidates(self, cell: CellLoc, values: Set[int]) -> Optional[Set[int]]:
        """Reinstall ``values`` as the full candidate set of an emptied cell."""

        for value in sorted(values):
            self._add_candidate(value, cell)
        return self._possible_values.insert(cell, set(values))

    def _add_candidate(self, value: int, cell: CellLoc) -> None:
        for region in cell.regions():
            self._candidate_cells.setdefault((region, value), set).add(cell)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def check_consistency(self) -> List[str]:
        """List every place where the two indexes disagree."""

        problems: List[str] = []
        for cell, values in self._possible_values.items():
            for value in values:
                for region in cell.regions():
                    cells = self._candidate_cells.get((region, value))
                    if cells is None or cell not in cells:
                        problems.append(
                            f"{value} is possible at {cell} but the cell is missing from {region}"
                        )
        for (region, value), cells in self._candidate_cells.items():
            for cell in cells:
                values = self._possible_values.get(cell)
                if values is None or value not in values:
                    problems.append(
                        f"{cell} is a candidate for {value} in {region} but {value} is not possible there"
                    )
        return problems

    def copy(self) -> "CandidateCache":
        clone = CandidateCache(self.base_size)
        clone._possible_values = self._possible_values.copy(set)
        clone._candidate_cells = self._candidate_cells.copy(set)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateCache):
            return NotImplemented
        return (
            self.base_size == other.base_size
            and self._possible_values == other._possible_values
            and self._candidate_cells == other._candidate_cells
        )

    def __repr__(self) -> str:
        return (
            f"CandidateCache(open_cells={len(self._possible_values)}, "
            f"candidate_buckets={len(self._candidate_cells)})"
        )
