"""Board representation, parsing and formatting helpers."""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Set, Union

from ..core.constants import (
    EMPTY_SYMBOLS,
    LAYOUT_SYMBOLS,
    MAX_BASE_SIZE,
    VALUE_ALPHABET,
    BoardSize,
)
from ..core.exceptions import BoardParseError
from ..core.models import CellLoc
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class Board:
    """Fixed-size grid of optional cell values addressed by :class:`CellLoc`."""

    def __init__(self, base_size: Union[int, BoardSize] = BoardSize.NINE_BY_NINE) -> None:
        base_size = int(base_size)
        if not 1 < base_size <= MAX_BASE_SIZE:
            raise ValueError(f"Unsupported base size {base_size}")
        self.base_size = base_size
        self.side = base_size ** 2
        self._values: List[Optional[int]] = [None] * (self.side ** 2)

    @classmethod
    def new(cls, board_size: Union[int, BoardSize]) -> "Board":
        return cls(board_size)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, cell: CellLoc) -> Optional[int]:
        return self._values[self._index(cell)]

    def get_at(self, line: int, col: int) -> Optional[int]:
        return self.get(self.cell_at(line, col))

    def set(self, cell: CellLoc, value: int) -> Optional[int]:
        """Write ``value`` into ``cell`` and return the previous value."""

        if not 1 <= value <= self.side:
            raise ValueError(f"Value {value} outside 1..{self.side}")
        idx = self._index(cell)
        previous = self._values[idx]
        self._values[idx] = value
        return previous

    def unset(self, cell: CellLoc) -> Optional[int]:
        idx = self._index(cell)
        previous = self._values[idx]
        self._values[idx] = None
        return previous

    def cell_at(self, line: int, col: int) -> CellLoc:
        return CellLoc.at(line, col, self.base_size)

    def iter_cells(self) -> Iterator[CellLoc]:
        for idx in range(self.side ** 2):
            yield CellLoc(idx, self.base_size)

    def _index(self, cell: CellLoc) -> int:
        if cell.base_size != self.base_size or not 0 <= cell.idx < len(self._values):
            raise IndexError(f"Cell {cell!r} does not belong to a {self.side}x{self.side} board")
        return cell.idx

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def possible_values(self, cell: CellLoc) -> Optional[Set[int]]:
        """Values not yet used in the cell's line, column or square.

        Returns ``None`` when the cell is already filled.
        """

        if self.get(cell) is not None:
            return None
        options = set(range(1, self.side + 1))
        for peer in cell.peers():
            value = self._values[peer.idx]
            if value is not None:
                options.discard(value)
        return options

    def givens(self) -> List[CellLoc]:
        return [cell for cell in self.iter_cells() if self._values[cell.idx] is not None]

    def is_complete(self) -> bool:
        return all(value is not None for value in self._values)

    def is_subset_of(self, other: "Board") -> bool:
        """True when every filled cell here holds the same value in ``other``."""

        if other.base_size != self.base_size:
            return False
        return all(
            value is None or value == other._values[idx]
            for idx, value in enumerate(self._values)
        )

    def copy(self) -> "Board":
        clone = Board(self.base_size)
        clone._values = list(self._values)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.base_size == other.base_size and self._values == other._values

    # ------------------------------------------------------------------
    # Parsing and formatting
    # ------------------------------------------------------------------
    @classmethod
    def parse(cls, text: str) -> "Board":
        """Parse a board, ignoring whitespace and ``|``, ``-``, ``+`` separators."""

        symbols = [ch for ch in text if not ch.isspace() and ch not in LAYOUT_SYMBOLS]
        base_size = round(math.sqrt(math.sqrt(len(symbols)))) if symbols else 0
        if base_size < 2 or base_size ** 4 != len(symbols):
            raise BoardParseError(
                f"Board definition has {len(symbols)} cells, expected a fourth power"
            )
        if base_size > MAX_BASE_SIZE:
            raise BoardParseError(f"Boards with base size {base_size} are not supported")

        board = cls(base_size)
        for idx, symbol in enumerate(symbols):
            if symbol in EMPTY_SYMBOLS:
                continue
            value = VALUE_ALPHABET.find(symbol.upper()) + 1
            if not 1 <= value <= board.side:
                raise BoardParseError(
                    f"Invalid symbol '{symbol}' at position {idx} for a {board.side}x{board.side} board"
                )
            board._values[idx] = value
        LOGGER.debug("Parsed %sx%s board with %d givens", board.side, board.side, len(board.givens()))
        return board

    from_string = parse

    def to_line(self) -> str:
        return "".join("." if value is None else VALUE_ALPHABET[value - 1] for value in self._values)

    def __str__(self) -> str:
        rows = []
        for line in range(self.side):
            start = line * self.side
            rows.append(
                " ".join(
                    "." if value is None else VALUE_ALPHABET[value - 1]
                    for value in self._values[start:start + self.side]
                )
            )
        return "\n".join(rows) + "\n"

    def __repr__(self) -> str:
        return f"Board({self.to_line()!r})"
