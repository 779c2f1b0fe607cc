"""Shared constants and enumerations for the sudoku solver and generator."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class BoardSize(int, Enum):
    """Supported board sizes, valued by their base size."""

    FOUR_BY_FOUR = 2
    NINE_BY_NINE = 3
    SIXTEEN_BY_SIXTEEN = 4
    TWENTY_FIVE_BY_TWENTY_FIVE = 5

    @property
    def base_size(self) -> int:
        return int(self.value)

    @property
    def side(self) -> int:
        return self.value ** 2


class RegionKind(str, Enum):
    """The three kinds of region every cell belongs to."""

    LINE = "LINE"
    COLUMN = "COLUMN"
    SQUARE = "SQUARE"


class Strategy(str, Enum):
    """How a move in the solver's log was produced."""

    NAKED_SINGLE = "NAKED_SINGLE"
    HIDDEN_SINGLE = "HIDDEN_SINGLE"
    GUESS = "GUESS"

    @property
    def is_forced(self) -> bool:
        return self is not Strategy.GUESS


REGION_ORDINALS: Dict[RegionKind, int] = {
    RegionKind.LINE: 0,
    RegionKind.COLUMN: 1,
    RegionKind.SQUARE: 2,
}

# Characters used for cell values, index 0 is value 1.
VALUE_ALPHABET = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
EMPTY_SYMBOLS = frozenset(".0")
LAYOUT_SYMBOLS = frozenset("|-+")
MAX_BASE_SIZE = 5
