"""Cell locations, regions and the board geometry derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Tuple

from .constants import REGION_ORDINALS, RegionKind


@dataclass(frozen=True, order=True)
class CellLoc:
    """A cell addressed by its linear index on a board of the given base size."""

    idx: int
    base_size: int

    @classmethod
    def at(cls, line: int, col: int, base_size: int) -> "CellLoc":
        side = base_size ** 2
        if not (0 <= line < side and 0 <= col < side):
            raise IndexError(f"Cell ({line},{col}) outside a {side}x{side} board")
        return cls(line * side + col, base_size)

    @property
    def side(self) -> int:
        return self.base_size ** 2

    @property
    def line(self) -> int:
        return self.idx // self.side

    @property
    def col(self) -> int:
        return self.idx % self.side

    @property
    def square(self) -> int:
        return (self.line // self.base_size) * self.base_size + self.col // self.base_size

    def iter_line(self) -> Iterator["CellLoc"]:
        return iter(region_cells(Region(RegionKind.LINE, self.line), self.base_size))

    def iter_col(self) -> Iterator["CellLoc"]:
        return iter(region_cells(Region(RegionKind.COLUMN, self.col), self.base_size))

    def iter_square(self) -> Iterator["CellLoc"]:
        return iter(region_cells(Region(RegionKind.SQUARE, self.square), self.base_size))

    def regions(self) -> Tuple["Region", "Region", "Region"]:
        return cell_regions(self.idx, self.base_size)

    def peers(self) -> Tuple["CellLoc", ...]:
        """Cells sharing a line, column or square with this one, excluding itself."""
        return cell_peers(self.idx, self.base_size)

    def __str__(self) -> str:
        return f"({self.line},{self.col})"


@dataclass(frozen=True, order=True)
class Region:
    """A line, column or square of the board."""

    kind: RegionKind
    number: int

    def dense_index(self, side: int) -> int:
        return REGION_ORDINALS[self.kind] * side + self.number

    def __str__(self) -> str:
        return f"{self.kind.value.lower()} {self.number}"


@lru_cache(maxsize=None)
def region_cells(region: Region, base_size: int) -> Tuple[CellLoc, ...]:
    """All cells of a region, in linear index order."""

    side = base_size ** 2
    if not 0 <= region.number < side:
        raise IndexError(f"{region} outside a {side}x{side} board")
    if region.kind == RegionKind.LINE:
        start = region.number * side
        return tuple(CellLoc(idx, base_size) for idx in range(start, start + side))
    if region.kind == RegionKind.COLUMN:
        return tuple(CellLoc(line * side + region.number, base_size) for line in range(side))
    top = (region.number // base_size) * base_size
    left = (region.number % base_size) * base_size
    return tuple(
        CellLoc(line * side + col, base_size)
        for line in range(top, top + base_size)
        for col in range(left, left + base_size)
    )


@lru_cache(maxsize=None)
def cell_regions(idx: int, base_size: int) -> Tuple[Region, Region, Region]:
    cell = CellLoc(idx, base_size)
    if not 0 <= idx < cell.side ** 2:
        raise IndexError(f"Cell index {idx} outside a {cell.side}x{cell.side} board")
    return (
        Region(RegionKind.LINE, cell.line),
        Region(RegionKind.COLUMN, cell.col),
        Region(RegionKind.SQUARE, cell.square),
    )


@lru_cache(maxsize=None)
def cell_peers(idx: int, base_size: int) -> Tuple[CellLoc, ...]:
    seen = set()
    peers = []
    for region in cell_regions(idx, base_size):
        for cell in region_cells(region, base_size):
            if cell.idx == idx or cell.idx in seen:
                continue
            seen.add(cell.idx)
            peers.append(cell)
    return tuple(peers)


def all_regions(base_size: int) -> Iterator[Region]:
    side = base_size ** 2
    for kind in RegionKind:
        for number in range(side):
            yield Region(kind, number)
