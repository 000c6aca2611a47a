"""Regular 2D grids addressed by cell, row and column."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

_INT_MAX = 2**31 - 1


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _round_any(value: float, multiple: float) -> float:
    """Round ``value`` to the nearest multiple of ``multiple``."""
    return _round_half_away(value / multiple) * multiple


class Contiguity(IntEnum):
    """Neighbourhood used to find adjacent cells; the value is the neighbour count."""

    ROOK = 4
    QUEEN = 8


@dataclass(frozen=True)
class Voxel:
    """Integer coordinates of a 3D cell; hashable so it can key a dict or set."""

    i: int = 0
    j: int = 0
    k: int = 0


class Grid:
    """A north-up grid whose cells are numbered row by row from the top-left corner."""

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float, res: float) -> None:
        if res <= 0:
            raise ValueError(f"grid resolution must be positive, got {res}")
        self.xres = float(res)
        self.yres = float(res)
        self.xmin = _round_any(xmin - 0.5 * self.xres, self.xres)
        self.xmax = _round_any(xmax - 0.5 * self.xres, self.xres) + self.xres
        self.ymin = _round_any(ymin - 0.5 * self.yres, self.yres)
        self.ymax = _round_any(ymax - 0.5 * self.yres, self.yres) + self.yres
        self.ncols = _round_half_away((self.xmax - self.xmin) / self.xres)
        self.nrows = _round_half_away((self.ymax - self.ymin) / self.yres)
        self.ncells = self.ncols * self.nrows
        self._check_size()

    @classmethod
    def from_dimensions(
        cls, xmin: float, ymin: float, xmax: float, ymax: float, nrows: int, ncols: int
    ) -> "Grid":
        """Build a grid spanning exactly the given extent with the given shape."""
        if nrows <= 0 or ncols <= 0:
            raise ValueError(f"grid dimensions must be positive, got {nrows}x{ncols}")
        grid = object.__new__(cls)
        grid.xmin = float(xmin)
        grid.xmax = float(xmax)
        grid.ymin = float(ymin)
        grid.ymax = float(ymax)
        grid.xres = (xmax - xmin) / ncols
        grid.yres = (ymax - ymin) / nrows
        grid.nrows = int(nrows)
        grid.ncols = int(ncols)
        grid.ncells = grid.nrows * grid.ncols
        grid._check_size()
        return grid

    def _check_size(self) -> None:
        if self.ncells > _INT_MAX:
            raise OverflowError("integer overflow for the number of cells in this grid")

    def copy(self) -> "Grid":
        """Return a plain Grid with the same geometry."""
        grid = object.__new__(Grid)
        for name in ("xmin", "ymin", "xmax", "ymax", "xres", "yres", "nrows", "ncols", "ncells"):
            setattr(grid, name, getattr(self, name))
        return grid

    def _geometry(self) -> tuple:
        return (self.xmin, self.ymin, self.xmax, self.ymax, self.xres, self.yres, self.nrows, self.ncols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._geometry() == other._geometry()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(extent=({self.xmin}, {self.ymin}, {self.xmax}, {self.ymax}), "
            f"res=({self.xres}, {self.yres}), shape=({self.nrows}, {self.ncols}))"
        )

    def cell_from_xy(self, x: float, y: float) -> int | None:
        """Return the cell containing (x, y), or None when the point is outside."""
        if x < self.xmin or x > self.xmax or y < self.ymin or y > self.ymax:
            return None
        col = math.floor((x - self.xmin) / self.xres)
        row = math.floor((self.ymax - y) / self.yres)
        if y == self.ymin:
            row = self.nrows - 1
        if x == self.xmax:
            col = self.ncols - 1
        return self.cell_from_row_col(row, col)

    def col_from_cell(self, cell: int) -> int:
        return cell % self.ncols

    def row_from_cell(self, cell: int) -> int:
        return cell // self.ncols

    def cell_from_row_col(self, row: int, col: int) -> int:
        return row * self.ncols + col

    def x_from_col(self, col: int) -> float:
        return self.xmin + (col + 0.5) * self.xres

    def y_from_row(self, row: int) -> float:
        return self.ymax - (row + 0.5) * self.yres

    def x_from_cell(self, cell: int) -> float:
        return self.x_from_col(self.col_from_cell(cell))

    def y_from_cell(self, cell: int) -> float:
        return self.y_from_row(self.row_from_cell(cell))

    def _inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.nrows and 0 <= col < self.ncols

    def adjacent_cells(self, cell: int, contiguity: Contiguity = Contiguity.QUEEN) -> list[int]:
        """Return the cells around ``cell`` that lie inside the grid."""
        row = self.row_from_cell(cell)
        col = self.col_from_cell(cell)
        cells = []
        for i in (-1, 0, 1):
            for j in (-1, 0, 1):
                if i == 0 and j == 0:
                    continue
                if contiguity == Contiguity.ROOK and i != 0 and j != 0:
                    continue
                if self._inside(row + i, col + j):
                    cells.append(self.cell_from_row_col(row + i, col + j))
        return cells

    def four_local_neighbours(self, x: float, y: float) -> tuple[list[int | None], int]:
        """Return the four cells around (x, y) used for bilinear interpolation.

        The cells are ordered top-left, top-right, bottom-left, bottom-right; a cell
        outside the grid is None. The second item tells in which quadrant of its
        cell the point lies: 0 bottom-right, 1 bottom-left, 2 top-right, 3 top-left.
        """
        cell = self.cell_from_xy(x, y)
        if cell is None:
            raise ValueError(f"point ({x}, {y}) is outside the grid")
        col = self.col_from_cell(cell)
        row = self.row_from_cell(cell)

        right = x >= self.x_from_col(col)
        down = y <= self.y_from_row(row)

        if right and down:
            offsets, quadrant = ((0, 0), (0, 1), (1, 0), (1, 1)), 0
        elif not right and down:
            offsets, quadrant = ((0, -1), (0, 0), (1, -1), (1, 0)), 1
        elif right and not down:
            offsets, quadrant = ((-1, 0), (-1, 1), (0, 0), (0, 1)), 2
        else:
            offsets, quadrant = ((-1, -1), (-1, 0), (0, -1), (0, 0)), 3

        neighbours = [
            self.cell_from_row_col(row + dr, col + dc) if self._inside(row + dr, col + dc) else None
            for dr, dc in offsets
        ]
        return neighbours, quadrant

    def cells_in(self, xmin: float, ymin: float, xmax: float, ymax: float) -> list[int]:
        """Return the cells touched by a bounding box, column by column."""
        colmin = int((xmin - self.xmin) / self.xres)
        colmax = int((xmax - self.xmin) / self.xres)
        rowmin = int((self.ymax - ymax) / self.yres)
        rowmax = int((self.ymax - ymin) / self.yres)
        return [
            row * self.ncols + col
            for col in range(max(colmin, 0), min(colmax, self.ncols - 1) + 1)
            for row in range(max(rowmin, 0), min(rowmax, self.nrows - 1) + 1)
        ]