"""In-memory multi-band rasters laid on a regular grid."""

from __future__ import annotations

import math
from array import array
from collections.abc import Callable, Sequence

from .grid import Grid, _round_any, _round_half_away


class Raster(Grid):
    """A grid holding one float32 value per cell and per band.

    Cell values are not allocated until the first value is set. Missing values
    are NaN or equal to ``nodata``. A raster may cover a chunk extended by a
    ``buffer`` expressed in pixels.
    """

    def __init__(
        self, xmin: float, ymin: float, xmax: float, ymax: float, res: float, layers: int = 1
    ) -> None:
        super().__init__(xmin, ymin, xmax, ymax, res)
        if layers < 1:
            raise ValueError(f"a raster needs at least one band, got {layers}")
        self.extent = (self.xmin, self.ymin, self.xmax, self.ymax)
        self.buffer = 0
        self.circular = False
        self.nbands = int(layers)
        self.band_names = [""] * self.nbands
        self.nodata = math.nan
        self.data = array("f")

    def with_chunk(
        self,
        xmin: float,
        ymin: float,
        xmax: float,
        ymax: float,
        buffer: float = 0.0,
        circular: bool = False,
    ) -> "Raster":
        """Return an empty raster like this one (bands, names, nodata) covering a chunk."""
        raster = Raster(xmin, ymin, xmax, ymax, self.xres, self.nbands)
        raster.band_names = list(self.band_names)
        raster.nodata = self.nodata
        raster.set_chunk(xmin, ymin, xmax, ymax, buffer, circular)
        return raster

    def is_na(self, value: float) -> bool:
        return math.isnan(value) or value == self.nodata

    def _check_layer(self, layer: int) -> None:
        if not 1 <= layer <= self.nbands:
            raise IndexError(f"band {layer} out of range 1..{self.nbands}")

    def value(self, cell: int | None, layer: int = 1) -> float:
        """Return the value of ``cell`` in band ``layer``, or nodata when there is none."""
        self._check_layer(layer)
        if cell is None or not 0 <= cell < self.ncells or not self.data:
            return self.nodata
        return self.data[cell + (layer - 1) * self.ncells]

    def value_at(self, x: float, y: float, layer: int = 1) -> float:
        return self.value(self.cell_from_xy(x, y), layer)

    def value_bilinear(self, x: float, y: float, layer: int = 1) -> float:
        """Interpolate at (x, y) from the four nearest cell centres, ignoring missing cells."""
        cell = self.cell_from_xy(x, y)
        if cell is None:
            return self.nodata
        col = self.col_from_cell(cell)
        row = self.row_from_cell(cell)

        neighbours, quadrant = self.four_local_neighbours(x, y)
        v11, v12, v21, v22 = (self.value(n, layer) for n in neighbours)

        x_frac = abs(x - self.x_from_col(col)) / self.xres
        y_frac = abs(self.y_from_row(row) - y) / self.yres
        if quadrant in (1, 3):
            x_frac = 1 - x_frac
        if quadrant in (2, 3):
            y_frac = 1 - y_frac

        weighted = (
            (v11, (1 - x_frac) * (1 - y_frac)),
            (v12, x_frac * (1 - y_frac)),
            (v21, (1 - x_frac) * y_frac),
            (v22, x_frac * y_frac),
        )
        total = 0.0
        weight_sum = 0.0
        for v, w in weighted:
            if not self.is_na(v):
                total += v * w
                weight_sum += w

        if weight_sum > 0.0:
            return total / weight_sum
        return self.nodata

    def _allocate(self) -> None:
        self.data = array("f", [self.nodata]) * (self.nbands * self.ncells)

    def set_value(self, cell: int | None, value: float, layer: int = 1) -> None:
        """Set a cell of band ``layer``; cells outside the raster are ignored."""
        self._check_layer(layer)
        if not self.data:
            self._allocate()
        if cell is not None and 0 <= cell < self.ncells:
            self.data[cell + (layer - 1) * self.ncells] = value

    def set_value_at(self, x: float, y: float, value: float, layer: int = 1) -> None:
        self.set_value(self.cell_from_xy(x, y), value, layer)

    def set_nbands(self, nbands: int) -> None:
        """Change the number of bands, keeping names and values of the first ones."""
        if nbands < 1:
            raise ValueError(f"a raster needs at least one band, got {nbands}")
        self.band_names = (self.band_names + [""] * nbands)[:nbands]
        if self.data:
            size = nbands * self.ncells
            if size < len(self.data):
                del self.data[size:]
            else:
                self.data.extend([0.0] * (size - len(self.data)))
        self.nbands = int(nbands)

    def set_chunk(
        self,
        xmin: float,
        ymin: float,
        xmax: float,
        ymax: float,
        buffer: float = 0.0,
        circular: bool = False,
    ) -> None:
        """Re-lay the grid over a chunk plus a buffer and reset all values to nodata."""
        res = self.xres
        self.buffer = math.ceil(buffer / res)
        self.circular = bool(circular)

        self.xmin = _round_any(xmin - 0.5 * res, res)
        self.ymin = _round_any(ymin - 0.5 * res, res)
        self.xmax = _round_any(xmax - 0.5 * res, res) + res
        self.ymax = _round_any(ymax - 0.5 * self.yres, self.yres) + self.yres

        pad = self.buffer * res
        self.xmin -= pad
        self.ymin -= pad
        self.xmax += pad
        self.ymax += pad

        self.ncols = _round_half_away((self.xmax - self.xmin) / res)
        self.nrows = _round_half_away((self.ymax - self.ymin) / self.yres)
        self.ncells = self.ncols * self.nrows
        self._check_size()
        self._allocate()

    def copy_data(self, other: "Raster") -> None:
        """Copy the values of a raster with the same number of cells and bands."""
        if self.ncells != other.ncells or self.nbands != other.nbands:
            raise ValueError("incompatible raster for copy")
        self.data = array("f", other.data)

    def focal(self, size: float, operation: Callable[[Sequence[float]], float]) -> None:
        """Replace each cell by ``operation`` over the values in a circular window."""
        psize = math.ceil(size / self.xres)
        square_radius = (size / 2.0) ** 2
        if square_radius < self.xres / 2:
            square_radius = (self.xres / 2) ** 2

        result = array("f", [self.nodata]) * len(self.data)
        if not self.data:
            return

        for band in range(1, self.nbands + 1):
            base = (band - 1) * self.ncells
            for cell in range(self.ncells):
                center_row = self.row_from_cell(cell)
                center_col = self.col_from_cell(cell)
                values = []
                for row in range(max(0, center_row - psize), min(self.nrows, center_row + psize)):
                    for col in range(max(0, center_col - psize), min(self.ncols, center_col + psize)):
                        val = self.value(self.cell_from_row_col(row, col), band)
                        if self.is_na(val):
                            continue
                        square_dist = ((row - center_row) * self.yres) ** 2 + ((col - center_col) * self.xres) ** 2
                        if square_dist <= square_radius:
                            values.append(val)
                if values:
                    result[base + cell] = operation(values)

        self.data = result