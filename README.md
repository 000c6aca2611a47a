# lasrkit

Pure Python building blocks for working with airborne and terrestrial point clouds. It provides regular grids, grouping of point indices, packed point records with typed attributes, file headers, attribute filters, in-memory rasters, and a parser for pipelines drawn in the Drawflow editor.

## Modules

### `lasrkit.grid`

- `Grid(xmin, ymin, xmax, ymax, res)` builds a north-up grid. Its extent is snapped to multiples of `res` so that it covers the bounding box. Cells are numbered row by row from the top-left corner.
- `Grid.from_dimensions(xmin, ymin, xmax, ymax, nrows, ncols)` builds a grid that spans exactly the given extent with the given shape.
- Coordinate and cell conversions:
  - `cell_from_xy` returns `None` when the point is outside the grid.
  - `row_from_cell`, `col_from_cell` and `cell_from_row_col`.
  - `x_from_col`, `y_from_row`, `x_from_cell` and `y_from_cell` give cell centres.
- `adjacent_cells(cell, contiguity)` uses `Contiguity.ROOK` (4 neighbours) or `Contiguity.QUEEN` (8 neighbours, the default).
- `four_local_neighbours(x, y)` returns the four cells used for bilinear interpolation, with `None` for cells outside the grid. It also returns the quadrant of the cell that the point lies in.
- `cells_in(xmin, ymin, xmax, ymax)` lists the cells that a bounding box touches.
- `Voxel` is a hashable `(i, j, k)` triple.

### `lasrkit.grouper`

`Grouper` records point indices under integer keys as runs of consecutive indices (`Interval`, inclusive at both ends, and `len()` gives its size).

- `insert(key)` registers the next point under one key.
- `insert_many(keys)` registers the next point under several keys.
- `largest_group_size()` returns the number of points in the most populated group.
- `clear()` empties the grouper.
- The runs are available in `groups`.

### `lasrkit.schema`

- `AttributeType` lists the storage types, from `UINT8` to `DOUBLE`.
- `Attribute` is a named, typed, scaled field, and `type_name()` gives its C-like type name.
- `AttributeSchema` lays attributes out back to back:
  - `add_attribute` and `new_attribute` append one,
  - `find_attribute`, `has_attribute` and `attribute_index` look one up,
  - `total_point_size` is the size of a record in bytes.
- `Point(schema, data=None, offset=0)` is a record.
  - Without `data` it owns a zeroed buffer. Otherwise it is a view into `data` at `offset`.
  - The first four attributes of the schema are taken as the flags, X, Y and Z.
  - `x`, `y` and `z` give the scaled coordinates, and `X`, `Y` and `Z` give the raw integers.
  - `deleted` and `buffered` are flag bits 0 and 1.
  - `attribute_as_double(index)` reads any attribute.
  - `outside_clip(...)` tests the point against a box, or the circle inscribed in it.
- `AttributeAccessor(name)` reads and writes an attribute by name.
  - The name is resolved on first use.
  - Written values are rounded and clamped to the storage type.
  - Reading a missing attribute gives the default value.
- `map_attribute` turns aliases such as `"i"`, `"intensity"` or `"class"` into standard names.

### `lasrkit.header`

`Header` is a dataclass that holds:

- the bounding box,
- the scale factors and offsets,
- the point count,
- the schema,
- the GPS time of the first point,
- the file creation date.

Its methods:

- `add_attribute` appends an attribute to the schema.
- `gpstime_date()` returns `(year, zero-based day of year)` from adjusted standard GPS time. In any other case it returns `(0, 0)`.
- `describe()` returns a text summary.

### `lasrkit.raster`

`Raster(xmin, ymin, xmax, ymax, res, layers=1)` is a grid with float32 values for each cell and each band.

- Values are allocated on first write. A missing value is NaN or equal to `nodata` (NaN by default).
- Reading values:
  - `value(cell, layer)` and `value_at(x, y, layer)`.
  - `value_bilinear(x, y, layer)` interpolates from the four nearest cell centres and skips missing values.
- Writing values: `set_value` and `set_value_at`. Cells outside the raster are ignored.
- Bands: `set_nbands` changes the number of bands.
- Chunks:
  - `set_chunk(xmin, ymin, xmax, ymax, buffer, circular)` lays the raster over a chunk plus a buffer given in map units and stored in pixels, then resets the values.
  - `with_chunk(...)` returns an empty raster with the same bands over a chunk.
- `copy_data(other)` copies values from a raster of the same size. It raises `ValueError` when the sizes differ.
- `focal(size, operation)` applies a function over a circular moving window.

### `lasrkit.pointfilter`

`parse_condition(text)` turns expressions into `Condition` objects. Examples of expressions are `"Z > 2"`, `"Classification %in% 2 9"`, `"Intensity %between% 10 200"` and `"c != 7"`.

- Supported operators: `==`, `!=`, `>`, `>=`, `<`, `<=`, `%in%`, `%out%` and `%between%`.
- An empty expression, or one that starts with `-`, gives `None`.
- A missing operator or a bad value raises `ValueError`.

The condition classes are `KeepEqual`, `KeepDifferent`, `KeepAbove`, `KeepAboveEqual`, `KeepBelow`, `KeepBelowEqual`, `KeepBetween`, `KeepIn`, `KeepOut` and `KeepInside`.

`PointFilter` combines conditions. `filter(point)` returns `True` when any condition drops the point. To add conditions, use `add_condition`, `add_expression` or `add_clip`.

### `lasrkit.ram`

`available_ram()` and `total_ram()` report the machine's memory in megabytes (10**6 bytes). They use `psutil`.

### `lasrkit.drawflow`

`parse_drawflow(document)` takes a Drawflow export, already loaded as a dict. It returns `{"processing": ..., "pipeline": [...]}`.

- Stages are sorted so that each one comes after the stages that feed it.
- Numeric strings become floats, and `"true"` and `"false"` become booleans.
- A stage with more than one input gets a `"connect"` entry.
- A missing part of the document raises `ValueError`.
- `convert_value` and `is_number` are the helpers it uses.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from lasrkit.grid import Grid
from lasrkit.pointfilter import PointFilter
from lasrkit.schema import AttributeSchema, AttributeType, Point

grid = Grid(0, 0, 100, 100, 10)
cell = grid.cell_from_xy(25, 75)
print(grid.x_from_cell(cell), grid.y_from_cell(cell))

schema = AttributeSchema()
schema.new_attribute("Flags", AttributeType.UINT8)
schema.new_attribute("X", AttributeType.INT32, 0.01)
schema.new_attribute("Y", AttributeType.INT32, 0.01)
schema.new_attribute("Z", AttributeType.INT32, 0.01)
schema.new_attribute("Intensity", AttributeType.UINT16)

point = Point(schema)
point.x, point.y, point.z = 10.5, 20.5, 1.5

keep_high = PointFilter()
keep_high.add_expression("Z > 2")
print(keep_high.filter(point))  # True: the point is dropped
```

## What this package does not do

This package does not read or write point cloud files (LAS, LAZ, PCD, virtual point cloud) or raster files. Headers, points and rasters exist only in memory. It has no container that stores points with a spatial index, no neighbour search, no metric computation on groups of points, and no profiler. It has no command-line program.