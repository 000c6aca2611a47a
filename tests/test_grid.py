import pytest

from lasrkit.grid import Contiguity, Grid, Voxel


@pytest.fixture
def grid():
    return Grid(0.5, 0.5, 9.5, 9.5, 1.0)


def test_extent_is_aligned_and_covers_input():
    g = Grid(3.2, 7.9, 41.3, 58.1, 2.0)
    assert g.xmin <= 3.2 and g.xmax >= 41.3
    assert g.ymin <= 7.9 and g.ymax >= 58.1
    assert g.xmin % 2.0 == 0 and g.ymax % 2.0 == 0
    assert g.ncols * g.xres == pytest.approx(g.xmax - g.xmin)
    assert g.nrows * g.yres == pytest.approx(g.ymax - g.ymin)
    assert g.ncells == g.ncols * g.nrows


def test_centered_extent(grid):
    assert (grid.xmin, grid.xmax) == (0.0, 10.0)
    assert grid.ncols == grid.nrows == 10


def test_cell_round_trip(grid):
    for cell in range(grid.ncells):
        x, y = grid.x_from_cell(cell), grid.y_from_cell(cell)
        assert grid.cell_from_xy(x, y) == cell
        row, col = grid.row_from_cell(cell), grid.col_from_cell(cell)
        assert grid.cell_from_row_col(row, col) == cell


def test_first_cell_is_top_left(grid):
    assert grid.cell_from_xy(grid.xmin, grid.ymax) == 0
    assert grid.x_from_cell(0) < grid.x_from_cell(1)
    assert grid.y_from_cell(0) > grid.y_from_cell(grid.ncols)


def test_edges_map_to_last_row_and_column(grid):
    assert grid.cell_from_xy(grid.xmax, grid.ymin) == grid.ncells - 1


@pytest.mark.parametrize("x,y", [(-0.1, 5), (10.1, 5), (5, -0.1), (5, 10.1)])
def test_outside_point_has_no_cell(grid, x, y):
    assert grid.cell_from_xy(x, y) is None


def test_adjacent_cells_interior(grid):
    cell = grid.cell_from_row_col(4, 4)
    queen = grid.adjacent_cells(cell)
    rook = grid.adjacent_cells(cell, Contiguity.ROOK)
    assert len(queen) == Contiguity.QUEEN
    assert len(rook) == Contiguity.ROOK
    assert set(rook) <= set(queen)
    assert cell not in queen
    assert queen == sorted(queen)


def test_adjacent_cells_corner(grid):
    queen = grid.adjacent_cells(0, Contiguity.QUEEN)
    rook = grid.adjacent_cells(0, Contiguity.ROOK)
    assert set(queen) == {1, grid.ncols, grid.ncols + 1}
    assert set(rook) == {1, grid.ncols}


def test_four_local_neighbours_bottom_right(grid):
    cell = grid.cell_from_row_col(3, 3)
    x, y = grid.x_from_cell(cell) + 0.25, grid.y_from_cell(cell) - 0.25
    neighbours, quadrant = grid.four_local_neighbours(x, y)
    assert quadrant == 0
    assert neighbours == [cell, cell + 1, cell + grid.ncols, cell + grid.ncols + 1]


def test_four_local_neighbours_top_left_at_corner(grid):
    x, y = grid.x_from_cell(0) - 0.25, grid.y_from_cell(0) + 0.25
    neighbours, quadrant = grid.four_local_neighbours(x, y)
    assert quadrant == 3
    assert neighbours == [None, None, None, 0]


@pytest.mark.parametrize("dx,dy,quadrant", [(-0.25, -0.25, 1), (0.25, 0.25, 2)])
def test_four_local_neighbours_quadrants(grid, dx, dy, quadrant):
    cell = grid.cell_from_row_col(5, 5)
    neighbours, found = grid.four_local_neighbours(grid.x_from_cell(cell) + dx, grid.y_from_cell(cell) + dy)
    assert found == quadrant
    assert cell in neighbours


def test_four_local_neighbours_outside_raises(grid):
    with pytest.raises(ValueError):
        grid.four_local_neighbours(-5, -5)


def test_cells_in_full_extent(grid):
    cells = grid.cells_in(grid.xmin, grid.ymin, grid.xmax, grid.ymax)
    assert sorted(cells) == list(range(grid.ncells))


def test_cells_in_sub_box(grid):
    cells = grid.cells_in(2.5, 2.5, 3.5, 3.5)
    for cell in cells:
        assert 2 <= grid.x_from_cell(cell) <= 4
        assert 2 <= grid.y_from_cell(cell) <= 4
    assert grid.cell_from_xy(3.0, 3.0) in cells


def test_from_dimensions():
    g = Grid.from_dimensions(10.0, 20.0, 30.0, 60.0, 8, 4)
    assert g.nrows == 8 and g.ncols == 4
    assert g.xres * g.ncols == pytest.approx(20.0)
    assert g.yres * g.nrows == pytest.approx(40.0)
    assert g.xmin == 10.0 and g.ymax == 60.0


def test_from_dimensions_rejects_empty():
    with pytest.raises(ValueError):
        Grid.from_dimensions(0, 0, 1, 1, 0, 3)


def test_invalid_resolution():
    with pytest.raises(ValueError):
        Grid(0, 0, 1, 1, 0)


def test_overflow():
    with pytest.raises(OverflowError):
        Grid(0, 0, 1e6, 1e6, 0.01)


def test_copy_is_equal_and_independent(grid):
    clone = grid.copy()
    assert clone == grid
    clone.xmin = -100.0
    assert grid.xmin != clone.xmin


def test_voxel_hash_and_equality():
    assert Voxel(1, 2, 3) == Voxel(1, 2, 3)
    assert len({Voxel(1, 2, 3), Voxel(1, 2, 3), Voxel(3, 2, 1)}) == 2
    assert Voxel() == Voxel(0, 0, 0)