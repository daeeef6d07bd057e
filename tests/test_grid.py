import pytest

from arcsynth.grid import (
    Object,
    connected_components,
    connected_components_8,
    count_objects,
    detect_period_h,
    detect_period_v,
    distance_between,
    grid_dimensions,
    is_above,
    is_adjacent,
    is_below,
    is_inside,
    is_left_of,
    is_right_of,
    is_symmetric_diag,
    is_symmetric_h,
    is_symmetric_v,
    objects_overlap,
    overlay_grids,
    unique_colors,
)


def single(r, c, color=1):
    return Object.from_cells([(r, c)], color)


def test_from_cells_bounds():
    obj = Object.from_cells([(2, 3), (4, 1)], 7)
    assert (obj.min_r, obj.max_r) == (2, 4)
    assert (obj.min_c, obj.max_c) == (1, 3)
    assert obj.area() == len(obj.cells)
    assert obj.bounding_box() == (obj.min_r, obj.min_c, obj.height(), obj.width())


def test_to_grid_shape_and_content():
    obj = Object.from_cells([(2, 3), (4, 1), (3, 2)], 7)
    rendered = obj.to_grid()
    assert len(rendered) == obj.height()
    assert all(len(row) == obj.width() for row in rendered)
    filled = [v for row in rendered for v in row if v != 0]
    assert len(filled) == obj.area()
    assert set(filled) == {7}


def test_center_of_single_cell():
    obj = single(4, 6)
    assert obj.center() == (4, 6)


def test_connected_components_cover_non_zero_cells():
    grid = [[1, 1, 0], [0, 2, 2], [3, 0, 2]]
    objs = connected_components(grid, True)
    assert sorted(o.color for o in objs) == [1, 2, 3]
    non_zero = sum(1 for row in grid for v in row if v != 0)
    assert sum(o.area() for o in objs) == non_zero
    assert count_objects(grid) == len(objs)


def test_components_with_background_cover_all():
    grid = [[1, 1, 0], [0, 2, 2], [3, 0, 2]]
    objs = connected_components(grid, False)
    rows, cols = grid_dimensions(grid)
    assert sum(o.area() for o in objs) == rows * cols
    for obj in objs:
        assert all(grid[r][c] == obj.color for r, c in obj.cells)


def test_diagonal_connectivity():
    grid = [[1, 0], [0, 1]]
    assert len(connected_components(grid, True)) == 2
    assert len(connected_components_8(grid, True)) == 1


def test_components_of_empty_grid():
    assert connected_components([], True) == []
    assert connected_components_8([], False) == []


def test_unique_colors_first_appearance_order():
    assert unique_colors([[3, 1], [1, 0]]) == [3, 1, 0]
    assert unique_colors([]) == []


def test_grid_dimensions():
    grid = [[1, 2, 3], [4, 5, 6]]
    assert grid_dimensions(grid) == (len(grid), len(grid[0]))
    assert grid_dimensions([]) == (0, 0)


def test_overlay_top_wins_on_non_zero():
    base = [[1, 1], [1, 1]]
    top = [[0, 2], [0, 0]]
    assert overlay_grids(base, top) == [[1, 2], [1, 1]]
    assert overlay_grids([], top) == top


def test_overlay_grows_to_larger_grid():
    base = [[1]]
    top = [[0, 2], [3, 0]]
    result = overlay_grids(base, top)
    assert grid_dimensions(result) == grid_dimensions(top)
    assert result[0][0] == 1


def test_symmetry_checks():
    assert is_symmetric_h([[1, 2, 1], [4, 5, 4]])
    assert not is_symmetric_h([[1, 2]])
    assert is_symmetric_v([[1, 2], [1, 2]])
    assert not is_symmetric_v([[1, 2], [2, 1]])
    assert is_symmetric_diag([[1, 2], [2, 1]])
    assert not is_symmetric_diag([[1, 2], [3, 1]])
    assert not is_symmetric_diag([[1, 2, 3]])


def test_periods():
    assert detect_period_h([[1, 2, 1, 2], [3, 4, 3, 4]]) == 2
    assert detect_period_h([[1, 2, 3]]) is None
    assert detect_period_h([]) is None
    assert detect_period_v([[1], [1]]) == 1
    assert detect_period_v([[1], [2], [3]]) is None


def test_spatial_relations():
    a = single(0, 0)
    b = single(2, 3)
    assert is_above(a, b) and not is_above(b, a)
    assert is_below(b, a) and not is_below(a, b)
    assert is_left_of(a, b) and not is_left_of(b, a)
    assert is_right_of(b, a) and not is_right_of(a, b)


def test_adjacency_and_overlap():
    a = single(1, 1)
    b = single(1, 2)
    diag = single(2, 2)
    assert is_adjacent(a, b)
    assert not is_adjacent(a, diag)
    assert objects_overlap(a, a)
    assert not objects_overlap(a, b)


def test_inside():
    outer = Object.from_cells([(0, 0), (4, 4)], 1)
    inner = single(2, 2)
    assert is_inside(inner, outer)
    assert not is_inside(outer, inner)


def test_distance():
    a = single(0, 0)
    b = single(3, 4)
    assert distance_between(a, a) == 0.0
    assert distance_between(a, b) == pytest.approx(5.0)
    assert distance_between(a, b) == distance_between(b, a)