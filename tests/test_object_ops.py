import pytest

from arcsynth.object_ops import (
    LineDir,
    ObjectSolution,
    StampPattern,
    StampRule,
    apply_stamp_rules,
    complete_bbox,
    draw_bboxes,
    extend_markers_to_lines,
    sort_objects_by_size,
    stamp_box,
    stamp_plus,
    stamp_x,
    try_learn_stamp_rules,
    try_object_solve,
)


def _center_grid(value, size=3):
    grid = [[0] * size for _ in range(size)]
    grid[size // 2][size // 2] = value
    return grid


def test_extend_markers_h():
    result = extend_markers_to_lines(_center_grid(3), LineDir.HORIZONTAL)
    assert result[1] == [3, 3, 3]
    assert result[0] == [0, 0, 0]


def test_extend_markers_v():
    result = extend_markers_to_lines(_center_grid(3), LineDir.VERTICAL)
    assert [row[1] for row in result] == [3, 3, 3]
    assert result[1] == [0, 3, 0]


def test_extend_markers_both():
    result = extend_markers_to_lines(_center_grid(3), LineDir.BOTH)
    assert result == [[0, 3, 0], [3, 3, 3], [0, 3, 0]]


def test_stamp_plus_basic():
    result = stamp_plus(_center_grid(2, 5), 2, 4, 1)
    assert result[1][2] == 4
    assert result[3][2] == 4
    assert result[2][1] == 4
    assert result[2][3] == 4
    assert result[2][2] == 2
    assert result[1][1] == 0


def test_stamp_x_basic():
    result = stamp_x(_center_grid(1, 5), 1, 7, 1)
    assert result[1][1] == 7
    assert result[1][3] == 7
    assert result[3][1] == 7
    assert result[3][3] == 7
    assert result[1][2] == 0


def test_stamp_box_fills_ring():
    result = stamp_box(_center_grid(5), 5, 2, 1)
    assert result == [[2, 2, 2], [2, 5, 2], [2, 2, 2]]


def test_complete_bbox_basic():
    grid = [
        [0, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 1],
    ]
    result = complete_bbox(grid)
    assert result[1][1] == 1
    assert result[3][3] == 1
    assert result[2][2] == 0


def test_complete_bbox_l_shape():
    grid = [[2, 0], [2, 2]]
    assert complete_bbox(grid) == [[2, 2], [2, 2]]


def test_draw_bbox_outlines():
    grid = [
        [1, 1, 0, 0, 0],
        [1, 1, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 2, 2],
        [0, 0, 0, 2, 2],
    ]
    result = draw_bboxes(grid, 5)
    assert result[0][0] == 5
    assert result[1][1] == 5
    assert result[3][3] == 5
    assert result[4][4] == 5
    assert result[2][2] == 0


def test_draw_bboxes_skips_thin_objects():
    grid = [[0, 0, 0], [0, 4, 0], [0, 0, 0]]
    assert draw_bboxes(grid, 5) == grid


def test_sort_objects_by_size():
    grid = [[0, 0, 0, 0, 0], [1, 1, 0, 2, 0]]
    assert sort_objects_by_size(grid) == [[2, 0, 1, 1, 0], [0, 0, 0, 0, 0]]


def test_object_solver_finds_bbox():
    inp = [[0, 0, 0], [0, 3, 0], [0, 0, 3]]
    sol = try_object_solve([(inp, complete_bbox(inp))])
    assert sol is not None
    assert sol.name() == "complete_bbox"


def test_object_solver_learns_stamp():
    inp = _center_grid(2, 5)
    out = stamp_plus(inp, 2, 4, 1)
    sol = try_object_solve([(inp, out)])
    assert sol is not None
    assert sol.name() == "stamp_rules"
    other = [[0] * 5 for _ in range(5)]
    other[1][1] = 2
    assert sol.apply(other) == stamp_plus(other, 2, 4, 1)


def test_learn_stamp_rules_records_rule():
    inp = _center_grid(2, 5)
    out = stamp_plus(inp, 2, 4, 1)
    assert try_learn_stamp_rules([(inp, out)]) == [StampRule(2, StampPattern.PLUS, 4, 1)]


def test_learn_stamp_rules_rejects_shape_mismatch():
    assert try_learn_stamp_rules([([[1]], [[1, 1]])]) is None


def test_object_solver_extend_markers():
    inp = _center_grid(6)
    out = extend_markers_to_lines(inp, LineDir.HORIZONTAL)
    sol = try_object_solve([(inp, out)])
    assert sol is not None
    assert sol.name() == "extend_markers"
    assert sol.apply(inp) == out


def test_object_solver_empty():
    assert try_object_solve([]) is None


def test_apply_stamp_rules_box():
    rules = [StampRule(5, StampPattern.BOX, 2, 1)]
    assert apply_stamp_rules(_center_grid(5), rules) == [[2, 2, 2], [2, 5, 2], [2, 2, 2]]


def test_unknown_solution_kind_rejected():
    with pytest.raises(ValueError):
        ObjectSolution("nonsense")