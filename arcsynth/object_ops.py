"""Object-centred transforms: marker lines, stamps around markers and bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arcsynth.grid import Grid, connected_components, grid_dimensions

_MAX_STAMP_RADIUS = 5
_DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
_SOLUTION_KINDS = frozenset({"stamp_rules", "complete_bbox", "extend_markers"})


class LineDir(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class StampPattern(Enum):
    PLUS = "plus"
    X = "x"
    BOX = "box"
    H_LINE = "h_line"
    V_LINE = "v_line"


@dataclass(frozen=True)
class StampRule:
    """Stamp ``pattern`` in ``stamp_color`` around every cell of ``trigger_color``."""

    trigger_color: int
    pattern: StampPattern
    stamp_color: int
    radius: int


def _copy(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def extend_markers_to_lines(grid: Grid, direction: LineDir) -> Grid:
    """Extend every single-cell object into empty cells along its row and/or column."""
    if not grid:
        return []
    rows, cols = len(grid), len(grid[0])
    result = _copy(grid)
    for obj in connected_components(grid, True):
        if obj.area() != 1:
            continue
        r, c = obj.cells[0]
        if direction in (LineDir.HORIZONTAL, LineDir.BOTH):
            for cc in range(cols):
                if result[r][cc] == 0:
                    result[r][cc] = obj.color
        if direction in (LineDir.VERTICAL, LineDir.BOTH):
            for rr in range(rows):
                if result[rr][c] == 0:
                    result[rr][c] = obj.color
    return result


def _stamp_offsets(grid: Grid, target_color: int, stamp_color: int, offsets) -> Grid:
    rows, cols = len(grid), len(grid[0])
    result = _copy(grid)
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if value != target_color:
                continue
            for dr, dc in offsets:
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols:
                    result[nr][nc] = stamp_color
    return result


def stamp_plus(grid: Grid, target_color: int, stamp_color: int, radius: int) -> Grid:
    """Paint a plus of the given radius around each target cell, overwriting."""
    if not grid:
        return []
    offsets = [
        offset
        for d in range(1, radius + 1)
        for offset in ((-d, 0), (d, 0), (0, -d), (0, d))
    ]
    return _stamp_offsets(grid, target_color, stamp_color, offsets)


def stamp_x(grid: Grid, target_color: int, stamp_color: int, radius: int) -> Grid:
    """Paint a diagonal cross of the given radius around each target cell, overwriting."""
    if not grid:
        return []
    offsets = [(dr * d, dc * d) for d in range(1, radius + 1) for dr, dc in _DIAGONALS]
    return _stamp_offsets(grid, target_color, stamp_color, offsets)


def stamp_box(grid: Grid, target_color: int, stamp_color: int, radius: int) -> Grid:
    """Paint empty cells in a square around each target cell."""
    if not grid:
        return []
    rows, cols = grid_dimensions(grid)
    result = _copy(grid)
    span = range(-radius, radius + 1)
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if value != target_color:
                continue
            for dr in span:
                for dc in span:
                    if dr == 0 and dc == 0:
                        continue
                    nr, nc = r + dr, c + dc
                    if 0 <= nr < rows and 0 <= nc < cols and result[nr][nc] == 0:
                        result[nr][nc] = stamp_color
    return result


def complete_bbox(grid: Grid) -> Grid:
    """Fill the empty cells of each object's bounding box with the object's colour."""
    if not grid:
        return []
    result = _copy(grid)
    for obj in connected_components(grid, True):
        for r in range(obj.min_r, obj.max_r + 1):
            for c in range(obj.min_c, obj.max_c + 1):
                if result[r][c] == 0:
                    result[r][c] = obj.color
    return result


def draw_bboxes(grid: Grid, outline_color: int) -> Grid:
    """Draw the bounding-box outline of every object at least 2 by 2."""
    if not grid:
        return []
    result = _copy(grid)
    for obj in connected_components(grid, True):
        if obj.height() < 2 or obj.width() < 2:
            continue
        for c in range(obj.min_c, obj.max_c + 1):
            result[obj.min_r][c] = outline_color
            result[obj.max_r][c] = outline_color
        for r in range(obj.min_r, obj.max_r + 1):
            result[r][obj.min_c] = outline_color
            result[r][obj.max_c] = outline_color
    return result


def sort_objects_by_size(grid: Grid) -> Grid:
    """Lay objects out left to right from the top row, smallest first, one column apart."""
    if not grid:
        return []
    rows, cols = grid_dimensions(grid)
    objects = sorted(connected_components(grid, True), key=lambda o: o.area())
    result = [[0] * cols for _ in range(rows)]
    cur_c = 0
    for obj in objects:
        for r, row in enumerate(obj.to_grid()):
            for c, value in enumerate(row):
                if value and r < rows and cur_c + c < cols:
                    result[r][cur_c + c] = value
        cur_c += obj.width() + 1
    return result


def _stamp_colors(output: Grid, mr: int, mc: int, marker_color: int,
                  pattern: StampPattern, radius: int) -> list[int]:
    rows, cols = len(output), len(output[0])
    if pattern is StampPattern.PLUS:
        offsets = [
            offset
            for d in range(1, radius + 1)
            for offset in ((-d, 0), (d, 0), (0, -d), (0, d))
        ]
    else:
        offsets = [(dr * d, dc * d) for d in range(1, radius + 1) for dr, dc in _DIAGONALS]
    colors = []
    for dr, dc in offsets:
        nr, nc = mr + dr, mc + dc
        if 0 <= nr < rows and 0 <= nc < cols:
            value = output[nr][nc]
            if value != 0 and value != marker_color:
                colors.append(value)
    return colors


def try_learn_stamp_rules(examples) -> list[StampRule] | None:
    """Learn plus/X stamps around single-cell markers that explain every example."""
    examples = list(examples)
    if not examples:
        return None
    inp, out = examples[0]
    if len(inp) != len(out) or not inp or len(inp[0]) != len(out[0]):
        return None

    markers = [o for o in connected_components(inp, True) if o.area() == 1]
    if not markers:
        return None

    rules: list[StampRule] = []
    for marker in markers:
        mr, mc = marker.cells[0]
        for pattern in (StampPattern.PLUS, StampPattern.X):
            for radius in range(1, _MAX_STAMP_RADIUS + 1):
                colors = _stamp_colors(out, mr, mc, marker.color, pattern, radius)
                if colors and all(c == colors[0] for c in colors):
                    rules.append(StampRule(marker.color, pattern, colors[0], radius))
                    break

    if not rules:
        return None
    if apply_stamp_rules(inp, rules) != out:
        return None
    if all(apply_stamp_rules(i, rules) == o for i, o in examples[1:]):
        return rules
    return None


def apply_stamp_rules(grid: Grid, rules) -> Grid:
    """Apply the rules in order, each to the result of the previous one."""
    result = _copy(grid)
    for rule in rules:
        if rule.pattern is StampPattern.PLUS:
            result = stamp_plus(result, rule.trigger_color, rule.stamp_color, rule.radius)
        elif rule.pattern is StampPattern.X:
            result = stamp_x(result, rule.trigger_color, rule.stamp_color, rule.radius)
        elif rule.pattern is StampPattern.BOX:
            result = stamp_box(result, rule.trigger_color, rule.stamp_color, rule.radius)
        elif rule.pattern is StampPattern.H_LINE:
            result = extend_markers_to_lines(result, LineDir.HORIZONTAL)
        else:
            result = extend_markers_to_lines(result, LineDir.VERTICAL)
    return result


@dataclass(frozen=True)
class ObjectSolution:
    """A solved object-level transform: stamp rules, bbox completion or marker lines."""

    kind: str
    rules: tuple[StampRule, ...] = ()
    direction: LineDir = LineDir.BOTH

    def __post_init__(self) -> None:
        if self.kind not in _SOLUTION_KINDS:
            raise ValueError(f"unknown solution kind: {self.kind!r}")

    def apply(self, grid: Grid) -> Grid:
        if self.kind == "stamp_rules":
            return apply_stamp_rules(grid, self.rules)
        if self.kind == "complete_bbox":
            return complete_bbox(grid)
        return extend_markers_to_lines(grid, self.direction)

    def name(self) -> str:
        return self.kind


def try_object_solve(examples) -> ObjectSolution | None:
    """Try stamp rules, then bbox completion, then marker line extension."""
    examples = list(examples)
    if not examples:
        return None
    rules = try_learn_stamp_rules(examples)
    if rules is not None:
        return ObjectSolution("stamp_rules", rules=tuple(rules))
    if all(complete_bbox(i) == o for i, o in examples):
        return ObjectSolution("complete_bbox")
    for direction in (LineDir.BOTH, LineDir.HORIZONTAL, LineDir.VERTICAL):
        if all(extend_markers_to_lines(i, direction) == o for i, o in examples):
            return ObjectSolution("extend_markers", direction=direction)
    return None