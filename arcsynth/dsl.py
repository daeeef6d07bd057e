"""Grid transformation primitives and their composition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from arcsynth.grid import Grid, Object, connected_components, grid_dimensions

_ORTHOGONAL = ((0, 1), (0, -1), (1, 0), (-1, 0))


class Op(Enum):
    """The kind of a primitive operation."""

    IDENTITY = "identity"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    ROTATE_180 = "rotate_180"
    FLIP_H = "flip_h"
    FLIP_V = "flip_v"
    TRANSPOSE = "transpose"
    FILL_COLOR = "fill_color"
    REPLACE_COLOR = "replace_color"
    CROP = "crop"
    PAD = "pad"
    SCALE = "scale"
    FILTER_COLOR = "filter_color"
    GRAVITY_DOWN = "gravity_down"
    GRAVITY_UP = "gravity_up"
    GRAVITY_LEFT = "gravity_left"
    GRAVITY_RIGHT = "gravity_right"
    MOST_FREQUENT_COLOR = "most_frequent_color"
    BORDER_FILL = "border_fill"
    FLOOD_FILL = "flood_fill"
    EXTRACT_OBJECT = "extract_object"
    OVERLAY = "overlay"
    MIRROR_H = "mirror_h"
    MIRROR_V = "mirror_v"
    REPEAT_H = "repeat_h"
    REPEAT_V = "repeat_v"
    INVERT = "invert"
    SORT_ROWS_BY_COLOR = "sort_rows_by_color"
    SORT_COLS_BY_COLOR = "sort_cols_by_color"
    REMOVE_COLOR = "remove_color"
    KEEP_LARGEST_OBJECT = "keep_largest_object"
    KEEP_SMALLEST_OBJECT = "keep_smallest_object"
    OUTLINE_OBJECTS = "outline_objects"
    FILL_INSIDE_OBJECTS = "fill_inside_objects"
    TRANSLATE = "translate"
    CROP_TO_BBOX = "crop_to_bbox"
    EXTEND_H_LINES = "extend_h_lines"
    EXTEND_V_LINES = "extend_v_lines"
    EXTEND_CROSS = "extend_cross"
    DIAG_FILL_TL = "diag_fill_tl"
    DIAG_FILL_TR = "diag_fill_tr"
    FILL_ENCLOSED = "fill_enclosed"
    UPSCALE_OBJECTS = "upscale_objects"
    COMPOSE = "compose"
    CONDITIONAL = "conditional"


_ARITY: dict[Op, int] = {
    Op.FILL_COLOR: 1,
    Op.REPLACE_COLOR: 2,
    Op.CROP: 4,
    Op.PAD: 2,
    Op.SCALE: 1,
    Op.FILTER_COLOR: 1,
    Op.BORDER_FILL: 1,
    Op.FLOOD_FILL: 3,
    Op.EXTRACT_OBJECT: 1,
    Op.REPEAT_H: 1,
    Op.REPEAT_V: 1,
    Op.REMOVE_COLOR: 1,
    Op.OUTLINE_OBJECTS: 1,
    Op.FILL_INSIDE_OBJECTS: 1,
    Op.TRANSLATE: 2,
    Op.FILL_ENCLOSED: 1,
    Op.UPSCALE_OBJECTS: 1,
    Op.COMPOSE: 2,
    Op.CONDITIONAL: 3,
}


@dataclass(frozen=True, init=False)
class Prim:
    """A primitive operation with its parameters; COMPOSE and CONDITIONAL take sub-programs."""

    op: Op
    args: tuple

    def __init__(self, op: Op, *args) -> None:
        expected = _ARITY.get(op, 0)
        if len(args) != expected:
            raise TypeError(f"{op.name} takes {expected} argument(s), got {len(args)}")
        if op in (Op.COMPOSE, Op.CONDITIONAL) and not all(isinstance(a, Prim) for a in args):
            raise TypeError(f"{op.name} takes programs as arguments")
        object.__setattr__(self, "op", op)
        object.__setattr__(self, "args", tuple(args))

    def apply(self, grid: Grid) -> Grid:
        """Run the program on a grid, returning a new grid."""
        if self.op is Op.COMPOSE:
            first, second = self.args
            return second.apply(first.apply(grid))
        if self.op is Op.CONDITIONAL:
            cond, then_p, else_p = self.args
            chosen = then_p if cond.apply(grid) != grid else else_p
            return chosen.apply(grid)
        return _HANDLERS[self.op](grid, *self.args)

    def size(self) -> int:
        """Number of nodes in the program tree."""
        if self.op in (Op.COMPOSE, Op.CONDITIONAL):
            return 1 + sum(child.size() for child in self.args)
        return 1


def all_primitives() -> list[Prim]:
    """The full set of leaf primitives searched by enumeration."""
    prims = [
        Prim(op)
        for op in (
            Op.IDENTITY, Op.ROTATE_CW, Op.ROTATE_CCW, Op.ROTATE_180,
            Op.FLIP_H, Op.FLIP_V, Op.TRANSPOSE,
            Op.GRAVITY_DOWN, Op.GRAVITY_UP, Op.GRAVITY_LEFT, Op.GRAVITY_RIGHT,
            Op.MIRROR_H, Op.MIRROR_V,
            Op.INVERT, Op.SORT_ROWS_BY_COLOR, Op.SORT_COLS_BY_COLOR,
            Op.KEEP_LARGEST_OBJECT, Op.KEEP_SMALLEST_OBJECT,
            Op.CROP_TO_BBOX, Op.EXTEND_H_LINES, Op.EXTEND_V_LINES, Op.EXTEND_CROSS,
            Op.DIAG_FILL_TL, Op.DIAG_FILL_TR,
        )
    ]
    for c in range(10):
        for op in (
            Op.FILL_COLOR, Op.FILTER_COLOR, Op.BORDER_FILL, Op.REMOVE_COLOR,
            Op.OUTLINE_OBJECTS, Op.FILL_INSIDE_OBJECTS, Op.FILL_ENCLOSED,
        ):
            prims.append(Prim(op, c))
        prims.extend(Prim(Op.REPLACE_COLOR, c, c2) for c2 in range(10) if c2 != c)
    for s in range(2, 5):
        for op in (Op.SCALE, Op.REPEAT_H, Op.REPEAT_V, Op.UPSCALE_OBJECTS):
            prims.append(Prim(op, s))
    for d in (-3, -2, -1, 1, 2, 3):
        prims.append(Prim(Op.TRANSLATE, d, 0))
        prims.append(Prim(Op.TRANSLATE, 0, d))
    return prims


# --- primitive implementations ---


def _copy(g: Grid) -> Grid:
    return [list(row) for row in g]


def _zeros(rows: int, cols: int) -> Grid:
    return [[0] * cols for _ in range(rows)]


def _rotate_cw(g: Grid) -> Grid:
    return [list(col) for col in zip(*g[::-1])]


def _rotate_ccw(g: Grid) -> Grid:
    return [list(col) for col in zip(*g)][::-1]


def _flip_h(g: Grid) -> Grid:
    return [row[::-1] for row in g]


def _flip_v(g: Grid) -> Grid:
    return [list(row) for row in g[::-1]]


def _transpose(g: Grid) -> Grid:
    return [list(col) for col in zip(*g)]


def _fill_color(g: Grid, color: int) -> Grid:
    return [[color if v else 0 for v in row] for row in g]


def _replace_color(g: Grid, src: int, dst: int) -> Grid:
    return [[dst if v == src else v for v in row] for row in g]


def _crop(g: Grid, r: int, c: int, h: int, w: int) -> Grid:
    return [row[c:c + w] for row in g[r:r + h]]


def _pad(g: Grid, n: int, color: int) -> Grid:
    if not g:
        return []
    new_cols = len(g[0]) + 2 * n
    border = [[color] * new_cols for _ in range(n)]
    middle = [[color] * n + list(row) + [color] * n for row in g]
    return border + middle + [[color] * new_cols for _ in range(n)]


def _scale(g: Grid, s: int) -> Grid:
    out: Grid = []
    for row in g:
        scaled = [v for v in row for _ in range(s)]
        out.extend(list(scaled) for _ in range(s))
    return out


def _filter_color(g: Grid, color: int) -> Grid:
    return [[v if v == color else 0 for v in row] for row in g]


def _gravity_down(g: Grid) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _zeros(rows, cols)
    for c in range(cols):
        column = [g[r][c] for r in range(rows) if g[r][c]]
        for r, v in enumerate(column, start=rows - len(column)):
            out[r][c] = v
    return out


def _gravity_up(g: Grid) -> Grid:
    return _flip_v(_gravity_down(_flip_v(g)))


def _gravity_left(g: Grid) -> Grid:
    return _transpose(_gravity_down(_transpose(g)))


def _gravity_right(g: Grid) -> Grid:
    return _transpose(_flip_v(_gravity_down(_flip_v(_transpose(g)))))


def _most_frequent_fill(g: Grid) -> Grid:
    counts = [0] * 10
    for row in g:
        for v in row:
            if v < 10:
                counts[v] += 1
    counts[0] = 0
    # Ties go to the highest colour.
    best = max(range(10), key=lambda i: (counts[i], i))
    return _fill_color(g, best)


def _border_fill(g: Grid, color: int) -> Grid:
    out = _copy(g)
    if not g or not g[0]:
        return out
    rows, cols = len(g), len(g[0])
    out[0] = [color] * cols
    out[rows - 1] = [color] * cols
    for row in out:
        row[0] = color
        row[cols - 1] = color
    return out


def _flood_fill(g: Grid, sr: int, sc: int, new_color: int) -> Grid:
    if not g or not 0 <= sr < len(g) or not 0 <= sc < len(g[0]):
        return _copy(g)
    old = g[sr][sc]
    out = _copy(g)
    if old == new_color:
        return out
    rows, cols = len(g), len(g[0])
    out[sr][sc] = new_color
    stack = [(sr, sc)]
    while stack:
        r, c = stack.pop()
        for dr, dc in _ORTHOGONAL:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols and out[nr][nc] == old:
                out[nr][nc] = new_color
                stack.append((nr, nc))
    return out


def _extract_object(g: Grid, idx: int) -> Grid:
    objects = connected_components(g, True)
    if not 0 <= idx < len(objects):
        return _copy(g)
    return objects[idx].to_grid()


def _overlay(g: Grid) -> Grid:
    return _copy(g)


def _mirror_h(g: Grid) -> Grid:
    return [list(row) + row[::-1] for row in g]


def _mirror_v(g: Grid) -> Grid:
    return _copy(g) + _flip_v(g)


def _repeat_h(g: Grid, n: int) -> Grid:
    return [list(row) * n for row in g]


def _repeat_v(g: Grid, n: int) -> Grid:
    return [list(row) for _ in range(n) for row in g]


def _invert(g: Grid) -> Grid:
    max_color = max((v for row in g for v in row), default=1)
    return [[0 if v else max_color for v in row] for row in g]


def _sort_rows_by_color(g: Grid) -> Grid:
    return sorted(_copy(g), key=lambda row: next((v for v in row if v), 255))


def _sort_cols_by_color(g: Grid) -> Grid:
    return _transpose(_sort_rows_by_color(_transpose(g)))


def _keep_only(g: Grid, obj: Object) -> Grid:
    rows, cols = grid_dimensions(g)
    out = _zeros(rows, cols)
    for r, c in obj.cells:
        out[r][c] = obj.color
    return out


def _keep_largest_object(g: Grid) -> Grid:
    objects = connected_components(g, True)
    if not objects:
        return _copy(g)
    # On ties the last object found wins.
    return _keep_only(g, max(reversed(objects), key=Object.area))


def _keep_smallest_object(g: Grid) -> Grid:
    objects = connected_components(g, True)
    if not objects:
        return _copy(g)
    return _keep_only(g, min(objects, key=Object.area))


def _outline_objects(g: Grid, outline_color: int) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _copy(g)
    for r in range(rows):
        for c in range(cols):
            if not g[r][c]:
                continue
            on_border = any(
                not (0 <= r + dr < rows and 0 <= c + dc < cols) or g[r + dr][c + dc] == 0
                for dr, dc in _ORTHOGONAL
            )
            if on_border:
                out[r][c] = outline_color
    return out


def _translate(g: Grid, dr: int, dc: int) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _zeros(rows, cols)
    for r, row in enumerate(g):
        for c, v in enumerate(row):
            if v and 0 <= r + dr < rows and 0 <= c + dc < cols:
                out[r + dr][c + dc] = v
    return out


def _crop_to_bbox(g: Grid) -> Grid:
    if not g:
        return []
    filled = [(r, c) for r, row in enumerate(g) for c, v in enumerate(row) if v]
    if not filled:
        return [[0]]
    rs = [r for r, _ in filled]
    cs = [c for _, c in filled]
    return _crop(g, min(rs), min(cs), max(rs) - min(rs) + 1, max(cs) - min(cs) + 1)


def _extend_h_lines(g: Grid) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _zeros(rows, cols)
    for r, row in enumerate(g):
        for v in row:
            if v:
                out[r] = [v] * cols
    return out


def _extend_v_lines(g: Grid) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _zeros(rows, cols)
    for row in g:
        for c, v in enumerate(row):
            if v:
                for line in out:
                    line[c] = v
    return out


def _extend_cross(g: Grid) -> Grid:
    if not g:
        return []
    out = _copy(g)
    for r, row in enumerate(g):
        for c, v in enumerate(row):
            if not v:
                continue
            target = out[r]
            for cc, existing in enumerate(target):
                if existing == 0:
                    target[cc] = v
            for line in out:
                if line[c] == 0:
                    line[c] = v
    return out


def _diag_fill(g: Grid, directions: tuple[tuple[int, int], ...]) -> Grid:
    if not g:
        return []
    rows, cols = len(g), len(g[0])
    out = _copy(g)
    for r in range(rows):
        for c in range(cols):
            color = g[r][c]
            if not color:
                continue
            for dr, dc in directions:
                nr, nc = r + dr, c + dc
                while 0 <= nr < rows and 0 <= nc < cols:
                    if out[nr][nc] == 0:
                        out[nr][nc] = color
                    nr += dr
                    nc += dc
    return out


def _diag_fill_tl(g: Grid) -> Grid:
    return _diag_fill(g, ((1, 1), (-1, -1)))


def _diag_fill_tr(g: Grid) -> Grid:
    return _diag_fill(g, ((1, -1), (-1, 1)))


def _reachable_from_border(g: Grid, passable: Callable[[int], bool]) -> list[list[bool]]:
    rows, cols = len(g), len(g[0])
    reachable = [[False] * cols for _ in range(rows)]
    stack = []
    for r in range(rows):
        for c in range(cols):
            on_edge = r in (0, rows - 1) or c in (0, cols - 1)
            if on_edge and passable(g[r][c]):
                reachable[r][c] = True
                stack.append((r, c))
    while stack:
        r, c = stack.pop()
        for dr, dc in _ORTHOGONAL:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols:
                if not reachable[nr][nc] and passable(g[nr][nc]):
                    reachable[nr][nc] = True
                    stack.append((nr, nc))
    return reachable


def _fill_unreachable_zeros(g: Grid, passable: Callable[[int], bool], color: int) -> Grid:
    if not g:
        return []
    reachable = _reachable_from_border(g, passable)
    return [
        [color if v == 0 and not reachable[r][c] else v for c, v in enumerate(row)]
        for r, row in enumerate(g)
    ]


def _fill_enclosed(g: Grid, wall_color: int) -> Grid:
    return _fill_unreachable_zeros(g, lambda v: v != wall_color, wall_color)


def _fill_inside_objects(g: Grid, fill_color: int) -> Grid:
    return _fill_unreachable_zeros(g, lambda v: v == 0, fill_color)


def _upscale_objects(g: Grid, factor: int) -> Grid:
    if not g or factor == 0:
        return _copy(g)
    rows, cols = len(g), len(g[0])
    out = _zeros(rows * factor, cols * factor)
    for r, row in enumerate(g):
        for c, v in enumerate(row):
            if v:
                for dr in range(factor):
                    out[r * factor + dr][c * factor:(c + 1) * factor] = [v] * factor
    return out


_HANDLERS: dict[Op, Callable[..., Grid]] = {
    Op.IDENTITY: _copy,
    Op.ROTATE_CW: _rotate_cw,
    Op.ROTATE_CCW: _rotate_ccw,
    Op.ROTATE_180: lambda g: _rotate_cw(_rotate_cw(g)),
    Op.FLIP_H: _flip_h,
    Op.FLIP_V: _flip_v,
    Op.TRANSPOSE: _transpose,
    Op.FILL_COLOR: _fill_color,
    Op.REPLACE_COLOR: _replace_color,
    Op.CROP: _crop,
    Op.PAD: _pad,
    Op.SCALE: _scale,
    Op.FILTER_COLOR: _filter_color,
    Op.GRAVITY_DOWN: _gravity_down,
    Op.GRAVITY_UP: _gravity_up,
    Op.GRAVITY_LEFT: _gravity_left,
    Op.GRAVITY_RIGHT: _gravity_right,
    Op.MOST_FREQUENT_COLOR: _most_frequent_fill,
    Op.BORDER_FILL: _border_fill,
    Op.FLOOD_FILL: _flood_fill,
    Op.EXTRACT_OBJECT: _extract_object,
    Op.OVERLAY: _overlay,
    Op.MIRROR_H: _mirror_h,
    Op.MIRROR_V: _mirror_v,
    Op.REPEAT_H: _repeat_h,
    Op.REPEAT_V: _repeat_v,
    Op.INVERT: _invert,
    Op.SORT_ROWS_BY_COLOR: _sort_rows_by_color,
    Op.SORT_COLS_BY_COLOR: _sort_cols_by_color,
    Op.REMOVE_COLOR: lambda g, c: _replace_color(g, c, 0),
    Op.KEEP_LARGEST_OBJECT: _keep_largest_object,
    Op.KEEP_SMALLEST_OBJECT: _keep_smallest_object,
    Op.OUTLINE_OBJECTS: _outline_objects,
    Op.FILL_INSIDE_OBJECTS: _fill_inside_objects,
    Op.TRANSLATE: _translate,
    Op.CROP_TO_BBOX: _crop_to_bbox,
    Op.EXTEND_H_LINES: _extend_h_lines,
    Op.EXTEND_V_LINES: _extend_v_lines,
    Op.EXTEND_CROSS: _extend_cross,
    Op.DIAG_FILL_TL: _diag_fill_tl,
    Op.DIAG_FILL_TR: _diag_fill_tr,
    Op.FILL_ENCLOSED: _fill_enclosed,
    Op.UPSCALE_OBJECTS: _upscale_objects,
}