"""Grid primitives: connected objects, colour queries, symmetry and spatial relations."""

from __future__ import annotations

import math
from dataclasses import dataclass

Grid = list[list[int]]
Cell = tuple[int, int]

_ORTHOGONAL: tuple[Cell, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
_MOORE: tuple[Cell, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


@dataclass(frozen=True)
class Object:
    """A connected group of same-coloured cells with its bounding box."""

    cells: tuple[Cell, ...]
    color: int
    min_r: int
    min_c: int
    max_r: int
    max_c: int

    @classmethod
    def from_cells(cls, cells, color) -> Object:
        cells = tuple((int(r), int(c)) for r, c in cells)
        rows = [r for r, _ in cells]
        cols = [c for _, c in cells]
        return cls(
            cells=cells,
            color=color,
            min_r=min(rows, default=0),
            min_c=min(cols, default=0),
            max_r=max(rows, default=0),
            max_c=max(cols, default=0),
        )

    def width(self) -> int:
        return self.max_c - self.min_c + 1

    def height(self) -> int:
        return self.max_r - self.min_r + 1

    def area(self) -> int:
        return len(self.cells)

    def to_grid(self) -> Grid:
        """Render the object into a grid the size of its bounding box."""
        out = [[0] * self.width() for _ in range(self.height())]
        for r, c in self.cells:
            out[r - self.min_r][c - self.min_c] = self.color
        return out

    def center(self) -> Cell:
        return (self.min_r + self.max_r) // 2, (self.min_c + self.max_c) // 2

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Return (top row, left column, height, width)."""
        return self.min_r, self.min_c, self.height(), self.width()


def _components(grid: Grid, ignore_bg: bool, offsets: tuple[Cell, ...]) -> list[Object]:
    if not grid:
        return []
    rows, cols = len(grid), len(grid[0])
    visited = [[False] * cols for _ in range(rows)]
    objects: list[Object] = []
    for r in range(rows):
        for c in range(cols):
            if visited[r][c]:
                continue
            color = grid[r][c]
            if ignore_bg and color == 0:
                continue
            cells: list[Cell] = []
            stack = [(r, c)]
            visited[r][c] = True
            while stack:
                cr, cc = stack.pop()
                cells.append((cr, cc))
                for dr, dc in offsets:
                    nr, nc = cr + dr, cc + dc
                    if 0 <= nr < rows and 0 <= nc < cols:
                        if not visited[nr][nc] and grid[nr][nc] == color:
                            visited[nr][nc] = True
                            stack.append((nr, nc))
            objects.append(Object.from_cells(cells, color))
    return objects


def connected_components(grid: Grid, ignore_bg: bool) -> list[Object]:
    """Find 4-connected same-colour objects, optionally skipping colour 0."""
    return _components(grid, ignore_bg, _ORTHOGONAL)


def connected_components_8(grid: Grid, ignore_bg: bool) -> list[Object]:
    """Find 8-connected same-colour objects, optionally skipping colour 0."""
    return _components(grid, ignore_bg, _MOORE)


def count_objects(grid: Grid) -> int:
    return len(connected_components(grid, True))


def unique_colors(grid: Grid) -> list[int]:
    """Colours present in the grid, in order of first appearance."""
    return list(dict.fromkeys(value for row in grid for value in row))


def grid_dimensions(grid: Grid) -> tuple[int, int]:
    return (len(grid), len(grid[0])) if grid else (0, 0)


def overlay_grids(base: Grid, top: Grid) -> Grid:
    """Lay the non-zero cells of ``top`` over ``base``, growing to fit both."""
    if not base:
        return [list(row) for row in top]
    rows = max(len(base), len(top))
    cols = max(len(base[0]), len(top[0]) if top else 0)

    def cell(g: Grid, r: int, c: int) -> int:
        return g[r][c] if r < len(g) and c < len(g[0]) else 0

    return [
        [cell(top, r, c) or cell(base, r, c) for c in range(cols)]
        for r in range(rows)
    ]


def is_symmetric_h(grid: Grid) -> bool:
    return all(row == row[::-1] for row in grid)


def is_symmetric_v(grid: Grid) -> bool:
    return grid == grid[::-1]


def is_symmetric_diag(grid: Grid) -> bool:
    rows, cols = grid_dimensions(grid)
    if rows != cols:
        return False
    return all(grid[r][c] == grid[c][r] for r in range(rows) for c in range(cols))


def detect_period_h(grid: Grid) -> int | None:
    """Smallest column period dividing the width, if any."""
    if not grid:
        return None
    cols = len(grid[0])
    for period in range(1, cols // 2 + 1):
        if cols % period:
            continue
        if all(row[c] == row[c % period] for row in grid for c in range(period, cols)):
            return period
    return None


def detect_period_v(grid: Grid) -> int | None:
    """Smallest row period dividing the height, if any."""
    rows = len(grid)
    for period in range(1, rows // 2 + 1):
        if rows % period:
            continue
        if all(grid[r] == grid[r % period] for r in range(period, rows)):
            return period
    return None


def is_above(a: Object, b: Object) -> bool:
    return a.max_r < b.min_r


def is_below(a: Object, b: Object) -> bool:
    return a.min_r > b.max_r


def is_left_of(a: Object, b: Object) -> bool:
    return a.max_c < b.min_c


def is_right_of(a: Object, b: Object) -> bool:
    return a.min_c > b.max_c


def is_adjacent(a: Object, b: Object) -> bool:
    return any(
        abs(ar - br) + abs(ac - bc) == 1
        for ar, ac in a.cells
        for br, bc in b.cells
    )


def is_inside(inner: Object, outer: Object) -> bool:
    return (
        inner.min_r > outer.min_r
        and inner.max_r < outer.max_r
        and inner.min_c > outer.min_c
        and inner.max_c < outer.max_c
    )


def objects_overlap(a: Object, b: Object) -> bool:
    return not set(a.cells).isdisjoint(b.cells)


def distance_between(a: Object, b: Object) -> float:
    """Euclidean distance between the objects' integer centres."""
    (ar, ac), (br, bc) = a.center(), b.center()
    return math.hypot(ar - br, ac - bc)