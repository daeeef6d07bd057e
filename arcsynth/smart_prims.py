"""Transforms whose parameters are learned from example pairs rather than fixed in advance."""

from __future__ import annotations

from dataclasses import dataclass, field

from arcsynth.grid import Grid

_KINDS = frozenset(
    {
        "color_map",
        "self_tile",
        "tile",
        "subgrid",
        "dedup_rows",
        "dedup_cols",
        "repair_period",
    }
)


def _width(grid: Grid) -> int:
    return len(grid[0]) if grid else 0


def learn_color_map(input_grid: Grid, output_grid: Grid) -> dict[int, int] | None:
    """Cell-by-cell colour mapping from one pair, or None if shapes or mappings conflict."""
    if len(input_grid) != len(output_grid):
        return None
    if not input_grid:
        return {}
    if len(input_grid[0]) != len(output_grid[0]):
        return None
    mapping: dict[int, int] = {}
    for in_row, out_row in zip(input_grid, output_grid):
        for ic, oc in zip(in_row, out_row):
            if mapping.setdefault(ic, oc) != oc:
                return None
    return mapping


def verify_color_map(mapping: dict[int, int], examples) -> bool:
    """True if the mapping turns every input into its output exactly."""
    for inp, out in examples:
        if len(inp) != len(out):
            return False
        if not inp:
            continue
        if len(inp[0]) != len(out[0]):
            return False
        for in_row, out_row in zip(inp, out):
            for ic, oc in zip(in_row, out_row):
                if ic not in mapping or mapping[ic] != oc:
                    return False
    return True


def apply_color_map(grid: Grid, mapping: dict[int, int]) -> Grid:
    """Recolour cells through the mapping; unmapped colours stay as they are."""
    return [[mapping.get(v, v) for v in row] for row in grid]


def tile_with_self(grid: Grid) -> Grid:
    """Replace each non-zero cell with a copy of the whole grid and each zero with a blank block."""
    if not grid:
        return []
    rows, cols = len(grid), len(grid[0])
    result = [[0] * (cols * cols) for _ in range(rows * rows)]
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if not value:
                continue
            for br, block_row in enumerate(grid):
                result[r * rows + br][c * cols:c * cols + cols] = list(block_row)
    return result


def tile_grid(grid: Grid, n_r: int, n_c: int) -> Grid:
    """Repeat the grid ``n_r`` times down and ``n_c`` times across."""
    if not grid or n_r == 0 or n_c == 0:
        return []
    return [list(row) * n_c for _ in range(n_r) for row in grid]


def detect_tiling(input_grid: Grid, output_grid: Grid) -> tuple[int, int] | None:
    """The (rows, cols) repeat counts if the output is the input tiled, else None."""
    if not input_grid or not output_grid:
        return None
    in_r, in_c = len(input_grid), len(input_grid[0])
    out_r, out_c = len(output_grid), len(output_grid[0])
    if in_c == 0 or out_r % in_r or out_c % in_c:
        return None
    n_r, n_c = out_r // in_r, out_c // in_c
    if n_r == 0 or n_c == 0:
        return None
    return (n_r, n_c) if tile_grid(input_grid, n_r, n_c) == output_grid else None


def detect_self_tiling(input_grid: Grid, output_grid: Grid) -> bool:
    return tile_with_self(input_grid) == output_grid


def extract_subgrid(grid: Grid, r: int, c: int, h: int, w: int) -> Grid:
    """The ``h`` by ``w`` window at (r, c), clipped to the grid."""
    return [list(row[c:c + w]) for row in grid[r:r + h]]


def detect_subgrid(input_grid: Grid, output_grid: Grid) -> tuple[int, int, int, int] | None:
    """First (r, c, h, w) window of the input equal to the output, scanning row-major."""
    if not output_grid:
        return None
    out_r, out_c = len(output_grid), len(output_grid[0])
    for r in range(max(0, len(input_grid) - out_r) + 1):
        for c in range(max(0, _width(input_grid) - out_c) + 1):
            if extract_subgrid(input_grid, r, c, out_r, out_c) == output_grid:
                return r, c, out_r, out_c
    return None


def dedup_rows(grid: Grid) -> Grid:
    """Collapse runs of identical consecutive rows into one."""
    result: Grid = []
    for row in grid:
        if not result or row != result[-1]:
            result.append(list(row))
    return result


def dedup_cols(grid: Grid) -> Grid:
    """Collapse runs of identical consecutive columns into one."""
    if not grid or not grid[0]:
        return [list(row) for row in grid]
    cols = len(grid[0])
    keep = [0] + [
        c for c in range(1, cols) if not all(row[c] == row[c - 1] for row in grid)
    ]
    return [[row[c] for c in keep] for row in grid]


def _vote(counts: list[int]) -> int:
    # Ties go to the highest colour.
    return max(range(len(counts)), key=lambda i: (counts[i], i))


def majority_vote(grids) -> Grid:
    """Per-cell most common colour 0-9 across the grids, shaped like the first grid."""
    grids = list(grids)
    if not grids or not grids[0]:
        return []
    rows, cols = len(grids[0]), len(grids[0][0])
    result = [[0] * cols for _ in range(rows)]
    for r in range(rows):
        for c in range(cols):
            counts = [0] * 10
            for g in grids:
                if r < len(g) and c < len(g[r]) and g[r][c] < 10:
                    counts[g[r][c]] += 1
            result[r][c] = _vote(counts)
    return result


def detect_damaged_period(input_grid: Grid, output_grid: Grid) -> tuple[int, int] | None:
    """Period (rows, cols) of a periodic output whose input differs only by zero holes."""
    if (
        len(input_grid) != len(output_grid)
        or not input_grid
        or len(input_grid[0]) != len(output_grid[0])
    ):
        return None
    rows, cols = len(input_grid), len(input_grid[0])
    cells = [(r, c) for r in range(rows) for c in range(cols)]
    for pr in range(1, rows // 2 + 1):
        if rows % pr:
            continue
        for pc in range(1, cols // 2 + 1):
            if cols % pc:
                continue
            if not all(output_grid[r][c] == output_grid[r % pr][c % pc] for r, c in cells):
                continue
            if not all(
                input_grid[r][c] == 0 or input_grid[r][c] == output_grid[r][c] for r, c in cells
            ):
                continue
            if any(input_grid[r][c] == 0 and output_grid[r][c] != 0 for r, c in cells):
                return pr, pc
    return None


def repair_period(grid: Grid, pr: int, pc: int) -> Grid:
    """Rebuild the grid from a ``pr`` by ``pc`` tile voted from its non-zero cells."""
    if not grid or pr == 0 or pc == 0:
        return [list(row) for row in grid]
    rows, cols = len(grid), len(grid[0])
    tile = [[0] * pc for _ in range(pr)]
    for tr in range(pr):
        for tc in range(pc):
            counts = [0] * 10
            for r in range(tr, rows, pr):
                for c in range(tc, cols, pc):
                    v = grid[r][c]
                    if 0 < v < 10:
                        counts[v] += 1
            best = max(range(1, 10), key=lambda i: (counts[i], i))
            tile[tr][tc] = best if counts[best] > 0 else 0
    return [[tile[r % pr][c % pc] for c in range(cols)] for r in range(rows)]


@dataclass
class SmartTransform:
    """A learned transform: its kind, integer parameters and, for colour maps, the mapping."""

    kind: str
    params: tuple[int, ...] = ()
    mapping: dict[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in _KINDS:
            raise ValueError(f"unknown transform kind: {self.kind!r}")

    def apply(self, grid: Grid) -> Grid:
        if self.kind == "color_map":
            return apply_color_map(grid, self.mapping)
        if self.kind == "self_tile":
            return tile_with_self(grid)
        if self.kind == "tile":
            return tile_grid(grid, *self.params)
        if self.kind == "subgrid":
            return extract_subgrid(grid, *self.params)
        if self.kind == "dedup_rows":
            return dedup_rows(grid)
        if self.kind == "dedup_cols":
            return dedup_cols(grid)
        return repair_period(grid, *self.params)

    def name(self) -> str:
        return self.kind


def try_smart_transforms(examples) -> SmartTransform | None:
    """The first learned transform, tried in a fixed order, that fits every example."""
    examples = list(examples)
    if not examples:
        return None
    first_in, first_out = examples[0]

    mapping = learn_color_map(first_in, first_out)
    if mapping is not None and verify_color_map(mapping, examples):
        return SmartTransform("color_map", mapping=mapping)

    if detect_self_tiling(first_in, first_out) and all(
        detect_self_tiling(i, o) for i, o in examples
    ):
        return SmartTransform("self_tile")

    counts = detect_tiling(first_in, first_out)
    if counts is not None and all(detect_tiling(i, o) == counts for i, o in examples):
        return SmartTransform("tile", counts)

    window = detect_subgrid(first_in, first_out)
    if window is not None and all(extract_subgrid(i, *window) == o for i, o in examples):
        return SmartTransform("subgrid", window)

    if all(dedup_rows(i) == o for i, o in examples):
        return SmartTransform("dedup_rows")

    if all(dedup_cols(i) == o for i, o in examples):
        return SmartTransform("dedup_cols")

    period = detect_damaged_period(first_in, first_out)
    if period is not None and all(repair_period(i, *period) == o for i, o in examples):
        return SmartTransform("repair_period", period)

    return None