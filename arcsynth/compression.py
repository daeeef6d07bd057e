"""Description-length scoring of programs and compact grid encodings."""

from __future__ import annotations

import math
from collections import Counter

from arcsynth.dsl import Op, Prim
from arcsynth.grid import Grid

_MAX_RUN = 0xFFFF
_DIMENSION_PENALTY = 100.0
_BITS_PER_CELL = 3.3

_SIMPLE_COST = 4.0
_OP_COST: dict[Op, float] = {
    op: _SIMPLE_COST
    for op in (
        Op.ROTATE_CW, Op.ROTATE_CCW, Op.ROTATE_180,
        Op.FLIP_H, Op.FLIP_V, Op.TRANSPOSE,
        Op.GRAVITY_DOWN, Op.GRAVITY_UP, Op.GRAVITY_LEFT, Op.GRAVITY_RIGHT,
        Op.INVERT, Op.SORT_ROWS_BY_COLOR, Op.SORT_COLS_BY_COLOR,
        Op.KEEP_LARGEST_OBJECT, Op.KEEP_SMALLEST_OBJECT,
        Op.MIRROR_H, Op.MIRROR_V, Op.OVERLAY, Op.MOST_FREQUENT_COLOR,
        Op.CROP_TO_BBOX, Op.EXTEND_H_LINES, Op.EXTEND_V_LINES,
        Op.EXTEND_CROSS, Op.DIAG_FILL_TL, Op.DIAG_FILL_TR,
    )
}
_OP_COST.update(
    {
        op: _SIMPLE_COST + 3.3
        for op in (
            Op.FILL_COLOR, Op.FILTER_COLOR, Op.REMOVE_COLOR, Op.BORDER_FILL,
            Op.FILL_ENCLOSED, Op.OUTLINE_OBJECTS, Op.FILL_INSIDE_OBJECTS,
        )
    }
)
_OP_COST.update(
    {
        op: _SIMPLE_COST + 2.0
        for op in (Op.SCALE, Op.REPEAT_H, Op.REPEAT_V, Op.UPSCALE_OBJECTS)
    }
)
_OP_COST.update(
    {
        Op.IDENTITY: 0.0,
        Op.REPLACE_COLOR: _SIMPLE_COST + 6.6,
        Op.CROP: _SIMPLE_COST + 12.0,
        Op.PAD: _SIMPLE_COST + 6.0,
        Op.FLOOD_FILL: _SIMPLE_COST + 9.0,
        Op.EXTRACT_OBJECT: _SIMPLE_COST + 3.0,
        Op.TRANSLATE: _SIMPLE_COST + 4.0,
    }
)


def description_length(program: Prim) -> float:
    """Approximate cost in bits of writing the program down; lower is simpler."""
    if program.op is Op.COMPOSE:
        return 1.0 + sum(description_length(p) for p in program.args)
    if program.op is Op.CONDITIONAL:
        return 2.0 + sum(description_length(p) for p in program.args)
    return _OP_COST[program.op]


def mdl_score(program: Prim, examples) -> float:
    """Description length plus the bits needed to correct the program's errors."""
    return description_length(program) + sum(
        grid_error(program.apply(inp), expected) for inp, expected in examples
    )


def grid_error(actual: Grid, expected: Grid) -> float:
    """Bits of error between two grids; a shape mismatch costs a fixed penalty."""
    if actual == expected:
        return 0.0
    if len(actual) != len(expected):
        return _DIMENSION_PENALTY
    if not actual:
        return 0.0
    if len(actual[0]) != len(expected[0]):
        return _DIMENSION_PENALTY
    wrong = sum(a != e for ar, er in zip(actual, expected) for a, e in zip(ar, er))
    return wrong * _BITS_PER_CELL


def rle_encode(row) -> list[tuple[int, int]]:
    """Run-length encode a row into (value, count) pairs, counts capped at 65535."""
    runs: list[tuple[int, int]] = []
    for value in row:
        if runs and runs[-1][0] == value and runs[-1][1] < _MAX_RUN:
            runs[-1] = (value, runs[-1][1] + 1)
        else:
            runs.append((value, 1))
    return runs


def rle_decode(runs) -> list[int]:
    return [value for value, count in runs for _ in range(count)]


def delta_encode(base: Grid, target: Grid) -> list[tuple[int, int, int]]:
    """Cells where ``target`` differs from ``base``, as (row, col, new value)."""
    return [
        (r, c, tv)
        for r, (br, tr) in enumerate(zip(base, target))
        for c, (bv, tv) in enumerate(zip(br, tr))
        if bv != tv
    ]


def delta_apply(base: Grid, diffs) -> Grid:
    """Apply a delta to a copy of ``base``, ignoring cells outside it."""
    result = [list(row) for row in base]
    for r, c, value in diffs:
        if 0 <= r < len(result) and 0 <= c < len(result[r]):
            result[r][c] = value
    return result


def compression_ratio(grid: Grid) -> float:
    """Size of the row-wise run-length encoding (3 bytes a run) over the raw size."""
    raw_size = sum(len(row) for row in grid)
    if raw_size == 0:
        return 1.0
    rle_size = sum(len(rle_encode(row)) * 3 for row in grid)
    return rle_size / raw_size


def grid_entropy(grid: Grid) -> float:
    """Shannon entropy of the colour distribution, in bits per cell."""
    counts = Counter(value for row in grid for value in row)
    total = sum(counts.values())
    if total == 0:
        return 0.0
    return -sum((n / total) * math.log2(n / total) for n in counts.values())