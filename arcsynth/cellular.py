"""Cellular-automaton rules learned from example grid pairs."""

from __future__ import annotations

from dataclasses import dataclass

from arcsynth.grid import Grid

_MOORE_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

Rule = dict["NeighborSignature", int]


@dataclass(frozen=True)
class CellContext:
    """Exact neighbourhood of one cell, with coarse position buckets."""

    color: int
    neighbor_colors: tuple[int, ...]
    row_frac: int
    col_frac: int


@dataclass(frozen=True)
class NeighborSignature:
    """A cell's colour, the colour counts among its neighbours and whether it is on the border."""

    center: int
    counts: tuple[int, ...]
    border: bool


def moore_neighborhood(grid: Grid, r: int, c: int) -> tuple[int, ...]:
    """The eight neighbours clockwise from top-left, 0 outside the grid."""
    rows = len(grid)
    cols = len(grid[0]) if grid else 0
    return tuple(
        grid[r + dr][c + dc] if 0 <= r + dr < rows and 0 <= c + dc < cols else 0
        for dr, dc in _MOORE_OFFSETS
    )


def neighbor_signature(grid: Grid, r: int, c: int) -> NeighborSignature:
    counts = [0] * 10
    for value in moore_neighborhood(grid, r, c):
        if value < 10:
            counts[value] += 1
    rows = len(grid)
    cols = len(grid[0]) if grid else 0
    border = r == 0 or c == 0 or r == rows - 1 or c == cols - 1
    return NeighborSignature(center=grid[r][c], counts=tuple(counts), border=border)


def learn_ca_rule(input_grid: Grid, output_grid: Grid) -> Rule | None:
    """Learn signature -> colour from one pair; None if shapes differ or it is inconsistent."""
    if len(input_grid) != len(output_grid):
        return None
    if not input_grid:
        return {}
    if len(input_grid[0]) != len(output_grid[0]):
        return None

    rule: Rule = {}
    for r in range(len(input_grid)):
        for c in range(len(input_grid[0])):
            sig = neighbor_signature(input_grid, r, c)
            out_color = output_grid[r][c]
            if rule.setdefault(sig, out_color) != out_color:
                return None
    return rule


def apply_ca_rule(grid: Grid, rule: Rule) -> Grid:
    """One step of the rule; cells with an unknown signature keep their colour."""
    if not grid:
        return []
    return [
        [rule.get(neighbor_signature(grid, r, c), grid[r][c]) for c in range(len(grid[0]))]
        for r in range(len(grid))
    ]


def verify_ca_rule(rule: Rule, examples) -> bool:
    return all(apply_ca_rule(inp, rule) == out for inp, out in examples)


def apply_ca_steps(grid: Grid, rule: Rule, steps: int) -> Grid:
    """Apply the rule up to ``steps`` times, stopping early at a fixpoint."""
    current = [list(row) for row in grid]
    for _ in range(steps):
        nxt = apply_ca_rule(current, rule)
        if nxt == current:
            break
        current = nxt
    return current


@dataclass
class CaSolution:
    rule: Rule
    steps: int

    def apply(self, grid: Grid) -> Grid:
        return apply_ca_steps(grid, self.rule, self.steps)


def try_ca_solve(examples, max_steps: int) -> CaSolution | None:
    """Learn a rule from the first example and find a step count that fits all examples."""
    if not examples:
        return None
    first_in, first_out = examples[0]
    rule = learn_ca_rule(first_in, first_out)
    if rule is None:
        return None
    if verify_ca_rule(rule, examples):
        return CaSolution(rule, 1)
    if len(examples) >= 2:
        for steps in range(2, max_steps + 1):
            if all(apply_ca_steps(inp, rule, steps) == out for inp, out in examples):
                return CaSolution(rule, steps)
    return None