"""Meet-in-the-middle search over primitives, expanding from both input and target."""

from __future__ import annotations

from dataclasses import dataclass

from arcsynth.dsl import Op, Prim
from arcsynth.grid import Grid

_MASK = (1 << 64) - 1
_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MIX_A = 0x517CC1B727220A95
_MIX_B = 0x6C62272E07BB0142

_INVERSE_OPS: dict[Op, Op] = {
    Op.ROTATE_CW: Op.ROTATE_CCW,
    Op.ROTATE_CCW: Op.ROTATE_CW,
    Op.ROTATE_180: Op.ROTATE_180,
    Op.FLIP_H: Op.FLIP_H,
    Op.FLIP_V: Op.FLIP_V,
    Op.TRANSPOSE: Op.TRANSPOSE,
    Op.INVERT: Op.INVERT,
    Op.IDENTITY: Op.IDENTITY,
}


def inverse(prim: Prim) -> Prim | None:
    """The primitive that undoes ``prim``, or None for lossy operations."""
    if prim.op in _INVERSE_OPS:
        return Prim(_INVERSE_OPS[prim.op])
    if prim.op is Op.REPLACE_COLOR:
        src, dst = prim.args
        return Prim(Op.REPLACE_COLOR, dst, src)
    return None


def invertible_subset(prims) -> list[tuple[Prim, Prim]]:
    """Pairs of (primitive, inverse) for every invertible primitive given."""
    pairs = []
    for p in prims:
        inv = inverse(p)
        if inv is not None:
            pairs.append((p, inv))
    return pairs


def grid_hash(grid: Grid) -> int:
    """64-bit position-mixed FNV-style hash of a grid."""
    h = _FNV_OFFSET
    for r, row in enumerate(grid):
        for c, val in enumerate(row):
            cell = ((r * _MIX_A) & _MASK) ^ ((c * _MIX_B) & _MASK) ^ val
            h = ((h * _FNV_PRIME) & _MASK) ^ cell
    return h


def _compose_programs(existing: Prim, nxt: Prim) -> Prim:
    if existing.op is Op.IDENTITY:
        return nxt
    return Prim(Op.COMPOSE, existing, nxt)


def _invert_program(prog: Prim) -> Prim:
    if prog.op is Op.COMPOSE:
        first, second = prog.args
        return Prim(Op.COMPOSE, _invert_program(second), _invert_program(first))
    inv = inverse(prog)
    return inv if inv is not None else prog


@dataclass
class _Node:
    grid: Grid
    program: Prim
    depth: int


@dataclass
class BidirResult:
    program: Prim
    method: str
    forward_depth: int
    backward_depth: int
    nodes_explored: int


class _BudgetExhausted(Exception):
    pass


@dataclass
class BidirSearch:
    """Bidirectional search bounded by a total number of explored states."""

    max_nodes: int

    def search(self, input_grid: Grid, target: Grid, forward_prims, max_depth: int) -> BidirResult | None:
        """Find a program turning ``input_grid`` into ``target``."""
        if input_grid == target:
            return BidirResult(Prim(Op.IDENTITY), "identity", 0, 0, 0)

        forward_prims = list(forward_prims)
        backward_prims = invertible_subset(forward_prims)
        identity = Prim(Op.IDENTITY)
        forward = {grid_hash(input_grid): _Node([list(r) for r in input_grid], identity, 0)}
        backward = {grid_hash(target): _Node([list(r) for r in target], identity, 0)}
        counter = [2]

        for depth in range((max_depth + 1) // 2):
            result = self._expand_forward(forward, backward, forward_prims, depth, counter)
            if result is not None:
                return result
            if backward_prims:
                result = self._expand_backward(forward, backward, backward_prims, depth, counter)
                if result is not None:
                    return result
            if counter[0] >= self.max_nodes:
                break
        return None

    def _expand_forward(self, forward, backward, prims, depth, counter) -> BidirResult | None:
        current = [(n.grid, n.program) for n in forward.values() if n.depth == depth]
        for grid, prog in current:
            for prim in prims:
                result = prim.apply(grid)
                fp = grid_hash(result)
                back = backward.get(fp)
                if back is not None and result == back.grid:
                    forward_prog = _compose_programs(prog, prim)
                    if back.depth == 0:
                        full = forward_prog
                    else:
                        full = Prim(Op.COMPOSE, forward_prog, _invert_program(back.program))
                    return BidirResult(full, "bidirectional", depth + 1, back.depth, counter[0])
                if fp in forward or result == grid:
                    continue
                forward[fp] = _Node(result, _compose_programs(prog, prim), depth + 1)
                counter[0] += 1
                if counter[0] >= self.max_nodes:
                    return None
        return None

    def _expand_backward(self, forward, backward, inv_prims, depth, counter) -> BidirResult | None:
        current = [(n.grid, n.program) for n in backward.values() if n.depth == depth]
        for grid, back_prog in current:
            for forward_prim, inv_prim in inv_prims:
                result = inv_prim.apply(grid)
                fp = grid_hash(result)
                fwd = forward.get(fp)
                if fwd is not None and result == fwd.grid:
                    back_forward = _compose_programs(back_prog, forward_prim)
                    if fwd.depth == 0:
                        full = _invert_program(back_forward)
                    else:
                        full = Prim(Op.COMPOSE, fwd.program, _invert_program(back_forward))
                    return BidirResult(full, "bidirectional", fwd.depth, depth + 1, counter[0])
                if fp in backward or result == grid:
                    continue
                backward[fp] = _Node(result, _compose_programs(back_prog, forward_prim), depth + 1)
                counter[0] += 1
                if counter[0] >= self.max_nodes:
                    return None
        return None

    def search_all(self, examples, prims, max_depth: int) -> BidirResult | None:
        """Solve the first example and keep the program only if it fits every other one."""
        examples = list(examples)
        if not examples:
            return None
        first_in, first_out = examples[0]
        result = self.search(first_in, first_out, prims, max_depth)
        if result is None:
            return None
        if all(result.program.apply(inp) == out for inp, out in examples[1:]):
            return result
        return None