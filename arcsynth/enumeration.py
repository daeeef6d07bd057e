"""Brute-force search over compositions of primitives."""

from __future__ import annotations

from dataclasses import dataclass

from arcsynth.dsl import Op, Prim, all_primitives
from arcsynth.grid import Grid

_PAIR_BUDGET = 100_000
_TRIPLE_BUDGET = 500_000
_TRIPLE_CANDIDATES = 20
_TRIPLE_THRESHOLD = 0.3


@dataclass
class SynthesisResult:
    program: Prim
    size: int
    checked: int


def _matches_all(program: Prim, examples) -> bool:
    return all(program.apply(inp) == expected for inp, expected in examples)


def _grid_similarity(a: Grid, b: Grid) -> float:
    if len(a) != len(b):
        return 0.0
    if not a:
        return 1.0
    if len(a[0]) != len(b[0]):
        return 0.0
    total = len(a) * len(a[0])
    if total == 0:
        return 1.0
    matching = sum(x == y for ar, br in zip(a, b) for x, y in zip(ar, br))
    return matching / total


def _partial_match_score(program: Prim, examples) -> float:
    if not examples:
        return 0.0
    total = sum(_grid_similarity(program.apply(inp), expected) for inp, expected in examples)
    return total / len(examples)


def synthesize(examples, max_size: int) -> SynthesisResult | None:
    """Find a program of one, two or three primitives that maps every input to its output."""
    checked = 0
    prims = all_primitives()

    def found(program: Prim) -> SynthesisResult:
        return SynthesisResult(program, program.size(), checked)

    for p in prims:
        checked += 1
        if _matches_all(p, examples):
            return found(p)

    if max_size >= 2:
        for a in prims:
            for b in prims:
                checked += 1
                composed = Prim(Op.COMPOSE, a, b)
                if _matches_all(composed, examples):
                    return found(composed)
            if checked > _PAIR_BUDGET:
                break

    if max_size >= 3:
        top = [p for p in prims if _partial_match_score(p, examples) > _TRIPLE_THRESHOLD]
        top = top[:_TRIPLE_CANDIDATES]
        for a in top:
            for b in top:
                for c in top:
                    checked += 1
                    program = Prim(Op.COMPOSE, a, Prim(Op.COMPOSE, b, c))
                    if _matches_all(program, examples):
                        return found(program)
                    if checked > _TRIPLE_BUDGET:
                        return None
    return None


def bottom_up_enumerate(examples, max_programs: int) -> list[tuple[Prim, float]]:
    """Primitives with a positive average similarity, best first, at most ``max_programs``."""
    scored = ((p, _partial_match_score(p, examples)) for p in all_primitives())
    ranked = [(p, s) for p, s in scored if s > 0.0]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked[:max_programs]