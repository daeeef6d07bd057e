"""Deterministic evolutionary search over composed programs."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from arcsynth.dsl import Op, Prim, all_primitives
from arcsynth.enumeration import bottom_up_enumerate
from arcsynth.grid import Grid


@dataclass
class Individual:
    program: Prim
    fitness: float
    generation: int


def _grid_similarity(a: Grid, b: Grid) -> float:
    if len(a) != len(b) or not a:
        return 0.0
    if len(a[0]) != len(b[0]):
        return 0.0
    total = len(a) * len(a[0])
    if total == 0:
        return 1.0
    matching = sum(x == y for ar, br in zip(a, b) for x, y in zip(ar, br))
    return matching / total


def _eval_fitness(program: Prim, examples) -> float:
    if not examples:
        return 0.0
    accuracy = sum(
        _grid_similarity(program.apply(inp), expected) for inp, expected in examples
    ) / len(examples)
    size_penalty = 1.0 / (1.0 + program.size() * 0.01)
    return accuracy * 0.95 + size_penalty * 0.05


def _crossover(a: Prim, b: Prim) -> Prim:
    return Prim(Op.COMPOSE, a, b)


def _mutate(p: Prim, prims: list[Prim]) -> Prim:
    replacement = prims[(p.size() * 7 + 13) % len(prims)]
    if p.op is Op.COMPOSE:
        return Prim(Op.COMPOSE, p.args[0], replacement)
    if p.size() < 3:
        return Prim(Op.COMPOSE, p, replacement)
    return replacement


def _by_fitness(population: list[Individual]) -> None:
    population.sort(key=lambda ind: ind.fitness, reverse=True)


def evolve(examples, population_size: int, generations: int) -> Individual | None:
    """Evolve programs towards the examples and return the fittest individual."""
    examples = list(examples)
    prims = all_primitives()
    population = [
        Individual(program, fitness, 0)
        for program, fitness in bottom_up_enumerate(examples, population_size // 2)
    ]
    while len(population) < population_size:
        program = prims[len(population) % len(prims)]
        population.append(Individual(program, _eval_fitness(program, examples), 0))

    for gen in range(generations):
        _by_fitness(population)
        if not population:
            raise ValueError("population_size must be positive")
        if population[0].fitness >= 1.0 - sys.float_info.epsilon:
            return population.pop(0)

        elite_count = population_size // 4
        if elite_count == 0:
            raise ValueError("population_size must be at least 4 to breed")
        next_gen = population[:elite_count]
        while len(next_gen) < population_size:
            parent_a = population[len(next_gen) % elite_count]
            parent_b = population[(len(next_gen) + 1) % elite_count]
            child = _mutate(_crossover(parent_a.program, parent_b.program), prims)
            next_gen.append(Individual(child, _eval_fitness(child, examples), gen + 1))
        population = next_gen

    _by_fitness(population)
    return population[0] if population else None