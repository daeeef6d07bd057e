# arcsynth

`arcsynth` searches for programs that turn input grids into output grids. It is
meant for ARC-style puzzles. In these puzzles a grid is a small matrix of colours
0 to 9, and 0 is the background. The package uses only the standard library.

## Installation

```
pip install .
```

To install it with the test tools as well:

```
pip install .[test]
```

## Grids and examples

A grid is a list of rows, and each row is a list of ints. For example,
`[[1, 2], [3, 4]]` has two rows and two columns. The solvers take a list of
examples. Each example is a pair `(input_grid, output_grid)`.

## Modules

- `arcsynth.grid` holds grid queries:
  - `Object` is a connected group of same-coloured cells, with its bounding box.
    Its methods are `width`, `height`, `area`, `to_grid`, `center` and
    `bounding_box`.
  - `connected_components` finds 4-connected objects and `connected_components_8`
    finds 8-connected ones. `count_objects` counts them.
  - `unique_colors`, `grid_dimensions` and `overlay_grids` query and combine grids.
  - `is_symmetric_h`, `is_symmetric_v`, `is_symmetric_diag`, `detect_period_h` and
    `detect_period_v` test for symmetry and periods.
  - `is_above`, `is_below`, `is_left_of`, `is_right_of`, `is_adjacent`, `is_inside`,
    `objects_overlap` and `distance_between` relate two objects.
- `arcsynth.dsl` is the primitive language:
  - `Op` enumerates the operations. A `Prim` is built as `Prim(op, *args)`, and
    `Op.COMPOSE` and `Op.CONDITIONAL` take sub-programs as their arguments.
  - `Prim.apply(grid)` runs a program and `Prim.size()` counts its nodes.
  - `all_primitives()` lists the leaf primitives that are searched.
- `arcsynth.enumeration` has two functions. `synthesize(examples, max_size)` tries
  single primitives, then pairs, then triples of the best partial matches, and
  returns a `SynthesisResult` or `None`. `bottom_up_enumerate(examples, max_programs)`
  ranks primitives by how much of the output they match on average.
- `arcsynth.bidir` searches from the input and from the target at once:
  - `BidirSearch(max_nodes)` has the methods `search` and `search_all`, and returns
    a `BidirResult`.
  - The backward side uses `inverse` and `invertible_subset`.
  - `grid_hash` is the 64-bit grid hash the search uses.
- `arcsynth.evolve` has `evolve(examples, population_size, generations)`, a
  deterministic genetic search that returns the fittest `Individual`. Breeding
  needs `population_size` of at least 4; a smaller one raises `ValueError`.
- `arcsynth.compression` scores and encodes:
  - `description_length`, `mdl_score` and `grid_error` score programs by their
    minimum description length.
  - `rle_encode` and `rle_decode` handle run-length encoding.
  - `delta_encode` and `delta_apply` handle deltas between grids.
  - `compression_ratio` and `grid_entropy` measure a grid.
- `arcsynth.heuristics` narrows the search. `analyze_features(examples)` builds a
  `FeatureProfile` with `DimChange` and `ColorChange` classifications.
  `select_primitives(profile)` returns a reduced set of primitives with no
  duplicates.
- `arcsynth.cellular` learns cellular-automaton rules:
  - The rules map a `NeighborSignature` to an output colour.
  - `learn_ca_rule`, `apply_ca_rule`, `verify_ca_rule` and `apply_ca_steps` work
    with single rules.
  - `try_ca_solve(examples, max_steps)` returns a `CaSolution`.
- `arcsynth.smart_prims` has transforms that learn their settings from examples.
  These cover colour maps, self-tiling, tiling, fixed sub-grids, dropping repeated
  rows or columns, and repairing periodic patterns. `majority_vote` gives the
  per-cell majority colour. `try_smart_transforms(examples)` returns a
  `SmartTransform`.
- `arcsynth.object_ops` works on objects:
  - `extend_markers_to_lines` takes a `LineDir`.
  - `stamp_plus`, `stamp_x` and `stamp_box` stamp shapes around cells.
  - `complete_bbox`, `draw_bboxes` and `sort_objects_by_size` work on bounding
    boxes and object layout.
  - `try_learn_stamp_rules` learns `StampRule` values and `apply_stamp_rules`
    applies them.
  - `try_object_solve(examples)` returns an `ObjectSolution`.
- `arcsynth.fingerprint` fingerprints grids:
  - `GridFingerprint.compute` gives the hash, the shape and a colour signature.
  - `MultiResFingerprint.compute` also hashes the four quadrants, and its
    `similarity` method compares two fingerprints.
  - `FingerprintSet` stores the hashes of grids. It has `insert`, `contains`,
    `in` and `len`.

Each solver that learns from examples returns an object with an `apply(grid)` method
and returns `None` when nothing fits. `SmartTransform` and `ObjectSolution` also have
a `name()` method.

## Example

```python
from arcsynth.bidir import BidirSearch
from arcsynth.dsl import Op, Prim
from arcsynth.enumeration import synthesize

grid = [[1, 2, 3], [4, 5, 6]]
target = Prim(Op.FLIP_V).apply(Prim(Op.FLIP_H).apply(grid))

result = BidirSearch(5000).search(grid, target, [Prim(Op.FLIP_H), Prim(Op.FLIP_V)], 4)
assert result.program.apply(grid) == target

found = synthesize([(grid, target)], 2)
assert found.program.apply(grid) == target
print(found.program.op, found.checked)
```

```python
from arcsynth.smart_prims import try_smart_transforms

solution = try_smart_transforms([([[1, 2]], [[3, 4]]), ([[2, 1]], [[4, 3]])])
print(solution.name())             # color_map
print(solution.apply([[1, 1, 2]]))  # [[3, 3, 4]]
```

## What it does not do

The package is a library only. It does not have:

- a command-line program,
- a loader for puzzle files,
- a single entry point that runs every strategy on a task and picks an answer.

To solve a task, load the grids yourself and call the solvers you want.

## Running the tests

```
pytest
```