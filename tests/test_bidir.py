import pytest

from arcsynth.bidir import BidirSearch, grid_hash, inverse, invertible_subset
from arcsynth.dsl import Op, Prim


def P(op, *args):
    return Prim(op, *args)


def test_inverse_rotate():
    assert inverse(P(Op.ROTATE_CW)) == P(Op.ROTATE_CCW)
    assert inverse(P(Op.ROTATE_CCW)) == P(Op.ROTATE_CW)
    assert inverse(P(Op.ROTATE_180)) == P(Op.ROTATE_180)


@pytest.mark.parametrize("op", [Op.FLIP_H, Op.FLIP_V, Op.TRANSPOSE, Op.INVERT])
def test_inverse_self_inverse(op):
    assert inverse(P(op)) == P(op)


def test_inverse_color_swap():
    assert inverse(P(Op.REPLACE_COLOR, 1, 2)) == P(Op.REPLACE_COLOR, 2, 1)


def test_inverse_lossy_returns_none():
    assert inverse(P(Op.GRAVITY_DOWN)) is None
    assert inverse(P(Op.KEEP_LARGEST_OBJECT)) is None
    assert inverse(P(Op.FILL_COLOR, 1)) is None


def test_invertible_subset_filters():
    prims = [P(Op.ROTATE_CW), P(Op.GRAVITY_DOWN), P(Op.FLIP_H), P(Op.FILL_COLOR, 1)]
    pairs = invertible_subset(prims)
    assert len(pairs) == 2
    assert pairs[0] == (P(Op.ROTATE_CW), P(Op.ROTATE_CCW))
    assert pairs[1] == (P(Op.FLIP_H), P(Op.FLIP_H))


def test_bidir_finds_identity():
    grid = [[1, 2], [3, 4]]
    result = BidirSearch(1000).search(grid, grid, [P(Op.ROTATE_CW), P(Op.FLIP_H)], 4)
    assert result is not None
    assert result.program == P(Op.IDENTITY)
    assert result.method == "identity"


def test_bidir_finds_single_step():
    inp = [[1, 2], [3, 4]]
    target = P(Op.FLIP_H).apply(inp)
    prims = [P(Op.ROTATE_CW), P(Op.FLIP_H), P(Op.FLIP_V), P(Op.TRANSPOSE)]
    result = BidirSearch(1000).search(inp, target, prims, 4)
    assert result is not None
    assert result.program.apply(inp) == target
    assert result.method == "bidirectional"
    assert result.forward_depth == 1
    assert result.backward_depth == 0


def test_bidir_finds_two_step():
    inp = [[1, 2, 3], [4, 5, 6]]
    target = P(Op.FLIP_V).apply(P(Op.FLIP_H).apply(inp))
    prims = [P(Op.ROTATE_CW), P(Op.ROTATE_CCW), P(Op.FLIP_H), P(Op.FLIP_V),
             P(Op.TRANSPOSE), P(Op.ROTATE_180)]
    result = BidirSearch(5000).search(inp, target, prims, 4)
    assert result is not None
    assert result.program.apply(inp) == target


def test_bidir_multi_example():
    ex1_in = [[1, 2], [3, 4]]
    ex2_in = [[5, 6], [7, 8]]
    flip = P(Op.FLIP_H)
    examples = [(ex1_in, flip.apply(ex1_in)), (ex2_in, flip.apply(ex2_in))]
    prims = [P(Op.FLIP_H), P(Op.FLIP_V), P(Op.ROTATE_CW)]
    result = BidirSearch(5000).search_all(examples, prims, 4)
    assert result is not None
    assert all(result.program.apply(i) == o for i, o in examples)


def test_search_all_empty_examples():
    assert BidirSearch(100).search_all([], [P(Op.FLIP_H)], 4) is None


def test_search_all_rejects_program_failing_later_example():
    examples = [
        ([[1, 2]], [[2, 1]]),
        ([[3, 4]], [[3, 4, 4]]),
    ]
    assert BidirSearch(1000).search_all(examples, [P(Op.FLIP_H)], 2) is None


def test_unreachable_target_returns_none():
    inp = [[1, 2], [3, 4]]
    target = [[9, 9], [9, 9]]
    assert BidirSearch(50).search(inp, target, [P(Op.FLIP_H), P(Op.FLIP_V)], 4) is None


def test_grid_hash_of_empty_grid_is_offset_basis():
    assert grid_hash([]) == 0xCBF29CE484222325


def test_grid_hash_deterministic_and_sensitive():
    a = [[1, 2], [3, 4]]
    assert grid_hash(a) == grid_hash([[1, 2], [3, 4]])
    assert grid_hash(a) != grid_hash([[1, 2], [3, 5]])
    assert 0 <= grid_hash(a) < 2 ** 64