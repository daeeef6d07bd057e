from arcsynth.dsl import Op, Prim
from arcsynth.enumeration import bottom_up_enumerate, synthesize


def test_identity_found_first():
    grid = [[1, 2], [3, 4]]
    result = synthesize([(grid, grid)], 1)
    assert result.program == Prim(Op.IDENTITY)
    assert result.checked == 1
    assert result.size == 1


def test_single_primitive_found():
    inp = [[1, 2, 3], [4, 5, 6]]
    out = Prim(Op.FLIP_H).apply(inp)
    result = synthesize([(inp, out)], 2)
    assert result.program.apply(inp) == out
    assert result.size == result.program.size()
    assert result.program.op is not Op.COMPOSE


def test_two_step_program_found():
    inp = [[1, 0, 2], [0, 3, 0]]
    out = Prim(Op.COMPOSE, Prim(Op.ROTATE_CW), Prim(Op.FILL_COLOR, 5)).apply(inp)
    result = synthesize([(inp, out)], 2)
    assert result.program.apply(inp) == out
    assert result.program.op is Op.COMPOSE
    assert result.size == result.program.size()


def test_program_fits_all_examples():
    pairs = [[[1, 2], [3, 4]], [[0, 5], [6, 0]]]
    examples = [(g, Prim(Op.TRANSPOSE).apply(g)) for g in pairs]
    result = synthesize(examples, 1)
    assert all(result.program.apply(i) == o for i, o in examples)


def test_no_solution_returns_none():
    assert synthesize([([[4]], [[9, 8, 7]])], 1) is None


def test_bottom_up_ranking():
    inp = [[1, 2], [3, 4]]
    out = Prim(Op.FLIP_V).apply(inp)
    ranked = bottom_up_enumerate([(inp, out)], 10)
    assert 0 < len(ranked) <= 10
    scores = [s for _, s in ranked]
    assert scores == sorted(scores, reverse=True)
    assert all(s > 0 for s in scores)
    best, best_score = ranked[0]
    assert best_score == 1.0
    assert best.apply(inp) == out


def test_bottom_up_zero_limit():
    grid = [[1]]
    assert bottom_up_enumerate([(grid, grid)], 0) == []