from arcsynth.dsl import Op, Prim, all_primitives
from arcsynth.heuristics import (
    ColorChange,
    DimChange,
    FeatureProfile,
    analyze_features,
    select_primitives,
)


def test_dim_same_detected():
    prof = analyze_features([([[1, 2], [3, 4]], [[4, 3], [2, 1]])])
    assert prof.dim_change is DimChange.SAME


def test_dim_transposed_detected():
    inp = [[1, 2, 3], [4, 5, 6]]
    out = [[1, 4], [2, 5], [3, 6]]
    prof = analyze_features([(inp, out)])
    assert prof.dim_change is DimChange.TRANSPOSED


def test_dim_scaled_detected():
    inp = [[1, 2], [3, 4]]
    out = [[1, 1, 2, 2], [1, 1, 2, 2], [3, 3, 4, 4], [3, 3, 4, 4]]
    prof = analyze_features([(inp, out)])
    assert prof.dim_change is DimChange.SCALED
    assert prof.scale_factors == (2, 2)


def test_dim_cropped_and_padded():
    big = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    assert analyze_features([(big, [[5]])]).dim_change is DimChange.CROPPED
    assert analyze_features([([[1, 2], [3, 4]], big)]).dim_change is DimChange.PADDED


def test_color_bijection_detected():
    prof = analyze_features([([[1, 2], [0, 1]], [[3, 4], [0, 3]])])
    assert prof.color_change is ColorChange.BIJECTION


def test_color_reduction_and_expansion():
    assert analyze_features([([[1, 2]], [[1, 1]])]).color_change is ColorChange.REDUCTION
    assert analyze_features([([[1, 1]], [[1, 2]])]).color_change is ColorChange.EXPANSION


def test_heuristic_selects_fewer_prims():
    prof = analyze_features([([[1, 2], [3, 4]], [[4, 3], [2, 1]])])
    prims = select_primitives(prof)
    assert 0 < len(prims) < len(all_primitives())
    assert prims[0] == Prim(Op.IDENTITY)


def test_transpose_detected_selects_transpose():
    inp = [[1, 2, 3], [4, 5, 6]]
    out = [[1, 4], [2, 5], [3, 6]]
    prims = select_primitives(analyze_features([(inp, out)]))
    assert Prim(Op.TRANSPOSE) in prims


def test_symmetry_change_detected():
    inp = [[1, 2, 3], [4, 5, 6]]
    out = [[1, 2, 1], [4, 5, 4]]
    prof = analyze_features([(inp, out)])
    assert not prof.input_symmetric_h
    assert prof.output_symmetric_h
    assert Prim(Op.MIRROR_H) in select_primitives(prof)


def test_empty_examples():
    prof = analyze_features([])
    assert prof.dim_change is DimChange.SAME
    assert prof.same_grid is True
    assert prof.input_dims == (0, 0)


def test_reduction_selects_remove_and_replace():
    prims = select_primitives(analyze_features([([[1, 2]], [[1, 1]])]))
    assert Prim(Op.REMOVE_COLOR, 2) in prims
    assert Prim(Op.REPLACE_COLOR, 2, 1) in prims


def test_padded_selects_pad():
    prims = select_primitives(analyze_features([([[1, 2], [3, 4]], [[0] * 3] * 3)]))
    assert Prim(Op.PAD, 1, 0) in prims
    assert Prim(Op.BORDER_FILL, 9) in prims


def test_selection_has_no_duplicates():
    prof = FeatureProfile(
        object_delta=-1,
        color_change=ColorChange.BIJECTION,
        input_colors=[1, 2],
        output_colors=[2, 1],
    )
    prims = select_primitives(prof)
    assert len(prims) == len(set(prims))
    assert Prim(Op.REPLACE_COLOR, 1, 2) in prims


def test_object_delta_positive_adds_outline():
    prof = FeatureProfile(object_delta=2)
    prims = select_primitives(prof)
    assert Prim(Op.OUTLINE_OBJECTS, 5) in prims
    assert Prim(Op.FILL_INSIDE_OBJECTS, 0) in prims