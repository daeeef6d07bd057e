"""Feature analysis of example pairs to narrow the primitives worth searching."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from arcsynth.dsl import Op, Prim
from arcsynth.grid import (
    Grid,
    connected_components,
    detect_period_h,
    detect_period_v,
    grid_dimensions,
    is_symmetric_h,
    is_symmetric_v,
    unique_colors,
)


class DimChange(Enum):
    """How the grid's shape changes from input to output."""

    SAME = "same"
    SCALED = "scaled"
    TRANSPOSED = "transposed"
    CROPPED = "cropped"
    PADDED = "padded"
    ARBITRARY = "arbitrary"


class ColorChange(Enum):
    """How the set of colours changes from input to output."""

    SAME = "same"
    BIJECTION = "bijection"
    REDUCTION = "reduction"
    EXPANSION = "expansion"
    COMPLEX = "complex"


@dataclass
class FeatureProfile:
    """Features of the first example pair; ``scale_factors`` is set for SCALED."""

    dim_change: DimChange = DimChange.SAME
    color_change: ColorChange = ColorChange.SAME
    object_delta: int = 0
    input_symmetric_h: bool = False
    input_symmetric_v: bool = False
    output_symmetric_h: bool = False
    output_symmetric_v: bool = False
    input_period_h: int | None = None
    input_period_v: int | None = None
    output_period_h: int | None = None
    output_period_v: int | None = None
    same_grid: bool = True
    input_colors: list[int] = field(default_factory=list)
    output_colors: list[int] = field(default_factory=list)
    input_dims: tuple[int, int] = (0, 0)
    output_dims: tuple[int, int] = (0, 0)
    scale_factors: tuple[int, int] | None = None


def _classify_dim_change(
    in_d: tuple[int, int], out_d: tuple[int, int]
) -> tuple[DimChange, tuple[int, int] | None]:
    if in_d == out_d:
        return DimChange.SAME, None
    if in_d == (out_d[1], out_d[0]):
        return DimChange.TRANSPOSED, None
    if min(*in_d, *out_d) > 0 and out_d[0] % in_d[0] == 0 and out_d[1] % in_d[1] == 0:
        rf, cf = out_d[0] // in_d[0], out_d[1] // in_d[1]
        if rf > 1 or cf > 1:
            return DimChange.SCALED, (rf, cf)
    if out_d[0] < in_d[0] or out_d[1] < in_d[1]:
        return DimChange.CROPPED, None
    if out_d[0] > in_d[0] or out_d[1] > in_d[1]:
        return DimChange.PADDED, None
    return DimChange.ARBITRARY, None


def _classify_color_change(in_c: list[int], out_c: list[int]) -> ColorChange:
    if in_c == out_c:
        return ColorChange.SAME
    n_in, n_out = len(set(in_c)), len(set(out_c))
    if n_in == n_out:
        return ColorChange.BIJECTION
    if n_out < n_in:
        return ColorChange.REDUCTION
    return ColorChange.EXPANSION


def analyze_features(examples) -> FeatureProfile:
    """Profile the first example pair; an empty list gives the default profile."""
    examples = list(examples)
    if not examples:
        return FeatureProfile()
    inp, out = examples[0]
    in_dims, out_dims = grid_dimensions(inp), grid_dimensions(out)
    in_colors, out_colors = unique_colors(inp), unique_colors(out)
    dim_change, factors = _classify_dim_change(in_dims, out_dims)
    return FeatureProfile(
        dim_change=dim_change,
        color_change=_classify_color_change(in_colors, out_colors),
        object_delta=len(connected_components(out, True)) - len(connected_components(inp, True)),
        input_symmetric_h=is_symmetric_h(inp),
        input_symmetric_v=is_symmetric_v(inp),
        output_symmetric_h=is_symmetric_h(out),
        output_symmetric_v=is_symmetric_v(out),
        input_period_h=detect_period_h(inp),
        input_period_v=detect_period_v(inp),
        output_period_h=detect_period_h(out),
        output_period_v=detect_period_v(out),
        same_grid=inp == out,
        input_colors=in_colors,
        output_colors=out_colors,
        input_dims=in_dims,
        output_dims=out_dims,
        scale_factors=factors,
    )


def _dimension_prims(profile: FeatureProfile) -> list[Prim]:
    kind = profile.dim_change
    if kind is DimChange.SAME:
        prims = [
            Prim(op)
            for op in (
                Op.ROTATE_CW, Op.ROTATE_CCW, Op.ROTATE_180, Op.FLIP_H, Op.FLIP_V,
                Op.GRAVITY_DOWN, Op.GRAVITY_UP, Op.GRAVITY_LEFT, Op.GRAVITY_RIGHT,
                Op.INVERT, Op.SORT_ROWS_BY_COLOR, Op.SORT_COLS_BY_COLOR,
                Op.KEEP_LARGEST_OBJECT, Op.KEEP_SMALLEST_OBJECT,
                Op.EXTEND_H_LINES, Op.EXTEND_V_LINES, Op.EXTEND_CROSS,
                Op.DIAG_FILL_TL, Op.DIAG_FILL_TR,
            )
        ]
        for d in (-2, -1, 1, 2):
            prims.append(Prim(Op.TRANSLATE, d, 0))
            prims.append(Prim(Op.TRANSLATE, 0, d))
        for ic in profile.input_colors:
            prims.extend(
                Prim(Op.REPLACE_COLOR, ic, oc) for oc in profile.output_colors if ic != oc
            )
            prims.append(Prim(Op.FILTER_COLOR, ic))
            prims.append(Prim(Op.FILL_COLOR, ic))
        return prims
    if kind is DimChange.TRANSPOSED:
        return [Prim(Op.TRANSPOSE), Prim(Op.ROTATE_CW), Prim(Op.ROTATE_CCW)]
    if kind is DimChange.SCALED:
        prims = [Prim(op, s) for s in range(2, 5) for op in (Op.SCALE, Op.REPEAT_H, Op.REPEAT_V)]
        if profile.scale_factors is not None:
            rf, cf = profile.scale_factors
            if rf == cf:
                prims.append(Prim(Op.SCALE, rf))
        return prims + [Prim(Op.MIRROR_H), Prim(Op.MIRROR_V)]
    if kind is DimChange.CROPPED:
        prims = [Prim(Op.KEEP_LARGEST_OBJECT), Prim(Op.KEEP_SMALLEST_OBJECT), Prim(Op.CROP_TO_BBOX)]
        return prims + [Prim(Op.EXTRACT_OBJECT, i) for i in range(5)]
    if kind is DimChange.PADDED:
        prims = [p for c in range(10) for p in (Prim(Op.PAD, 1, c), Prim(Op.BORDER_FILL, c))]
        return prims + [Prim(Op.MIRROR_H), Prim(Op.MIRROR_V)]
    prims = [Prim(Op.KEEP_LARGEST_OBJECT), Prim(Op.KEEP_SMALLEST_OBJECT), Prim(Op.TRANSPOSE)]
    return prims + [Prim(Op.EXTRACT_OBJECT, i) for i in range(3)]


def _color_prims(profile: FeatureProfile) -> list[Prim]:
    ins, outs = profile.input_colors, profile.output_colors
    prims: list[Prim] = []
    if profile.color_change is ColorChange.BIJECTION:
        prims.extend(Prim(Op.REPLACE_COLOR, ic, oc) for ic in ins for oc in outs if ic != oc)
    elif profile.color_change is ColorChange.REDUCTION:
        for c in ins:
            if c not in outs:
                prims.append(Prim(Op.REMOVE_COLOR, c))
                prims.extend(Prim(Op.REPLACE_COLOR, c, oc) for oc in outs)
    elif profile.color_change is ColorChange.EXPANSION:
        for c in outs:
            if c not in ins:
                prims.extend(
                    Prim(op, c)
                    for op in (Op.FILL_COLOR, Op.BORDER_FILL, Op.OUTLINE_OBJECTS, Op.FILL_INSIDE_OBJECTS)
                )
        prims.extend(Prim(Op.FILL_ENCLOSED, c) for c in ins)
    return prims


def select_primitives(profile: FeatureProfile) -> list[Prim]:
    """Primitives the profile suggests, in order of suggestion, without duplicates."""
    prims = [Prim(Op.IDENTITY)]
    prims.extend(_dimension_prims(profile))

    if profile.output_symmetric_h and not profile.input_symmetric_h:
        prims += [Prim(Op.MIRROR_H), Prim(Op.FLIP_H)]
    if profile.output_symmetric_v and not profile.input_symmetric_v:
        prims += [Prim(Op.MIRROR_V), Prim(Op.FLIP_V)]

    if profile.object_delta < 0:
        prims += [Prim(Op.KEEP_LARGEST_OBJECT), Prim(Op.KEEP_SMALLEST_OBJECT)]
        prims.extend(Prim(Op.REMOVE_COLOR, c) for c in range(10))
    if profile.object_delta > 0:
        for c in range(10):
            prims += [Prim(Op.OUTLINE_OBJECTS, c), Prim(Op.FILL_INSIDE_OBJECTS, c)]

    prims.extend(_color_prims(profile))
    return list(dict.fromkeys(prims))