"""Grid fingerprints for fast deduplication and approximate matching."""

from __future__ import annotations

from dataclasses import dataclass, field

from arcsynth.bidir import grid_hash
from arcsynth.grid import Grid

_MASK = (1 << 64) - 1
_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MIX_A = 0x517CC1B727220A95
_MIX_B = 0x6C62272E07BB0142


def _grid_shape(grid: Grid) -> int:
    rows = len(grid)
    cols = len(grid[0]) if grid else 0
    return ((rows << 16) | cols) & 0xFFFFFFFF


def _color_signature(grid: Grid) -> int:
    """Colours 0-9 each get 3 bits of log2 count; the top 2 bits hold the distinct count mod 4."""
    counts = [0] * 10
    for row in grid:
        for value in row:
            if value < 10:
                counts[value] += 1
    unique = sum(1 for n in counts if n)
    sig = 0
    for i, n in enumerate(counts):
        bucket = min(n.bit_length() - 1, 7) if n else 0
        sig |= bucket << (i * 3)
    return sig | ((unique & 3) << 30)


@dataclass(frozen=True)
class GridFingerprint:
    full: int
    shape: int
    color_sig: int

    @classmethod
    def compute(cls, grid: Grid) -> GridFingerprint:
        return cls(grid_hash(grid), _grid_shape(grid), _color_signature(grid))

    def same_shape(self, other: GridFingerprint) -> bool:
        return self.shape == other.shape

    def same_colors(self, other: GridFingerprint) -> bool:
        return self.color_sig == other.color_sig

    def structurally_similar(self, other: GridFingerprint) -> bool:
        """Same shape and same colour histogram signature."""
        return self.same_shape(other) and self.same_colors(other)


def _hash_region(grid: Grid, r0: int, r1: int, c0: int, c1: int) -> int:
    rows, cols = len(grid), len(grid[0])
    h = _FNV_OFFSET
    for r in range(r0, min(r1, rows)):
        for c in range(c0, min(c1, cols)):
            cell = ((r * _MIX_A) & _MASK) ^ ((c * _MIX_B) & _MASK) ^ grid[r][c]
            h = ((h * _FNV_PRIME) & _MASK) ^ cell
    return h


def _quadrant_hashes(grid: Grid) -> tuple[int, int, int, int]:
    if not grid:
        return (0, 0, 0, 0)
    rows, cols = len(grid), len(grid[0])
    mid_r, mid_c = rows // 2, cols // 2
    return (
        _hash_region(grid, 0, mid_r, 0, mid_c),
        _hash_region(grid, 0, mid_r, mid_c, cols),
        _hash_region(grid, mid_r, rows, 0, mid_c),
        _hash_region(grid, mid_r, rows, mid_c, cols),
    )


@dataclass(frozen=True)
class MultiResFingerprint:
    """Whole-grid fingerprint plus hashes of the four quadrants (TL, TR, BL, BR)."""

    full: GridFingerprint
    quadrants: tuple[int, int, int, int]

    @classmethod
    def compute(cls, grid: Grid) -> MultiResFingerprint:
        return cls(GridFingerprint.compute(grid), _quadrant_hashes(grid))

    def similarity(self, other: MultiResFingerprint) -> float:
        """1.0 for identical grids, 0.0 for different shapes, else the share of equal quadrants."""
        if self.full.full == other.full.full:
            return 1.0
        if not self.full.same_shape(other.full):
            return 0.0
        matching = sum(a == b for a, b in zip(self.quadrants, other.quadrants))
        return matching / 4.0


@dataclass
class FingerprintSet:
    """A set of grids remembered by their hashes."""

    _seen: set[int] = field(default_factory=set)

    def insert(self, grid: Grid) -> bool:
        """Add the grid; True if it was not seen before."""
        fp = grid_hash(grid)
        if fp in self._seen:
            return False
        self._seen.add(fp)
        return True

    def contains(self, grid: Grid) -> bool:
        return grid_hash(grid) in self._seen

    def __contains__(self, grid: Grid) -> bool:
        return self.contains(grid)

    def __len__(self) -> int:
        return len(self._seen)