"""
Symmetry group acting on corner configurations.

Sixteen rigid transforms: four yaw rotations about +Z combined with an
optional X flip and an optional Z flip. A transform is applied as
flip_x, then flip_z, then ``yaw`` quarter turns.

Composition and inversion are answered by brute-force search over the 16
elements, which keeps every operation trivially checkable against apply().
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from .corners import CORNER_COUNT, Corner, CornerConfiguration, Vec3, Vec3i

T = TypeVar("T")

# new[i] = old[_YAW_SOURCE[i]] for one quarter turn:
# NNN <- NPN <- PPN <- PNN <- NNN, and the same cycle on the top layer.
_YAW_SOURCE = (
    Corner.NPN, Corner.NPP, Corner.PPN, Corner.PPP,
    Corner.NNN, Corner.NNP, Corner.PNN, Corner.PNP,
)
_FLIP_X_BIT = 0b100
_FLIP_Z_BIT = 0b001

# (cos, sin) for each quarter turn, exact
_QUARTER_TURNS = ((1, 0), (0, 1), (-1, 0), (0, -1))


@dataclass(frozen=True)
class SymmetryTransform:
    """One element of the 16-element symmetry group.

    Attributes:
        yaw: Quarter turns about +Z (0..3)
        flip_x: Mirror across the YZ plane before rotating
        flip_z: Mirror across the XY plane before rotating
    """
    yaw: int = 0
    flip_x: bool = False
    flip_z: bool = False

    def __post_init__(self):
        if not 0 <= self.yaw <= 3:
            raise ValueError(f"yaw must be in 0..3, got {self.yaw}")

    @property
    def is_identity(self) -> bool:
        return self.yaw == 0 and not self.flip_x and not self.flip_z

    def instance_matrix(self, position: Vec3i, offset: float = 1.0) -> np.ndarray:
        """4x4 placement matrix for a tile instanced at a lattice position.

        translate(position + offset) * rotZ(yaw * 90deg) * scale(fx, 1, fz)
        """
        cos, sin = _QUARTER_TURNS[self.yaw]
        rotation = np.array([
            [cos, -sin, 0.0, 0.0],
            [sin, cos, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ], dtype=np.float64)
        scale = np.diag([
            -1.0 if self.flip_x else 1.0,
            1.0,
            -1.0 if self.flip_z else 1.0,
            1.0,
        ])
        translation = np.eye(4)
        translation[:3, 3] = np.asarray(position, dtype=np.float64) + offset
        return translation @ rotation @ scale

    def to_dict(self) -> dict:
        return {"yaw": self.yaw, "flip_x": self.flip_x, "flip_z": self.flip_z}

    def __str__(self) -> str:
        return f"yaw={self.yaw} flip_x={int(self.flip_x)} flip_z={int(self.flip_z)}"


IDENTITY = SymmetryTransform()

# yaw varies fastest so the identity comes first
ALL_TRANSFORMS: Tuple[SymmetryTransform, ...] = tuple(
    SymmetryTransform(yaw=i & 0b11, flip_x=bool(i & 0b100), flip_z=bool(i & 0b1000))
    for i in range(16)
)


# ---------------------------------------------------------------------------
# Applying transforms
# ---------------------------------------------------------------------------

def _permute(values: Sequence[T], transform: SymmetryTransform) -> Tuple[T, ...]:
    if len(values) != CORNER_COUNT:
        raise ValueError(f"Expected {CORNER_COUNT} corner values, got {len(values)}")
    out = list(values)
    if transform.flip_x:
        out = [out[i ^ _FLIP_X_BIT] for i in range(CORNER_COUNT)]
    if transform.flip_z:
        out = [out[i ^ _FLIP_Z_BIT] for i in range(CORNER_COUNT)]
    for _ in range(transform.yaw):
        out = [out[_YAW_SOURCE[i]] for i in range(CORNER_COUNT)]
    return tuple(out)


def apply_transform(config: Any, transform: SymmetryTransform) -> Any:
    """Apply a transform to a configuration (or any 8-element sequence).

    A CornerConfiguration comes back as a CornerConfiguration; any other
    sequence comes back as a tuple.
    """
    if isinstance(config, CornerConfiguration):
        return CornerConfiguration(_permute(config.labels, transform))
    return _permute(config, transform)


# Eight distinct values: every group element moves it to a different tuple
_PROBE = tuple(range(CORNER_COUNT))


def _find_by_permutation(permuted: Tuple[int, ...]) -> SymmetryTransform:
    for candidate in ALL_TRANSFORMS:
        if _permute(_PROBE, candidate) == permuted:
            return candidate
    raise RuntimeError(f"Permutation {permuted} is not in the symmetry group")


def compose(first: SymmetryTransform, second: SymmetryTransform) -> SymmetryTransform:
    """Return t such that apply(c, t) == apply(apply(c, first), second)."""
    return _find_by_permutation(_permute(_permute(_PROBE, first), second))


def inverse(transform: SymmetryTransform) -> SymmetryTransform:
    for candidate in ALL_TRANSFORMS:
        if compose(transform, candidate).is_identity:
            return candidate
    raise RuntimeError(f"No inverse found for {transform}")


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def find_transforms(source: CornerConfiguration, target: CornerConfiguration) -> List[SymmetryTransform]:
    """All transforms t for which apply(source, t) matches target."""
    return [t for t in ALL_TRANSFORMS if apply_transform(source, t).matches(target)]


def is_equivalent(source: CornerConfiguration, target: CornerConfiguration) -> bool:
    return any(apply_transform(source, t).matches(target) for t in ALL_TRANSFORMS)


def get_rotation(
    source: CornerConfiguration,
    target: CornerConfiguration,
    seed: int,
) -> Optional[SymmetryTransform]:
    """Find a transform mapping source onto target.

    When several transforms match (symmetric configurations), one is drawn
    uniformly with a generator seeded from ``seed``.

    Returns:
        The chosen transform, or None if source cannot be mapped onto target.
    """
    candidates = find_transforms(source, target)
    if not candidates:
        return None
    rng = random.Random(seed)
    return rng.choice(candidates)


# ---------------------------------------------------------------------------
# Point / corner rotation about +Z
# ---------------------------------------------------------------------------

def rotate_vector(v: Union[Vec3, Sequence[float]], quarter_turns: int) -> Vec3:
    """Rotate a point counter-clockwise about +Z: (x, y) -> (-y, x) per turn."""
    x, y, z = v[0], v[1], v[2]
    turns = quarter_turns % 4
    if turns == 1:
        return (-y, x, z)
    if turns == 2:
        return (-x, -y, z)
    if turns == 3:
        return (y, -x, z)
    return (x, y, z)


def rotate_corner(corner: int, quarter_turns: int) -> Corner:
    """Corner index reached by rotating ``corner`` about +Z.

    Matches apply_transform: the label at ``corner`` ends up at
    ``rotate_corner(corner, t.yaw)`` for a pure yaw transform.
    """
    return Corner.from_direction(rotate_vector(Corner(corner).direction, quarter_turns))
