"""
Mesh author: one corner class -> bevel geometry.

The tile is a unit cube centred on the lattice position. Its two Z caps and
four side faces are inspected in turn; depending on how many corners of a
face are empty and which surface types border them, bevel profiles from the
GeneratorSettings are rotated/reflected into place and appended as line
segments to the surface A (mesh1) or surface B (mesh2) buffer.

Every segment (a, b) is finally emitted as the triangle (a, b, origin), so
each buffer is a flat triangle list. A wireframe of corner markers is built
alongside for inspection in a viewer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Set, Tuple

import numpy as np

from .corners import BOTTOM_CORNERS, Corner, TOP_CORNERS, Vec3
from .profiles.generator_settings import GeneratorSettings, Point
from .symmetry import rotate_corner, rotate_vector

logger = logging.getLogger(__name__)

# Coordinates are compared at this precision when de-duplicating segments
_KEY_DECIMALS = 5


class MissingProfileError(ValueError):
    """A situation selected a bevel profile that cannot be used.

    Attributes:
        profile: Name of the profile
        reason: What is wrong with it
    """

    def __init__(self, profile: str, reason: str):
        self.profile = profile
        self.reason = reason
        super().__init__(f"Profile '{profile}' {reason}")


def required_profile(settings: GeneratorSettings, name: str) -> List[Point]:
    """Return a profile the current situation needs, or raise.

    Raises:
        MissingProfileError: If the profile is empty or has an odd point count.
    """
    points = settings.profile(name)
    if not points:
        raise MissingProfileError(name, "is empty")
    if len(points) % 2:
        raise MissingProfileError(name, f"has an odd number of points ({len(points)})")
    return points


def _empty_buffer() -> np.ndarray:
    return np.zeros((0, 3), dtype=np.float32)


@dataclass
class VisualTileMesh:
    """Geometry for one corner class.

    Attributes:
        name: Debug name of the class (set by the enumerator)
        mesh1: Surface A triangles, float32 (N, 3), three rows per triangle
        mesh2: Surface B triangles, same layout
        debug_mesh: Corner marker lines, float32 (M, 3), two rows per line
    """
    name: str = ""
    mesh1: np.ndarray = field(default_factory=_empty_buffer)
    mesh2: np.ndarray = field(default_factory=_empty_buffer)
    debug_mesh: np.ndarray = field(default_factory=_empty_buffer)

    @property
    def triangle_count(self) -> int:
        return (len(self.mesh1) + len(self.mesh2)) // 3

    @property
    def is_empty(self) -> bool:
        return self.triangle_count == 0


def _key(v: Vec3) -> Tuple[float, float, float]:
    # + 0.0 folds -0.0 into 0.0
    return tuple(round(float(c), _KEY_DECIMALS) + 0.0 for c in v)


class _SegmentBuffer:
    """Ordered, de-duplicated list of line segments."""

    def __init__(self):
        self.segments: List[Tuple[Vec3, Vec3]] = []
        self._seen: Set[Tuple[tuple, tuple]] = set()

    def add(self, a: Vec3, b: Vec3) -> None:
        key = (_key(a), _key(b))
        if key in self._seen or key[::-1] in self._seen:
            return
        self._seen.add(key)
        self.segments.append((a, b))

    def add_profile(self, points: List[Point], place: Callable[[Point], Vec3]) -> None:
        for i in range(0, len(points), 2):
            self.add(place(points[i]), place(points[i + 1]))

    def triangles(self) -> np.ndarray:
        if not self.segments:
            return _empty_buffer()
        origin = (0.0, 0.0, 0.0)
        rows = [v for a, b in self.segments for v in (a, b, origin)]
        return np.asarray(rows, dtype=np.float32).reshape(-1, 3)


class _TileAuthor:
    """Applies the cap and side rule tables to one set of corner masks."""

    def __init__(self, settings: GeneratorSettings, empty: int, surface_a: int, surface_b: int):
        self.settings = settings
        self.empty = empty
        self.surface_a = surface_a
        self.surface_b = surface_b
        self.mesh1 = _SegmentBuffer()
        self.mesh2 = _SegmentBuffer()
        self.debug: List[Vec3] = []

    def is_empty(self, corner: int) -> bool:
        return bool(self.empty >> corner & 1)

    def is_a(self, corner: int) -> bool:
        return bool(self.surface_a >> corner & 1)

    def is_b(self, corner: int) -> bool:
        return bool(self.surface_b >> corner & 1)

    def buffer_for(self, surface_a: bool) -> _SegmentBuffer:
        return self.mesh1 if surface_a else self.mesh2

    # ------------------------------------------------------------------
    # Debug markers
    # ------------------------------------------------------------------

    def add_debug_markers(self) -> None:
        """Diagonal tick on surface A corners, axis tripod on surface B corners."""
        for corner in Corner:
            x, y, z = corner.direction
            tip = (x * 0.5, y * 0.5, z * 0.5)
            if self.is_a(corner):
                self.debug += [tip, (x * 0.4, y * 0.4, z * 0.4)]
            if self.is_b(corner):
                self.debug += [
                    tip, (x * 0.4, y * 0.5, z * 0.5),
                    tip, (x * 0.5, y * 0.4, z * 0.5),
                    tip, (x * 0.5, y * 0.5, z * 0.4),
                ]

    # ------------------------------------------------------------------
    # Caps (top / bottom faces)
    # ------------------------------------------------------------------

    def add_cap_profile(self, surface_a: bool, name: str, rotation: int, z: float,
                        mirror: bool = False) -> None:
        def place(v: Point) -> Vec3:
            x, y, _ = v
            if mirror:
                x, y = y, x
            rx, ry, rz = rotate_vector((x, y, v[2]), rotation)
            return (rx, ry, rz + z)

        self.buffer_for(surface_a).add_profile(required_profile(self.settings, name), place)

    def add_cap(self, top: bool) -> None:
        z = 0.5 if top else -0.5
        layer = TOP_CORNERS if top else BOTTOM_CORNERS
        empty_count = sum(1 for c in layer if self.is_empty(c))

        def at(base: Corner, rotation: int) -> Corner:
            return rotate_corner(base | Corner.NNP if top else base, rotation)

        if empty_count == 1:
            for r in range(4):
                if not self.is_empty(at(Corner.NNN, r)):
                    continue
                left, right = at(Corner.NPN, r), at(Corner.PNN, r)
                if self.is_a(left) and self.is_a(right):
                    self.add_cap_profile(True, "type1_vertical_inside", r, z)
                elif self.is_b(left) and self.is_b(right):
                    self.add_cap_profile(False, "type2_vertical_inside", r, z)
                elif self.is_a(left) and self.is_b(right):
                    self.add_cap_profile(True, "mixed1_vertical_inside", r, z)
                    self.add_cap_profile(False, "mixed2_vertical_inside", r, z)
                elif self.is_b(left) and self.is_a(right):
                    # Same seam seen from the other side: mirror across x == y
                    self.add_cap_profile(True, "mixed1_vertical_inside", r, z, mirror=True)
                    self.add_cap_profile(False, "mixed2_vertical_inside", r, z, mirror=True)
                break

        elif empty_count == 2:
            diagonal = (
                (self.is_empty(at(Corner.NNN, 0)) and self.is_empty(at(Corner.PPN, 0)))
                or (self.is_empty(at(Corner.NPN, 0)) and self.is_empty(at(Corner.PNN, 0)))
            )
            if diagonal:
                for r in range(4):
                    corner = at(Corner.NNN, r)
                    if self.is_a(corner):
                        self.add_cap_profile(True, "type1_vertical_outside", r, z)
                    elif self.is_b(corner):
                        self.add_cap_profile(False, "type2_vertical_outside", r, z)
            else:
                for r in range(4):
                    if self.is_empty(at(Corner.NNN, r)) and self.is_empty(at(Corner.NPN, r)):
                        near = self.buffer_for(self.is_a(at(Corner.PNN, r)))
                        far = self.buffer_for(self.is_a(at(Corner.PPN, r)))
                        mid = rotate_vector((0.0, 0.0, z), r)
                        near.add(rotate_vector((0.0, -0.5, z), r), mid)
                        far.add(mid, rotate_vector((0.0, 0.5, z), r))
                        break

        elif empty_count == 3:
            for r in range(4):
                corner = at(Corner.NNN, r)
                if self.is_a(corner):
                    self.add_cap_profile(True, "type1_vertical_outside", r, z)
                    break
                if self.is_b(corner):
                    self.add_cap_profile(False, "type2_vertical_outside", r, z)
                    break

    # ------------------------------------------------------------------
    # Sides (the four faces around Z)
    # ------------------------------------------------------------------

    @staticmethod
    def face_corner(axis: int, flip_v: bool, flip_h: bool) -> Corner:
        """Corner of side face ``axis``; flip_v picks the top, flip_h the +Y half."""
        base = (Corner.NNP if flip_v else 0) | (Corner.NPN if flip_h else 0)
        return rotate_corner(base, axis)

    @staticmethod
    def side_point(v: Vec3, axis: int, flip_h: bool, flip_v: bool) -> Vec3:
        x, y, z = v
        return rotate_vector((x, -y if flip_h else y, -z if flip_v else z), axis)

    def add_side_profile(self, surface_a: bool, name: str, axis: int,
                         flip_h: bool, flip_v: bool) -> None:
        self.buffer_for(surface_a).add_profile(
            required_profile(self.settings, name),
            lambda v: self.side_point(v, axis, flip_h, flip_v),
        )

    def add_side_segment(self, surface_a: bool, a: Vec3, b: Vec3, axis: int,
                         flip_h: bool, flip_v: bool) -> None:
        self.buffer_for(surface_a).add(
            self.side_point(a, axis, flip_h, flip_v),
            self.side_point(b, axis, flip_h, flip_v),
        )

    def add_side(self, axis: int) -> None:
        fc = self.face_corner
        face = [fc(axis, v, h) for v in (False, True) for h in (False, True)]
        empty_count = sum(1 for c in face if self.is_empty(c))
        flips = [(v, h) for v in (False, True) for h in (False, True)]

        if empty_count == 1:
            for fv, fh in flips:
                if not self.is_empty(fc(axis, fv, fh)):
                    continue
                hori = fc(axis, fv, not fh)
                vert = fc(axis, not fv, fh)
                if self.is_a(hori) and self.is_a(vert):
                    self.add_side_profile(True, "type1_horizontal_inside", axis, fh, fv)
                elif self.is_b(hori) and self.is_b(vert):
                    self.add_side_profile(False, "type2_horizontal_inside", axis, fh, fv)
                elif self.is_a(hori) and self.is_b(vert):
                    self.add_side_profile(True, "mixed_side_vertical_1_inside", axis, fh, fv)
                    self.add_side_profile(False, "mixed_side_horizontal_2_inside", axis, fh, fv)
                elif self.is_b(hori) and self.is_a(vert):
                    self.add_side_profile(True, "mixed_side_horizontal_1_inside", axis, fh, fv)
                    self.add_side_profile(False, "mixed_side_vertical_2_inside", axis, fh, fv)

        elif empty_count == 2:
            for fv, fh in flips:
                nn = fc(axis, fv, fh)
                pn = fc(axis, fv, not fh)
                pp = fc(axis, not fv, not fh)
                np_ = fc(axis, not fv, fh)

                if self.is_empty(np_) and self.is_empty(pn):
                    for corner, h, v in ((nn, fh, fv), (pp, not fh, not fv)):
                        if self.is_a(corner):
                            self.add_side_profile(True, "type1_horizontal_outside", axis, h, v)
                        if self.is_b(corner):
                            self.add_side_profile(False, "type2_horizontal_outside", axis, h, v)
                    continue

                if self.is_empty(np_) and self.is_empty(pp):
                    # Bottom row solid: split the seam at the face centre
                    self.add_side_segment(self.is_a(nn), (-0.5, -0.5, 0.0), (-0.5, 0.0, 0.0), axis, fh, fv)
                    self.add_side_segment(self.is_a(pn), (-0.5, 0.0, 0.0), (-0.5, 0.5, 0.0), axis, fh, fv)
                if self.is_empty(pn) and self.is_empty(pp):
                    # Near column solid
                    self.add_side_segment(self.is_a(nn), (-0.5, 0.0, -0.5), (-0.5, 0.0, 0.0), axis, fh, fv)
                    self.add_side_segment(self.is_a(np_), (-0.5, 0.0, 0.0), (-0.5, 0.0, 0.5), axis, fh, fv)

        elif empty_count == 3:
            for fv, fh in flips:
                corner = fc(axis, fv, fh)
                if self.is_a(corner):
                    self.add_side_profile(True, "type1_horizontal_outside", axis, fh, fv)
                    break
                if self.is_b(corner):
                    self.add_side_profile(False, "type2_horizontal_outside", axis, fh, fv)
                    break

    def build(self, name: str) -> VisualTileMesh:
        debug = np.asarray(self.debug, dtype=np.float32).reshape(-1, 3) if self.debug else _empty_buffer()
        return VisualTileMesh(
            name=name,
            mesh1=self.mesh1.triangles(),
            mesh2=self.mesh2.triangles(),
            debug_mesh=debug,
        )


def generate_visual_tile(
    settings: GeneratorSettings,
    empty: int,
    surface_a: int,
    surface_b: int,
    name: str = "",
) -> VisualTileMesh:
    """Author the bevel geometry of one corner class.

    Args:
        settings: Bevel profile tables
        empty: Mask of empty corners
        surface_a: Mask of surface A corners (hidden corners included)
        surface_b: Mask of surface B corners (hidden corners included)
        name: Debug name stored on the result

    Returns:
        VisualTileMesh with float32 triangle buffers and debug lines.

    Raises:
        MissingProfileError: If a situation that applies needs a profile that
            is empty or malformed in ``settings``.
    """
    author = _TileAuthor(settings, empty, surface_a, surface_b)
    author.add_debug_markers()
    for top in (False, True):
        author.add_cap(top)
    for axis in range(4):
        author.add_side(axis)

    mesh = author.build(name)
    logger.debug(
        "Authored %s: %d surface A / %d surface B triangles",
        name or f"{empty:08b}/{surface_a:08b}/{surface_b:08b}",
        len(mesh.mesh1) // 3, len(mesh.mesh2) // 3,
    )
    return mesh
