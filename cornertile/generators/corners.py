"""
Corner model for the dual (corner) lattice.

A lattice position sits between eight voxel cells. Each cell contributes one
corner label, and the eight labels together form a CornerConfiguration: the
key used by the offline enumerator, the tile-set file and the runtime matcher.

Corner index layout (x << 2 | y << 1 | z):

    NNN=0  NNP=1  NPN=2  NPP=3  PNN=4  PNP=5  PPN=6  PPP=7
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, IntEnum
from typing import Iterable, Iterator, Tuple

Vec3 = Tuple[float, float, float]
Vec3i = Tuple[int, int, int]

CORNER_COUNT = 8
FULL_MASK = 0xFF


class Corner(IntEnum):
    """Corner of the 2x2x2 cell window, named by axis sign (N=-, P=+)."""
    NNN = 0
    NNP = 1
    NPN = 2
    NPP = 3
    PNN = 4
    PNP = 5
    PPN = 6
    PPP = 7

    @property
    def offset(self) -> Vec3i:
        """Cell offset from the lattice position, each axis in {0, 1}."""
        return ((self >> 2) & 1, (self >> 1) & 1, self & 1)

    @property
    def direction(self) -> Vec3:
        """Unit-cube direction of this corner, each axis in {-1, +1}."""
        x, y, z = self.offset
        return (2.0 * x - 1.0, 2.0 * y - 1.0, 2.0 * z - 1.0)

    @classmethod
    def from_direction(cls, v: Vec3) -> 'Corner':
        """Return the corner whose direction has the same signs as v."""
        return cls((int(v[0] > 0) << 2) | (int(v[1] > 0) << 1) | int(v[2] > 0))


CORNER_OFFSETS: Tuple[Vec3i, ...] = tuple(c.offset for c in Corner)

# Corners sharing a Z layer, in index order
BOTTOM_CORNERS = (Corner.NNN, Corner.NPN, Corner.PNN, Corner.PPN)
TOP_CORNERS = (Corner.NNP, Corner.NPP, Corner.PNP, Corner.PPP)


class CornerLabel(Flag):
    """Label of one corner. Member values are the packed on-disk byte."""
    EMPTY = 0b001
    SURFACE_B = 0b010
    SURFACE_A = 0b100
    # Occluded solid corner, written by the ambiguity rule only
    HIDDEN = 0b110

    @classmethod
    def from_packed(cls, value: int) -> 'CornerLabel':
        """Decode a packed label byte, rejecting anything but a valid label.

        Raises:
            ValueError: If the byte is not one of the four valid encodings.
        """
        if isinstance(value, bool) or not isinstance(value, int) or value not in PACKED_LABELS:
            raise ValueError(f"Invalid packed corner label: {value!r}")
        return cls(value)

    @property
    def is_solid(self) -> bool:
        return bool(self & (CornerLabel.SURFACE_A | CornerLabel.SURFACE_B))

    @property
    def letter(self) -> str:
        return _LABEL_LETTERS[self.value]

    def matches(self, other: 'CornerLabel') -> bool:
        """True when both labels share a viable value."""
        return bool(self & other)


# Valid packed encodings: exactly one bit, or the hidden solid value
PACKED_LABELS = frozenset({0b001, 0b010, 0b100, 0b110})

_LABEL_LETTERS = {0b001: "E", 0b010: "B", 0b100: "A", 0b110: "H"}

_LETTER_LABELS = {
    "E": CornerLabel.EMPTY,
    "A": CornerLabel.SURFACE_A,
    "B": CornerLabel.SURFACE_B,
    "H": CornerLabel.HIDDEN,
}


def label_from_letter(letter: str) -> CornerLabel:
    """Parse a one-letter label (E, A, B, H), case-insensitive."""
    try:
        return _LETTER_LABELS[letter.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown corner label letter: {letter!r}") from None


def popcount(mask: int) -> int:
    return bin(mask & FULL_MASK).count("1")


@dataclass(frozen=True)
class CornerConfiguration:
    """Eight corner labels in Corner index order.

    Instances are immutable and hashable, so they serve directly as
    EntryPool keys (exact equality). Rotation equivalence is a separate
    question answered by the symmetry module.
    """
    labels: Tuple[CornerLabel, ...]

    def __post_init__(self):
        labels = tuple(self.labels)
        if len(labels) != CORNER_COUNT:
            raise ValueError(f"Expected {CORNER_COUNT} corner labels, got {len(labels)}")
        for label in labels:
            if not isinstance(label, CornerLabel) or label.value not in PACKED_LABELS:
                raise ValueError(f"Invalid corner label: {label!r}")
        object.__setattr__(self, "labels", labels)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls) -> 'CornerConfiguration':
        return cls((CornerLabel.EMPTY,) * CORNER_COUNT)

    @classmethod
    def from_masks(cls, empty: int, surface_a: int, surface_b: int) -> 'CornerConfiguration':
        """Build a configuration from three 8-bit corner masks.

        A corner present in both surface masks becomes HIDDEN.

        Raises:
            ValueError: If any corner ends up with no label or an invalid mix.
        """
        labels = []
        for i in range(CORNER_COUNT):
            bits = 0
            if empty >> i & 1:
                bits |= CornerLabel.EMPTY.value
            if surface_a >> i & 1:
                bits |= CornerLabel.SURFACE_A.value
            if surface_b >> i & 1:
                bits |= CornerLabel.SURFACE_B.value
            if bits not in PACKED_LABELS:
                raise ValueError(
                    f"Corner {Corner(i).name} has no valid label in masks "
                    f"empty={empty:08b} a={surface_a:08b} b={surface_b:08b}"
                )
            labels.append(CornerLabel(bits))
        return cls(tuple(labels))

    @classmethod
    def from_packed(cls, values: Iterable[int]) -> 'CornerConfiguration':
        return cls(tuple(CornerLabel.from_packed(v) for v in values))

    @classmethod
    def from_letters(cls, letters: str) -> 'CornerConfiguration':
        """Parse eight label letters in index order, e.g. ``"AEEEEEEE"``.

        Whitespace is ignored.
        """
        chars = [c for c in letters if not c.isspace()]
        return cls(tuple(label_from_letter(c) for c in chars))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def __getitem__(self, index: int) -> CornerLabel:
        return self.labels[index]

    def __iter__(self) -> Iterator[CornerLabel]:
        return iter(self.labels)

    def __len__(self) -> int:
        return CORNER_COUNT

    def to_packed(self) -> Tuple[int, ...]:
        return tuple(label.value for label in self.labels)

    def masks(self) -> Tuple[int, int, int]:
        """Return (empty, surface_a, surface_b) masks. HIDDEN sets both surfaces."""
        empty = surface_a = surface_b = 0
        for i, label in enumerate(self.labels):
            if label & CornerLabel.EMPTY:
                empty |= 1 << i
            if label & CornerLabel.SURFACE_A:
                surface_a |= 1 << i
            if label & CornerLabel.SURFACE_B:
                surface_b |= 1 << i
        return empty, surface_a, surface_b

    @property
    def empty_count(self) -> int:
        return sum(1 for label in self.labels if label == CornerLabel.EMPTY)

    @property
    def is_empty(self) -> bool:
        return self.empty_count == CORNER_COUNT

    def label_counts(self) -> Tuple[int, int, int]:
        """Popcounts of the (empty, surface_a, surface_b) masks."""
        return tuple(popcount(m) for m in self.masks())

    def matches(self, other: 'CornerConfiguration') -> bool:
        """True when every corner pair shares a viable label.

        For single-bit labels this is exact equality; a HIDDEN corner matches
        either surface but never EMPTY.
        """
        return all(a & b for a, b in zip(self.labels, other.labels))

    def letters(self) -> str:
        return "".join(label.letter for label in self.labels)

    def describe(self) -> str:
        """Compact ``NNN=A NNP=E ...`` listing for log messages."""
        return " ".join(f"{c.name}={self.labels[c].letter}" for c in Corner)

    def debug_name(self, index: int) -> str:
        """Human-readable class name used for exported scene nodes."""
        tags = [label.letter for label in self.labels]
        return (
            f"{index}: NNN{tags[Corner.NNN]} NNP{tags[Corner.NNP]}  NPN{tags[Corner.NPN]} NPP{tags[Corner.NPP]}  |  "
            f"PNN{tags[Corner.PNN]} PNP{tags[Corner.PNP]}  PPN{tags[Corner.PPN]} PPP{tags[Corner.PPP]}"
        )

    def __str__(self) -> str:
        return self.letters()
