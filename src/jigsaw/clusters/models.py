"""Runtime piece and cluster state — rigid groups sharing one transform."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from src.jigsaw.pieces.models import PieceDefinition


QUARTER_TURN = math.pi * 0.5


@dataclass(eq=False)
class Point:
    """Mutable 2D point.  Compared by identity so it can be a tween target."""

    x: float = 0.0
    y: float = 0.0

    def set(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(eq=False)
class Transform:
    """Local → parent mapping: ``position + R(rotation)·(local − pivot)``.

    Screen coordinates (Y down), so a positive rotation turns clockwise
    on screen.  ``position`` is where the pivot lands in the parent.
    """

    position: Point = field(default_factory=Point)
    rotation: float = 0.0
    pivot: Point = field(default_factory=Point)

    def to_parent(
        self, lx: float, ly: float, *, rotation: float | None = None,
    ) -> tuple[float, float]:
        """Map a local point to the parent space.

        *rotation* evaluates the mapping at another angle without
        touching the transform.
        """
        rot = self.rotation if rotation is None else rotation
        cos_r = math.cos(rot)
        sin_r = math.sin(rot)
        dx = lx - self.pivot.x
        dy = ly - self.pivot.y
        return (
            self.position.x + dx * cos_r - dy * sin_r,
            self.position.y + dx * sin_r + dy * cos_r,
        )

    def to_local(self, px: float, py: float) -> tuple[float, float]:
        """Inverse of :meth:`to_parent`."""
        cos_r = math.cos(self.rotation)
        sin_r = math.sin(self.rotation)
        dx = px - self.position.x
        dy = py - self.position.y
        return (
            self.pivot.x + dx * cos_r + dy * sin_r,
            self.pivot.y - dx * sin_r + dy * cos_r,
        )


@dataclass(eq=False)
class Piece:
    """A piece on the table.

    ``x, y`` is the core origin (top-left of the core cell) in the local
    space of whichever cluster currently holds the piece.
    """

    definition: PieceDefinition
    x: float = 0.0
    y: float = 0.0

    @property
    def id(self) -> str:
        return self.definition.id

    def local_bounds(self) -> tuple[float, float, float, float]:
        """Padded box in cluster-local space (min_x, min_y, max_x, max_y)."""
        d = self.definition
        return (self.x - d.pad, self.y - d.pad,
                self.x + d.piece_w + d.pad, self.y + d.piece_h + d.pad)


@dataclass(eq=False)
class Cluster:
    """One or more pieces moving and rotating together.

    ``rotation`` is continuous (drag gestures may leave any angle);
    ``rotation_q`` is the logical quarter-turn state (0..3) used by merge
    and solve bookkeeping.  Both are reset together on normalization.
    """

    id: int
    transform: Transform = field(default_factory=Transform)
    rotation_q: int = 0
    pieces: list[Piece] = field(default_factory=list)

    @property
    def rotation(self) -> float:
        return self.transform.rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self.transform.rotation = value

    @property
    def position(self) -> Point:
        return self.transform.position

    @property
    def size(self) -> int:
        return len(self.pieces)

    def local_bounds(self) -> tuple[float, float, float, float] | None:
        """Axis-aligned bounds of all member pieces in local space."""
        if not self.pieces:
            return None
        return unary_union([shapely_box(*p.local_bounds()) for p in self.pieces]).bounds

    def rebuild_pivot_from_bounds(self) -> Point:
        """Move the pivot to the centre of the member bounds.

        The position is compensated so no piece moves on screen; later
        rotations then turn around the visual centre of the group.
        """
        bounds = self.local_bounds()
        if bounds is None:
            return self.transform.pivot
        min_x, min_y, max_x, max_y = bounds
        new_px = (min_x + max_x) * 0.5
        new_py = (min_y + max_y) * 0.5

        # where the new pivot currently sits in the parent
        wx, wy = self.transform.to_parent(new_px, new_py)
        self.transform.pivot.set(new_px, new_py)
        self.transform.position.set(wx, wy)
        return self.transform.pivot

    def piece_origin_in_parent(
        self, piece: Piece, *, rotation: float | None = None,
    ) -> tuple[float, float]:
        """Core origin of *piece* in the parent (pieces-layer) space."""
        return self.transform.to_parent(piece.x, piece.y, rotation=rotation)

    # ── quarter-turn bookkeeping ───────────────────────────────────

    def set_rotation_q(self, q: int) -> None:
        """Snap to quarter turn *q* around the pivot."""
        self.rotation_q = q & 3
        self.transform.rotation = self.rotation_q * QUARTER_TURN

    def rotate_cw(self) -> None:
        """One quarter turn clockwise around the pivot."""
        self.set_rotation_q(self.rotation_q + 1)

    def normalize_rotation(self) -> None:
        self.rotation_q = 0
        self.transform.rotation = 0.0
