"""Piece definition dataclasses — static description of every piece."""

from __future__ import annotations

from dataclasses import dataclass, field


EDGE_SIDES = ("top", "right", "bottom", "left")
VALID_SIGNS = (-1, 0, 1)

# Opposite side across a seam, and the grid step (d_col, d_row) to reach it.
OPPOSITE_SIDE = {"top": "bottom", "right": "left", "bottom": "top", "left": "right"}
SIDE_STEP = {"top": (0, -1), "right": (1, 0), "bottom": (0, 1), "left": (-1, 0)}


class PieceDefinitionError(Exception):
    """Raised when a piece definition violates its construction rules."""

    def __init__(self, piece_id: str, field_name: str, reason: str) -> None:
        self.piece_id = piece_id
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"Invalid piece '{piece_id}' ({field_name}): {reason}")


@dataclass
class ValidationError:
    piece_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.piece_id}] {self.field}: {self.message}"


class EdgeMapError(Exception):
    """Raised when a generated edge map breaks the interlock invariant."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        detail = "; ".join(str(e) for e in errors[:5])
        more = f" (+{len(errors) - 5} more)" if len(errors) > 5 else ""
        super().__init__(f"Edge map validation failed: {detail}{more}")


@dataclass(frozen=True)
class EdgeSigns:
    """Per-side connector sign: +1 tab, -1 blank, 0 flat."""

    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0

    def __post_init__(self) -> None:
        for side in EDGE_SIDES:
            if getattr(self, side) not in VALID_SIGNS:
                raise PieceDefinitionError(
                    "?", f"edges.{side}",
                    f"sign must be one of {VALID_SIGNS}, got {getattr(self, side)!r}",
                )

    def get(self, side: str) -> int:
        return getattr(self, side)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.top, self.right, self.bottom, self.left)

    @property
    def connector_count(self) -> int:
        """Number of non-flat edges."""
        return sum(1 for s in self.as_tuple() if s != 0)

    @property
    def is_flat(self) -> bool:
        return self.connector_count == 0


@dataclass(frozen=True)
class EdgeVariant:
    """Cosmetic seam parameters shared by both pieces of a seam.

    offset_n: connector centre offset along the edge, in [-1, 1] (0 = centred).
    seed:     uint32 used to perturb connector proportions.
    """

    offset_n: float
    seed: int


@dataclass
class PieceDefinition:
    """Grid coordinates, cell size and connector layout of one piece.

    The core cell spans (pad, pad)..(pad + piece_w, pad + piece_h) in the
    piece's own padded box; ``pad`` leaves room for tabs that stick out.
    """

    id: str
    row: int
    col: int
    piece_w: float
    piece_h: float
    pad: float = 0.0
    edges: EdgeSigns = field(default_factory=EdgeSigns)
    edge_variants: dict[str, EdgeVariant] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise PieceDefinitionError(
                self.id, "row/col", f"grid coordinates must be >= 0, got ({self.row}, {self.col})")
        if self.piece_w <= 0 or self.piece_h <= 0:
            raise PieceDefinitionError(
                self.id, "piece_w/piece_h", f"cell size must be > 0, got {self.piece_w}×{self.piece_h}")
        if self.pad < 0:
            raise PieceDefinitionError(self.id, "pad", f"must be >= 0, got {self.pad}")
        for side, variant in self.edge_variants.items():
            if side not in EDGE_SIDES:
                raise PieceDefinitionError(self.id, "edge_variants", f"unknown side '{side}'")
            if not -1.0 <= variant.offset_n <= 1.0:
                raise PieceDefinitionError(
                    self.id, f"edge_variants.{side}.offset_n",
                    f"must be in [-1, 1], got {variant.offset_n}")

    @property
    def grid_key(self) -> tuple[int, int]:
        """(row, col) — sorts pieces in reading order."""
        return (self.row, self.col)

    @property
    def box_w(self) -> float:
        """Padded box width (core plus pad on both sides)."""
        return self.piece_w + 2 * self.pad

    @property
    def box_h(self) -> float:
        return self.piece_h + 2 * self.pad

    @property
    def solved_offset(self) -> tuple[float, float]:
        """Core origin of this piece relative to the solved board origin."""
        return (self.col * self.piece_w, self.row * self.piece_h)
