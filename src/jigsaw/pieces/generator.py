"""Piece-definition generation — cut a cols×rows grid into pieces.

Three styles, matching the cuts the game ships:

  FLAT        Plain rectangles, no padding.
  HORIZONTAL  Tabs only across vertical seams (right +1, left -1).
  TABS        Every interior seam gets a random sign plus a shared
              EdgeVariant; both pieces of a seam see opposite signs.
"""

from __future__ import annotations

import logging
from enum import Enum

from src.jigsaw.config import DEFAULT_RULES, PuzzleRules
from src.jigsaw.rng import Mulberry32, Rng, random_seed

from .models import (
    EDGE_SIDES, OPPOSITE_SIDE, SIDE_STEP,
    EdgeMapError, EdgeSigns, EdgeVariant, PieceDefinition, ValidationError,
)


log = logging.getLogger(__name__)


class PieceStyle(Enum):
    FLAT = "flat"
    HORIZONTAL = "horizontal"
    TABS = "tabs"


def piece_id(col: int, row: int) -> str:
    return f"p_{col}_{row}"


# ── Seam construction ──────────────────────────────────────────────


def _random_sign(rand: Rng) -> int:
    return 1 if rand() < 0.5 else -1


def _random_offset_n(rand: Rng, limit: float) -> float:
    t = rand() * 2 - 1
    return max(-limit, min(limit, t))


def _random_seed_u32(rand: Rng) -> int:
    return int(rand() * 0xFFFFFFFF) & 0xFFFFFFFF


def build_edge_map(
    cols: int,
    rows: int,
    rand: Rng,
    *,
    max_offset_n: float = DEFAULT_RULES.max_offset_n,
) -> tuple[list[list[dict[str, int]]], list[list[dict[str, EdgeVariant]]]]:
    """Random seam signs and shared seam variants, indexed [row][col].

    Vertical seams (between (c, r) and (c+1, r)) are drawn first in
    row-major order, then horizontal seams.  Each seam consumes three
    draws: sign, offset, seed.
    """
    signs = [[{s: 0 for s in EDGE_SIDES} for _ in range(cols)] for _ in range(rows)]
    variants: list[list[dict[str, EdgeVariant]]] = [
        [{} for _ in range(cols)] for _ in range(rows)
    ]

    for r in range(rows):
        for c in range(cols - 1):
            s = _random_sign(rand)
            variant = EdgeVariant(_random_offset_n(rand, max_offset_n), _random_seed_u32(rand))
            signs[r][c]["right"] = s
            signs[r][c + 1]["left"] = -s
            variants[r][c]["right"] = variant
            variants[r][c + 1]["left"] = variant

    for r in range(rows - 1):
        for c in range(cols):
            s = _random_sign(rand)
            variant = EdgeVariant(_random_offset_n(rand, max_offset_n), _random_seed_u32(rand))
            signs[r][c]["bottom"] = s
            signs[r + 1][c]["top"] = -s
            variants[r][c]["bottom"] = variant
            variants[r + 1][c]["top"] = variant

    return signs, variants


# ── Validation ─────────────────────────────────────────────────────


def validate_edge_map(
    definitions: list[PieceDefinition], cols: int, rows: int,
) -> list[ValidationError]:
    """Check the interlock invariant over a full grid.

    Facing edges must be additive inverses, border edges must be flat,
    and every grid cell must hold exactly one piece.
    """
    errs: list[ValidationError] = []
    by_cell: dict[tuple[int, int], PieceDefinition] = {}
    for d in definitions:
        if (d.col, d.row) in by_cell:
            errs.append(ValidationError(d.id, "row/col",
                                        f"Duplicate cell ({d.row}, {d.col})"))
        by_cell[(d.col, d.row)] = d

    for r in range(rows):
        for c in range(cols):
            if (c, r) not in by_cell:
                errs.append(ValidationError(piece_id(c, r), "row/col",
                                            f"Missing piece for cell ({r}, {c})"))

    for (c, r), d in by_cell.items():
        for side in EDGE_SIDES:
            sign = d.edges.get(side)
            dc, dr = SIDE_STEP[side]
            neighbour = by_cell.get((c + dc, r + dr))
            if neighbour is None:
                if sign != 0:
                    errs.append(ValidationError(d.id, f"edges.{side}",
                                                f"Border edge must be flat, got {sign}"))
                continue
            facing = neighbour.edges.get(OPPOSITE_SIDE[side])
            if sign != -facing:
                errs.append(ValidationError(
                    d.id, f"edges.{side}",
                    f"Sign {sign} does not oppose {neighbour.id}.{OPPOSITE_SIDE[side]}={facing}"))
    return errs


# ── Grid generation ────────────────────────────────────────────────


def generate_piece_definitions(
    cols: int,
    rows: int,
    piece_w: float,
    piece_h: float,
    *,
    style: PieceStyle = PieceStyle.TABS,
    seed: int | None = None,
    rules: PuzzleRules = DEFAULT_RULES,
) -> list[PieceDefinition]:
    """Build one PieceDefinition per grid cell, row-major.

    Parameters
    ----------
    cols, rows : int
        Grid size, both >= 1.
    piece_w, piece_h : float
        Logical cell size in pixels.
    style : PieceStyle
        Which cut to generate.
    seed : int | None
        Seam seed for TABS; a fresh one is drawn (and logged) if omitted.
    rules : PuzzleRules
        Tab scales and offset clamp.

    Raises
    ------
    ValueError
        If the grid or cell size is empty.
    EdgeMapError
        If the generated seams break the interlock invariant.
    """
    if cols < 1 or rows < 1:
        raise ValueError(f"grid must be at least 1×1, got {cols}×{rows}")
    if piece_w <= 0 or piece_h <= 0:
        raise ValueError(f"cell size must be > 0, got {piece_w}×{piece_h}")

    if style is PieceStyle.FLAT:
        pad = 0.0
    else:
        pad = float(rules.tab_depth(piece_w, piece_h, simple=style is PieceStyle.HORIZONTAL))

    signs_map: list[list[dict[str, int]]] | None = None
    variants_map: list[list[dict[str, EdgeVariant]]] | None = None
    if style is PieceStyle.TABS:
        if seed is None:
            seed = random_seed()
            log.debug("No seam seed given, drew %d", seed)
        signs_map, variants_map = build_edge_map(
            cols, rows, Mulberry32(seed), max_offset_n=rules.max_offset_n)

    defs: list[PieceDefinition] = []
    for r in range(rows):
        for c in range(cols):
            if signs_map is not None and variants_map is not None:
                edges = EdgeSigns(**signs_map[r][c])
                variants = dict(variants_map[r][c])
            elif style is PieceStyle.HORIZONTAL:
                edges = EdgeSigns(
                    right=1 if c < cols - 1 else 0,
                    left=-1 if c > 0 else 0,
                )
                variants = {}
            else:
                edges = EdgeSigns()
                variants = {}

            defs.append(PieceDefinition(
                id=piece_id(c, r),
                row=r,
                col=c,
                piece_w=piece_w,
                piece_h=piece_h,
                pad=pad,
                edges=edges,
                edge_variants=variants,
            ))

    errors = validate_edge_map(defs, cols, rows)
    if errors:
        for e in errors:
            log.warning("Edge map: %s", e)
        raise EdgeMapError(errors)

    log.info("Generated %d pieces (%d×%d, style=%s, pad=%.0f, seed=%s)",
             len(defs), cols, rows, style.value, pad, seed)
    return defs
