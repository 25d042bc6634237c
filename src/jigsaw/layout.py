"""Initial placement of pieces on the table."""

from __future__ import annotations

import logging
from typing import Sequence

from src.jigsaw.config import DEFAULT_RULES, PuzzleRules
from src.jigsaw.pieces.models import PieceDefinition
from src.jigsaw.rng import create_seeded_rng
from src.jigsaw.scatter import ScatterItem, ScatterRect, scatter_placements


log = logging.getLogger(__name__)


def initial_layout(
    definitions: Sequence[PieceDefinition],
    *,
    scatter_rect: ScatterRect | None = None,
    seed: int | None = None,
    rules: PuzzleRules = DEFAULT_RULES,
) -> dict[str, tuple[float, float]]:
    """Core-origin position of every piece, keyed by piece id.

    Without *scatter_rect* the pieces are laid out solved, at
    ``(col·piece_w, row·piece_h)``.  Otherwise their padded boxes are
    scattered over the rect (seeded when *seed* is given) and the
    returned point is the box's top-left shifted in by ``pad``.
    """
    if scatter_rect is None:
        return {d.id: d.solved_offset for d in definitions}

    items = [ScatterItem(d.box_w, d.box_h, id=d.id) for d in definitions]
    rng = create_seeded_rng(seed) if seed is not None else None
    placements = scatter_placements(
        scatter_rect,
        items,
        candidates_per_item=rules.scatter_candidates,
        padding=rules.scatter_padding,
        separation_multiplier=rules.separation_multiplier,
        rng=rng,
    )
    log.info("Scattered %d pieces over %.0f×%.0f at (%.0f, %.0f)",
             len(definitions), scatter_rect.width, scatter_rect.height,
             scatter_rect.x, scatter_rect.y)
    return {
        d.id: (p.x + d.pad, p.y + d.pad)
        for d, p in zip(definitions, placements)
    }
