"""Blue-noise scatter — Mitchell's best-candidate placement.

Each item samples ``k`` uniform centres inside its allowed range and keeps
the one whose nearest already-placed neighbour is farthest away, with
distances normalized by the two items' radii.  That spreads pieces
evenly without Poisson-disk rejection.

This is a spread heuristic, not rectangle packing: when the rect is too
small for the items some overlap is unavoidable and accepted.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Sequence

from src.jigsaw.config import DEFAULT_RULES
from src.jigsaw.rng import Rng

from .models import ScatterItem, ScatterPlacement, ScatterRect, _CenterRange


log = logging.getLogger(__name__)

MIN_SEPARATION_MULTIPLIER = 0.25
MIN_ITEM_SIZE = 1.0
_MIN_DENOM = 1e-4


def item_radius(w: float, h: float, separation_multiplier: float) -> float:
    """Half-diagonal of the item, scaled."""
    return 0.5 * math.hypot(w, h) * separation_multiplier


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _center_range(rect: ScatterRect, item: ScatterItem, padding: float) -> _CenterRange:
    w = max(MIN_ITEM_SIZE, item.width)
    h = max(MIN_ITEM_SIZE, item.height)
    cx_min = rect.x + padding + w * 0.5
    cy_min = rect.y + padding + h * 0.5
    cx_max = rect.x + rect.width - padding - w * 0.5
    cy_max = rect.y + rect.height - padding - h * 0.5
    fits_x = cx_max >= cx_min
    fits_y = cy_max >= cy_min
    return _CenterRange(
        w=w, h=h,
        cx_min=cx_min, cy_min=cy_min,
        cx_max=cx_max if fits_x else cx_min,
        cy_max=cy_max if fits_y else cy_min,
        fits=fits_x and fits_y,
    )


def score_candidate(
    x: float, y: float, radius: float,
    centers: Sequence[tuple[float, float]],
    radii: Sequence[float],
) -> float:
    """Minimum distance to any placed centre, normalized by combined radii.

    Higher is better (farther from the nearest neighbour).
    """
    min_norm = math.inf
    for (cx, cy), r in zip(centers, radii):
        norm = math.hypot(x - cx, y - cy) / max(_MIN_DENOM, radius + r)
        if norm < min_norm:
            min_norm = norm
    return min_norm


def _pick_best_candidate(
    centers: list[tuple[float, float]],
    radii: list[float],
    rng_range: _CenterRange,
    radius: float,
    k: int,
    rng: Rng,
) -> tuple[float, float]:
    if not centers:
        return (
            _lerp(rng_range.cx_min, rng_range.cx_max, rng()),
            _lerp(rng_range.cy_min, rng_range.cy_max, rng()),
        )

    best: tuple[float, float] | None = None
    best_score = -math.inf
    for _ in range(k):
        x = _lerp(rng_range.cx_min, rng_range.cx_max, rng())
        y = _lerp(rng_range.cy_min, rng_range.cy_max, rng())
        score = score_candidate(x, y, radius, centers, radii)
        if best is None or score > best_score:
            best = (x, y)
            best_score = score
    assert best is not None     # k >= 1
    return best


def scatter_placements(
    rect: ScatterRect,
    items: Sequence[ScatterItem],
    *,
    candidates_per_item: int = DEFAULT_RULES.scatter_candidates,
    padding: float = DEFAULT_RULES.scatter_padding,
    separation_multiplier: float = DEFAULT_RULES.separation_multiplier,
    rng: Rng | None = None,
) -> list[ScatterPlacement]:
    """Place every item inside *rect*, well spread out.

    Parameters
    ----------
    rect : ScatterRect
        Target area.
    items : sequence of ScatterItem
        Boxes to place, in priority order (earlier items get more room).
    candidates_per_item : int
        Samples per item; higher spreads better but costs more.
    padding : float
        Margin kept from the rect edges.
    separation_multiplier : float
        Scales item radii; > 1 pushes items further apart.
    rng : callable, optional
        Zero-argument function returning floats in [0, 1).  Pass a seeded
        ``Mulberry32`` for reproducible output.

    Returns
    -------
    list[ScatterPlacement]
        Top-left corners, one per item, in input order.  Empty input
        yields an empty list; items that do not fit are clamped to the
        minimum of their range.
    """
    if not items:
        return []

    k = max(1, int(candidates_per_item))
    padding = max(0.0, padding)
    sep_mul = max(MIN_SEPARATION_MULTIPLIER, separation_multiplier)
    if rng is None:
        rng = random.random

    placements: list[ScatterPlacement] = []
    centers: list[tuple[float, float]] = []
    radii: list[float] = []
    clamped = 0

    for item in items:
        rr = _center_range(rect, item, padding)
        if not rr.fits:
            clamped += 1
            log.debug("Item %s (%.0f×%.0f) does not fit the scatter rect; clamped",
                      item.id, rr.w, rr.h)
        radius = item_radius(rr.w, rr.h, sep_mul)
        cx, cy = _pick_best_candidate(centers, radii, rr, radius, k, rng)

        placements.append(ScatterPlacement(cx - rr.w * 0.5, cy - rr.h * 0.5))
        centers.append((cx, cy))
        radii.append(radius)

    if clamped:
        log.warning("Scatter: %d of %d items did not fit %.0f×%.0f (padding %.0f); overlap possible",
                    clamped, len(items), rect.width, rect.height, padding)
    if log.isEnabledFor(logging.DEBUG):
        log.debug("Scatter: placed %d items, spread=%.3f",
                  len(items), placement_spread(items, placements, sep_mul))
    return placements


def placement_spread(
    items: Sequence[ScatterItem],
    placements: Sequence[ScatterPlacement],
    separation_multiplier: float = DEFAULT_RULES.separation_multiplier,
) -> float:
    """Minimum pairwise centre distance normalized by combined radii.

    Values >= 1 mean no two bounding circles overlap.  Fewer than two
    items gives ``inf``.
    """
    sep_mul = max(MIN_SEPARATION_MULTIPLIER, separation_multiplier)
    centers: list[tuple[float, float]] = []
    radii: list[float] = []
    for item, p in zip(items, placements):
        w = max(MIN_ITEM_SIZE, item.width)
        h = max(MIN_ITEM_SIZE, item.height)
        centers.append((p.x + w * 0.5, p.y + h * 0.5))
        radii.append(item_radius(w, h, sep_mul))

    best = math.inf
    for i in range(len(centers)):
        for j in range(i + 1, len(centers)):
            d = math.hypot(centers[i][0] - centers[j][0], centers[i][1] - centers[j][1])
            best = min(best, d / max(_MIN_DENOM, radii[i] + radii[j]))
    return best
