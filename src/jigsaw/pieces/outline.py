"""Piece silhouettes — polygon outlines with tabs and blanks.

Two generators share the same frame: the piece's padded box is
``(0, 0)..(w + 2·tab, h + 2·tab)`` and the core cell sits at
``(tab, tab)..(tab + w, tab + h)``.  Vertices run clockwise on screen
(Y down) starting at the top-left core corner; the closing edge back to
the first vertex is implicit.

  build_outline          Sinusoidal bumps, deterministic, used for logic
                         (hit areas, vertex-count properties).
  build_rounded_outline  Catmull-Rom connectors shaped by each seam's
                         EdgeVariant; what the renderer masks with.
"""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Polygon
from shapely.validation import explain_validity

from src.geometry.polygon import Vertex, validate_outline
from src.jigsaw.config import DEFAULT_RULES

from .models import EDGE_SIDES, EdgeSigns, EdgeVariant


def _check_sizes(w: float, h: float, tab: float) -> None:
    if w <= 0 or h <= 0:
        raise ValueError(f"cell size must be > 0, got {w}×{h}")
    if tab < 0:
        raise ValueError(f"tab depth must be >= 0, got {tab}")


# ── Sinusoidal bumps ───────────────────────────────────────────────


def _bump_samples(
    start: float, stop: float, segments: int,
) -> list[tuple[float, float]]:
    """(position along edge, sin(π·t)) for t = 0..1 in *segments* steps."""
    out = []
    for i in range(segments + 1):
        t = i / segments
        out.append((start + (stop - start) * t, math.sin(math.pi * t)))
    return out


def build_outline(
    w: float,
    h: float,
    tab: float,
    edges: EdgeSigns,
    *,
    segments: int = DEFAULT_RULES.bump_segments,
) -> list[Vertex]:
    """Return the silhouette of one piece as an open, clockwise polygon.

    A flat edge (sign 0) runs straight between corners.  Any other edge
    gets a sinusoidal bump of depth *tab*, ``2·tab`` wide, centred on the
    edge and sampled at ``segments + 1`` points.  A positive sign bulges
    out of the core (tab), a negative one into it (blank).

    The result has ``4 + (segments + 1)·edges.connector_count`` vertices;
    an all-flat piece is exactly the four corners of its core.
    """
    _check_sizes(w, h, tab)
    pad = tab
    x0, y0 = pad, pad
    x1, y1 = pad + w, pad + h
    mid_x = (x0 + x1) * 0.5
    mid_y = (y0 + y1) * 0.5

    pts: list[Vertex] = [(x0, y0)]

    # Top: left → right, +1 moves up (-Y)
    if edges.top:
        for x, k in _bump_samples(mid_x - tab, mid_x + tab, segments):
            pts.append((x, y0 - edges.top * k * tab))
    pts.append((x1, y0))

    # Right: top → bottom, +1 moves right (+X)
    if edges.right:
        for y, k in _bump_samples(mid_y - tab, mid_y + tab, segments):
            pts.append((x1 + edges.right * k * tab, y))
    pts.append((x1, y1))

    # Bottom: right → left, +1 moves down (+Y)
    if edges.bottom:
        for x, k in _bump_samples(mid_x + tab, mid_x - tab, segments):
            pts.append((x, y1 + edges.bottom * k * tab))
    pts.append((x0, y1))

    # Left: bottom → top, +1 moves left (-X)
    if edges.left:
        for y, k in _bump_samples(mid_y + tab, mid_y - tab, segments):
            pts.append((x0 - edges.left * k * tab, y))

    return pts


def expected_vertex_count(edges: EdgeSigns, segments: int = DEFAULT_RULES.bump_segments) -> int:
    return 4 + (segments + 1) * edges.connector_count


# ── Rounded connectors ─────────────────────────────────────────────


def _catmull_rom(p0: float, p1: float, p2: float, p3: float, t: float, m: float) -> float:
    v0 = (p2 - p0) * m
    v1 = (p3 - p1) * m
    t2 = t * t
    t3 = t * t2
    return (2 * p1 - 2 * p2 + v0 + v1) * t3 + (-3 * p1 + 3 * p2 - 2 * v0 - v1) * t2 + v0 * t + p1


def _connector_nodes(tab: float, variant: EdgeVariant | None) -> list[tuple[float, float]]:
    """Control nodes of one connector in edge space (x along, y outward)."""
    neck_w = tab * 0.35
    head_w = tab * 0.5
    head_out = tab * 0.85
    neck_depth = tab * 0.05
    fillet = tab * 0.35

    if variant is not None:
        neck_w += tab * math.cos(variant.seed / 30000) * 0.05
        head_jitter = tab * math.sin(variant.seed / 100000) * 0.1
        # never let the head collapse onto the neck
        if head_w + head_jitter <= neck_w * 1.25:
            head_w -= head_jitter
        else:
            head_w += head_jitter
        head_out += tab * math.sin(variant.seed / 900000) * 0.1

    return [
        (-neck_w - fillet * 2, 0.0),     # ghost
        (-neck_w - fillet, 0.0),         # base entry
        (-neck_w, neck_depth),           # neck
        (-head_w, head_out * 0.5),       # shoulder
        (-head_w * 0.5, head_out),
        (head_w * 0.5, head_out),
        (head_w, head_out * 0.5),        # shoulder
        (neck_w, neck_depth),            # neck
        (neck_w + fillet, 0.0),          # base exit
        (neck_w + fillet * 2, 0.0),      # ghost
    ]


def _rounded_edge(
    a: Vertex, b: Vertex, sign: int, tab: float,
    variant: EdgeVariant | None, tension: float, steps: int,
) -> list[Vertex]:
    """Points after *a* up to and including *b* for one edge."""
    if sign == 0:
        return [b]
    ax, ay = a
    bx, by = b
    dx, dy = bx - ax, by - ay
    length = math.hypot(dx, dy)
    tx, ty = dx / length, dy / length
    nx, ny = ty, -tx            # outward normal for clockwise winding

    # offset is along +X / +Y regardless of traversal direction
    shift = length * variant.offset_n / 4 if variant is not None else 0.0
    mid_x = (ax + bx) / 2 + abs(tx) * shift
    mid_y = (ay + by) / 2 + abs(ty) * shift

    nodes = _connector_nodes(tab, variant)
    out: list[Vertex] = []
    for i in range(1, len(nodes) - 2):
        p0, p1, p2, p3 = nodes[i - 1], nodes[i], nodes[i + 1], nodes[i + 2]
        for j in range(0 if i == 1 else 1, steps + 1):
            t = j / steps
            cx = _catmull_rom(p0[0], p1[0], p2[0], p3[0], t, tension)
            cy = _catmull_rom(p0[1], p1[1], p2[1], p3[1], t, tension)
            depth = cy * sign
            out.append((mid_x + cx * tx + depth * nx, mid_y + cx * ty + depth * ny))
    out.append(b)
    return out


def build_rounded_outline(
    w: float,
    h: float,
    tab: float,
    edges: EdgeSigns,
    edge_variants: dict[str, EdgeVariant] | None = None,
    *,
    tension: float = DEFAULT_RULES.rounded_tension,
    steps: int = DEFAULT_RULES.rounded_steps,
) -> list[Vertex]:
    """Render-quality silhouette with rounded, seam-varied connectors.

    Both pieces of a seam carry the same EdgeVariant, so the tab of one
    and the blank of the other trace the same curve.
    """
    _check_sizes(w, h, tab)
    variants = edge_variants or {}
    x0, y0 = tab, tab
    x1, y1 = tab + w, tab + h
    corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]

    pts: list[Vertex] = [corners[0]]
    for i, side in enumerate(EDGE_SIDES):
        a = corners[i]
        b = corners[(i + 1) % 4]
        pts.extend(_rounded_edge(a, b, edges.get(side), tab,
                                 variants.get(side), tension, steps))
    pts.pop()   # closing corner repeats the first vertex
    return pts


# ── Shapely helpers ────────────────────────────────────────────────


def outline_polygon(points: Sequence[Vertex]) -> Polygon:
    """Wrap an outline in a shapely Polygon (area, containment, bounds)."""
    return Polygon(points)


def validate_piece_outline(
    points: Sequence[Vertex], w: float, h: float, tab: float,
) -> list[str]:
    """Check a silhouette against its padded box.  Returns error strings."""
    errors = validate_outline(points, w + 2 * tab, h + 2 * tab)
    if len(points) >= 3:
        poly = outline_polygon(points)
        if not poly.is_valid:
            errors.append(f"Invalid polygon: {explain_validity(poly)}")
    return errors
