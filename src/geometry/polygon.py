"""
Outline validation for piece silhouettes.

All coordinates in pixels, origin top-left, X right, Y down (screen space).
Vertex lists are open: the closing edge back to the first vertex is implicit.
A silhouette that winds clockwise on screen has positive shoelace area,
which shapely reports as counter-clockwise (``LinearRing.is_ccw``).
"""

from __future__ import annotations
import math
from typing import Sequence

from shapely.geometry import Polygon

Vertex = tuple[float, float]
Outline = Sequence[Vertex]


def has_duplicate_neighbours(outline: Outline, eps: float = 1e-9) -> bool:
    """True if two consecutive vertices (closing edge included) coincide."""
    n = len(outline)
    for i in range(n):
        x0, y0 = outline[i]
        x1, y1 = outline[(i + 1) % n]
        if math.hypot(x1 - x0, y1 - y0) <= eps:
            return True
    return False


def validate_outline(
    outline: Outline,
    width: float,
    height: float,
    *,
    tolerance: float = 1e-6,
) -> list[str]:
    """
    Validate a piece silhouette against its padded bounding box.

    *width* and *height* are the full padded box (core + 2·pad).
    Returns a list of error strings (empty = valid).
    """
    errors: list[str] = []

    if len(outline) < 3:
        errors.append(f"Outline has only {len(outline)} vertices, need at least 3.")
        return errors

    poly = Polygon(outline)
    min_x, min_y, max_x, max_y = poly.bounds
    if (min_x < -tolerance or max_x > width + tolerance
            or min_y < -tolerance or max_y > height + tolerance):
        for i, (x, y) in enumerate(outline):
            if (x < -tolerance or x > width + tolerance
                    or y < -tolerance or y > height + tolerance):
                errors.append(
                    f"Vertex {i} at ({x:.2f}, {y:.2f}) is outside the "
                    f"{width:g}×{height:g} padded box."
                )

    if has_duplicate_neighbours(outline):
        errors.append("Polygon has coincident consecutive vertices.")

    if poly.area <= tolerance:
        errors.append("Polygon has zero area.")
        return errors

    if not poly.exterior.is_simple:
        errors.append("Polygon has self-intersecting edges.")
    elif not poly.exterior.is_ccw:
        errors.append("Polygon must wind clockwise on screen.")

    return errors
