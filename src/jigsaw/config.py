"""Shared tuning constants for the jigsaw engine.

Piece generation, scatter and the end-of-round snap all read their
defaults from a single ``PuzzleRules`` instance.  The rules are frozen:
callers that want different values build their own instance and pass it
explicitly (``generate_piece_definitions(..., rules=my_rules)``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PuzzleRules:
    """Tunable parameters for outlines, seams, scatter and snapping.

    All distances are in pixels of the pieces layer.
    """

    tab_scale: float = 0.25
    """Tab depth as a fraction of the shorter cell side (masked tabs)."""

    simple_tab_scale: float = 0.22
    """Tab depth fraction for the horizontal-only generator."""

    max_offset_n: float = 0.65
    """Clamp for a seam's connector offset along its edge, normalized to
    [-1, 1].  Keeps connectors away from the corners."""

    bump_segments: int = 10
    """Linear steps used to sample one sinusoidal bump."""

    rounded_tension: float = 0.6
    """Catmull-Rom tension for rounded connectors.  0.5 is the standard
    spline, lower is tighter, higher is looser."""

    rounded_steps: int = 16
    """Samples per spline span for rounded connectors."""

    scatter_candidates: int = 20
    """Candidates drawn per item by the best-candidate scatter.
    10-40 suits fewer than 200 items, 6-15 for many items."""

    scatter_padding: float = 0.0
    """Margin kept between scattered items and the scatter rect edges."""

    separation_multiplier: float = 1.0
    """Scales item radii during scatter scoring; >1 spreads items further."""

    snap_duration: float = 0.7
    """Seconds for the final solve animation."""

    snap_ease: str = "power3.out"
    """Easing name for the final solve animation."""

    turn_duration: float = 0.12
    """Seconds for an animated quarter turn of a cluster."""

    turn_ease: str = "power2.out"
    """Easing name for animated quarter turns (cubic ease-out)."""

    # ── Derived helpers ────────────────────────────────────────────

    def tab_depth(self, piece_w: float, piece_h: float, *, simple: bool = False) -> int:
        """Integer tab depth for a cell, never below 1px."""
        scale = self.simple_tab_scale if simple else self.tab_scale
        # half-up rounding, not banker's
        return max(1, math.floor(min(piece_w, piece_h) * scale + 0.5))


DEFAULT_RULES = PuzzleRules()
