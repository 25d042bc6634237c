"""Scatter — spread pieces across the working area.

Submodules:
  models  Rect, item and placement dataclasses.
  engine  Best-candidate placement and the spread metric.
"""

from .models import ScatterRect, ScatterItem, ScatterPlacement
from .engine import scatter_placements, placement_spread, item_radius, score_candidate

__all__ = [
    "ScatterRect", "ScatterItem", "ScatterPlacement",
    "scatter_placements", "placement_spread", "item_radius", "score_candidate",
]
