"""Clusters — rigid groups of connected pieces.

Submodules:
  models    Point, Transform, Piece and Cluster.
  registry  ClusterRegistry (piece → cluster owner), merge and events.
  turns     Animated quarter turns and angle helpers.
"""

from .models import Point, Transform, Piece, Cluster, QUARTER_TURN
from .registry import (
    ClusterRegistry, ConnectionEvent, CompletionEvent, rebuild_pivot_from_bounds,
)
from .turns import normalize_rad, shortest_delta_rad, tween_rotation_q

__all__ = [
    # Models
    "Point", "Transform", "Piece", "Cluster", "QUARTER_TURN",
    # Registry
    "ClusterRegistry", "ConnectionEvent", "CompletionEvent", "rebuild_pivot_from_bounds",
    # Turns
    "normalize_rad", "shortest_delta_rad", "tween_rotation_q",
]
