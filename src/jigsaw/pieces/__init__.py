"""Pieces — static piece definitions and their silhouettes.

Submodules:
  models     Edge signs, seam variants, PieceDefinition and errors.
  outline    Bumped and rounded outline generators, shapely helpers.
  generator  Grid cutting (flat / horizontal / masked tabs) and validation.
"""

from .models import (
    EDGE_SIDES, EdgeSigns, EdgeVariant, PieceDefinition,
    PieceDefinitionError, EdgeMapError, ValidationError,
)
from .outline import (
    build_outline, build_rounded_outline, expected_vertex_count,
    outline_polygon, validate_piece_outline,
)
from .generator import (
    PieceStyle, generate_piece_definitions, validate_edge_map, build_edge_map,
)

__all__ = [
    # Models
    "EDGE_SIDES", "EdgeSigns", "EdgeVariant", "PieceDefinition",
    "PieceDefinitionError", "EdgeMapError", "ValidationError",
    # Outline
    "build_outline", "build_rounded_outline", "expected_vertex_count",
    "outline_polygon", "validate_piece_outline",
    # Generator
    "PieceStyle", "generate_piece_definitions", "validate_edge_map", "build_edge_map",
]
