from .polygon import (
    Vertex,
    Outline,
    validate_outline,
    has_duplicate_neighbours,
)
