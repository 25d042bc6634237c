"""Tests for initial piece layout."""

from __future__ import annotations

from src.jigsaw.layout import initial_layout
from src.jigsaw.scatter import ScatterRect
from tests.puzzle_fixture import CELL, make_definitions


def test_solved_grid_without_rect():
    defs = make_definitions(3, 2)
    layout = initial_layout(defs)
    assert layout["p_0_0"] == (0.0, 0.0)
    assert layout["p_2_1"] == (2 * CELL, CELL)
    assert len(layout) == 6


def test_scatter_keeps_padded_boxes_inside_rect():
    defs = make_definitions(3, 3)
    rect = ScatterRect(100, 50, 2000, 1500)
    layout = initial_layout(defs, scatter_rect=rect, seed=5)
    for d in defs:
        x, y = layout[d.id]
        assert x - d.pad >= rect.x
        assert y - d.pad >= rect.y
        assert x + d.piece_w + d.pad <= rect.x + rect.width
        assert y + d.piece_h + d.pad <= rect.y + rect.height


def test_scatter_is_reproducible_with_seed():
    defs = make_definitions(3, 3)
    rect = ScatterRect(0, 0, 1500, 1500)
    assert initial_layout(defs, scatter_rect=rect, seed=8) == \
        initial_layout(defs, scatter_rect=rect, seed=8)


def test_empty_definitions():
    assert initial_layout([]) == {}
    assert initial_layout([], scatter_rect=ScatterRect(0, 0, 10, 10), seed=1) == {}
