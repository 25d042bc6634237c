"""Scatter input/output dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScatterRect:
    """Target area in pieces-layer coordinates (top-left + size)."""

    x: float
    y: float
    width: float
    height: float


@dataclass
class ScatterItem:
    """Bounding box to scatter.  ``id`` is carried for logging only."""

    width: float
    height: float
    id: str | None = None


@dataclass
class ScatterPlacement:
    """Top-left corner of a scattered item."""

    x: float
    y: float


@dataclass
class _CenterRange:
    """Allowed centre range of one item (collapsed when it does not fit)."""

    w: float
    h: float
    cx_min: float
    cy_min: float
    cx_max: float
    cy_max: float
    fits: bool
