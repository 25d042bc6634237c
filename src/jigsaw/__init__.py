"""Jigsaw engine — procedural pieces, scatter, clusters and the final snap.

Subpackages and modules, bottom-up:

  config    PuzzleRules tuning constants
  rng       seeded Mulberry32 random numbers
  pieces    piece definitions, outlines and grid generation
  scatter   blue-noise placement of piece boxes
  layout    initial cluster positions (solved grid or scatter)
  clusters  rigid groups of connected pieces and their registry
  tween     frame-driven animation primitive
  snap      winner/anchor selection and the solve animation
"""
