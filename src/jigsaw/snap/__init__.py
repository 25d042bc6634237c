"""Snap — end-of-round solve of the winner cluster.

Submodules:
  solver  Winner/anchor selection, solved pose and solve_and_animate.
"""

from .solver import (
    SolvedPose, SolveOptions, SolveResult,
    find_winner_cluster, find_anchor_piece, desired_anchor_position,
    compute_solved_pose, solve_and_animate,
)

__all__ = [
    "SolvedPose", "SolveOptions", "SolveResult",
    "find_winner_cluster", "find_anchor_piece", "desired_anchor_position",
    "compute_solved_pose", "solve_and_animate",
]
