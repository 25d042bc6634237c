"""Snap-to-solution — move the biggest cluster onto its solved position.

The solver picks a winner cluster and an anchor piece inside it, computes
the cluster transform that lands the anchor on its solved board position
at rotation 0, then animates rotation and position concurrently.

The pose is computed analytically from the cluster transform: the
cluster is never rotated and restored just to take a measurement.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from src.jigsaw.clusters import Cluster, ClusterRegistry, Piece
from src.jigsaw.config import DEFAULT_RULES
from src.jigsaw.tween import TweenEngine


log = logging.getLogger(__name__)


@dataclass
class SolvedPose:
    """Target transform of the winner cluster."""

    rotation: float
    x: float
    y: float


@dataclass
class SolveOptions:
    cluster: Cluster | None = None      # override the winner
    anchor: Piece | None = None         # override the anchor
    duration: float = DEFAULT_RULES.snap_duration
    ease: str = DEFAULT_RULES.snap_ease
    kill_tweens: bool = True


@dataclass
class SolveResult:
    cluster: Cluster
    anchor: Piece
    pose: SolvedPose
    interrupted: bool = False


# ── Selection ──────────────────────────────────────────────────────


def find_winner_cluster(registry: ClusterRegistry, pieces: Sequence[Piece]) -> Cluster | None:
    """Cluster holding the most of *pieces*.

    Ties go to the cluster whose smallest member ``(row, col)`` comes
    first, so the result never depends on iteration order.
    """
    members: dict[int, list[Piece]] = {}
    clusters: dict[int, Cluster] = {}
    for piece in pieces:
        cluster = registry.cluster_of(piece)
        if cluster is None:
            continue
        members.setdefault(cluster.id, []).append(piece)
        clusters[cluster.id] = cluster

    if not members:
        return None

    def rank(cid: int) -> tuple[int, tuple[int, int]]:
        group = members[cid]
        return (-len(group), min(p.definition.grid_key for p in group))

    return clusters[min(members, key=rank)]


def find_anchor_piece(
    registry: ClusterRegistry, pieces: Sequence[Piece], cluster: Cluster,
) -> Piece | None:
    """Piece (0, 0) if it is in *cluster*, else its smallest ``(row, col)``."""
    candidates = [p for p in pieces if registry.cluster_of(p) is cluster]
    if not candidates:
        return None
    return min(candidates, key=lambda p: p.definition.grid_key)


def desired_anchor_position(
    solved_origin: tuple[float, float], anchor: Piece,
) -> tuple[float, float]:
    """Where the anchor's core origin sits on the solved board."""
    ox, oy = anchor.definition.solved_offset
    return (solved_origin[0] + ox, solved_origin[1] + oy)


def compute_solved_pose(
    cluster: Cluster, anchor: Piece, desired: tuple[float, float],
) -> SolvedPose:
    """Cluster pose (rotation 0) that puts *anchor* at *desired*.

    Pure: the anchor's layer position is evaluated at rotation 0 from
    the current transform, nothing is mutated.
    """
    mx, my = cluster.piece_origin_in_parent(anchor, rotation=0.0)
    pos = cluster.position
    return SolvedPose(
        rotation=0.0,
        x=pos.x + (desired[0] - mx),
        y=pos.y + (desired[1] - my),
    )


# ── Animation ──────────────────────────────────────────────────────


async def solve_and_animate(
    registry: ClusterRegistry,
    pieces: Sequence[Piece],
    solved_origin: tuple[float, float],
    tweens: TweenEngine,
    options: SolveOptions | None = None,
) -> SolveResult | None:
    """Animate the winner cluster onto the solved board.

    Rotation and position tween together; when both have finished (or
    were interrupted) the cluster is snapped exactly to the pose and its
    quarter-turn state reset.  A field that a newer tween took over in
    the meantime (rotation or position) is left to that animation; the
    other field is still snapped.

    Returns
    -------
    SolveResult | None
        ``None`` when there are no pieces, no winner or no anchor.
    """
    options = options or SolveOptions()
    if not pieces:
        log.info("Solve skipped: no pieces")
        return None

    cluster = options.cluster
    if cluster is None and options.anchor is not None:
        cluster = registry.cluster_of(options.anchor)
    if cluster is None:
        cluster = find_winner_cluster(registry, pieces)
    if cluster is None:
        log.info("Solve skipped: no winner cluster")
        return None

    anchor = options.anchor
    if anchor is not None and registry.cluster_of(anchor) is not cluster:
        log.warning("Anchor %s is not in cluster %d; choosing another", anchor.id, cluster.id)
        anchor = None
    if anchor is None:
        anchor = find_anchor_piece(registry, pieces, cluster)
    if anchor is None:
        log.info("Solve skipped: cluster %d has no anchor piece", cluster.id)
        return None

    desired = desired_anchor_position(solved_origin, anchor)
    pose = compute_solved_pose(cluster, anchor, desired)
    log.info("Solving cluster %d (%d pieces) via anchor %s → (%.1f, %.1f)",
             cluster.id, cluster.size, anchor.id, pose.x, pose.y)

    transform = cluster.transform
    position = cluster.position
    if options.kill_tweens:
        tweens.kill_tweens_of(transform)
        tweens.kill_tweens_of(position)

    loop = asyncio.get_running_loop()
    rotation_done: asyncio.Future[bool] = loop.create_future()
    position_done: asyncio.Future[bool] = loop.create_future()

    def settle(fut: asyncio.Future[bool], completed: bool) -> None:
        if not fut.done():
            fut.set_result(completed)

    tweens.to(
        transform, {"rotation": pose.rotation},
        duration=options.duration, ease=options.ease,
        on_complete=lambda: settle(rotation_done, True),
        on_interrupt=lambda: settle(rotation_done, False),
        overwrite=options.kill_tweens,
    )
    tweens.to(
        position, {"x": pose.x, "y": pose.y},
        duration=options.duration, ease=options.ease,
        on_complete=lambda: settle(position_done, True),
        on_interrupt=lambda: settle(position_done, False),
        overwrite=options.kill_tweens,
    )

    results = await asyncio.gather(rotation_done, position_done)
    interrupted = not all(results)

    # a newer tween owns its field; snap only what is left alone
    rotation_taken = tweens.is_tweening(transform)
    position_taken = tweens.is_tweening(position)
    if rotation_taken or position_taken:
        interrupted = True
        log.info("Solve of cluster %d partly superseded (rotation=%s, position=%s)",
                 cluster.id, rotation_taken, position_taken)
    if not rotation_taken:
        cluster.normalize_rotation()
    if not position_taken:
        position.set(pose.x, pose.y)
    log.info("Solved cluster %d%s", cluster.id, " (interrupted)" if interrupted else "")
    return SolveResult(cluster=cluster, anchor=anchor, pose=pose, interrupted=interrupted)
