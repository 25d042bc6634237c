"""Animated quarter turns of a cluster around its pivot."""

from __future__ import annotations

import asyncio
import logging
import math

from src.jigsaw.config import DEFAULT_RULES
from src.jigsaw.tween import TweenEngine

from .models import QUARTER_TURN, Cluster


log = logging.getLogger(__name__)

TWO_PI = math.pi * 2


def normalize_rad(a: float) -> float:
    """Wrap an angle into [0, 2π)."""
    a = a % TWO_PI
    if a >= TWO_PI:     # float rounding of tiny negatives
        a -= TWO_PI
    return a


def shortest_delta_rad(start: float, end: float) -> float:
    """Signed smallest turn from *start* to *end*, in (-π, π]."""
    d = normalize_rad(end) - normalize_rad(start)
    if d > math.pi:
        d -= TWO_PI
    elif d <= -math.pi:
        d += TWO_PI
    return d


async def tween_rotation_q(
    cluster: Cluster,
    q: int,
    tweens: TweenEngine,
    *,
    shortest_path: bool = True,
    duration: float = DEFAULT_RULES.turn_duration,
    ease: str = DEFAULT_RULES.turn_ease,
) -> bool:
    """Animate *cluster* to quarter turn *q* around its pivot.

    The pivot is rebuilt from the member bounds first, so the group turns
    around its visual centre and that point stays put on screen.  With
    *shortest_path* the turn may go counter-clockwise; otherwise it always
    turns clockwise.  Works from any current angle.

    Returns True when the turn completed, in which case ``rotation_q`` is
    *q* and ``rotation`` is exactly ``q·π/2``.  An interrupted turn returns
    False and leaves both to whoever interrupted it.
    """
    cluster.rebuild_pivot_from_bounds()
    target_q = q & 3
    start = cluster.rotation
    base = target_q * QUARTER_TURN
    if shortest_path:
        end = start + shortest_delta_rad(start, base)
    else:
        end = start + normalize_rad(base - start)

    loop = asyncio.get_running_loop()
    done: asyncio.Future[bool] = loop.create_future()

    def settle(completed: bool) -> None:
        if not done.done():
            done.set_result(completed)

    tweens.to(
        cluster.transform, {"rotation": end},
        duration=duration, ease=ease,
        on_complete=lambda: settle(True),
        on_interrupt=lambda: settle(False),
    )
    completed = await done
    if not completed:
        log.debug("Quarter turn of cluster %d to q=%d interrupted", cluster.id, target_q)
        return False

    cluster.set_rotation_q(target_q)
    return True
