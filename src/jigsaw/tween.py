"""Frame-driven tween engine.

Interpolates numeric attributes of plain Python objects over time.  The
host calls :meth:`TweenEngine.update` once per frame; tests and headless
runs use :meth:`TweenEngine.run_until_complete` to drive the frames from
the asyncio loop.

Usage::

    engine = TweenEngine()
    engine.to(cluster.transform, {"rotation": 0.0}, duration=0.7, ease="power3.out")
    engine.update(1 / 60)
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Mapping, TypeVar


log = logging.getLogger(__name__)

T = TypeVar("T")
Ease = Callable[[float], float]
Callback = Callable[[], None]


# ── Easing ─────────────────────────────────────────────────────────


def _power_in(n: int) -> Ease:
    return lambda t: t ** n


def _power_out(n: int) -> Ease:
    return lambda t: 1.0 - (1.0 - t) ** n


def _power_in_out(n: int) -> Ease:
    def ease(t: float) -> float:
        if t < 0.5:
            return (2.0 * t) ** n * 0.5
        return 1.0 - (2.0 * (1.0 - t)) ** n * 0.5
    return ease


def _sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1.0) * 0.5


def _back_out(t: float) -> float:
    c1 = 1.70158
    c3 = c1 + 1.0
    u = t - 1.0
    return 1.0 + c3 * u ** 3 + c1 * u ** 2


EASINGS: dict[str, Ease] = {
    "linear": lambda t: t,
    "none": lambda t: t,
    "sine.inOut": _sine_in_out,
    "back.out": _back_out,
}
for _n in (1, 2, 3, 4):
    EASINGS[f"power{_n}.in"] = _power_in(_n + 1)
    EASINGS[f"power{_n}.out"] = _power_out(_n + 1)
    EASINGS[f"power{_n}.inOut"] = _power_in_out(_n + 1)


def get_ease(name: str) -> Ease:
    """Look up an easing by name; unknown names fall back to linear."""
    ease = EASINGS.get(name)
    if ease is None:
        log.warning("Unknown ease '%s', using linear", name)
        return EASINGS["linear"]
    return ease


# ── Tween ──────────────────────────────────────────────────────────


class Tween:
    """One running interpolation.  Created by :meth:`TweenEngine.to`."""

    def __init__(
        self,
        target: Any,
        props: Mapping[str, float],
        duration: float,
        ease: Ease,
        on_complete: Callback | None,
        on_interrupt: Callback | None,
    ) -> None:
        self.target = target
        self.end = {k: float(v) for k, v in props.items()}
        self.start = {k: float(getattr(target, k)) for k in self.end}
        self.duration = duration
        self.ease = ease
        self.elapsed = 0.0
        self.on_complete = on_complete
        self.on_interrupt = on_interrupt
        self.completed = False
        self.killed = False

    @property
    def active(self) -> bool:
        return not (self.completed or self.killed)

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    def _apply(self, t: float) -> None:
        k = self.ease(t)
        for name, end in self.end.items():
            start = self.start[name]
            setattr(self.target, name, start + (end - start) * k)

    def _advance(self, dt: float) -> bool:
        """Step forward; returns True once the end is reached."""
        self.elapsed += dt
        if self.progress >= 1.0:
            for name, end in self.end.items():
                setattr(self.target, name, end)
            self.completed = True
            return True
        self._apply(self.progress)
        return False


def _fire(callback: Callback | None, what: str) -> None:
    if callback is None:
        return
    try:
        callback()
    except Exception:
        log.exception("Tween %s callback failed", what)


# ── Engine ─────────────────────────────────────────────────────────


class TweenEngine:
    """Owns the active tweens and advances them on every frame."""

    def __init__(self) -> None:
        self._active: list[Tween] = []

    @property
    def active_count(self) -> int:
        return len(self._active)

    def is_tweening(self, target: Any) -> bool:
        return any(tw.target is target for tw in self._active)

    def to(
        self,
        target: Any,
        props: Mapping[str, float],
        *,
        duration: float,
        ease: str = "linear",
        on_complete: Callback | None = None,
        on_interrupt: Callback | None = None,
        overwrite: bool = True,
    ) -> Tween:
        """Tween *target*'s attributes from their current values to *props*.

        With *overwrite*, earlier tweens of the same target are killed
        first (their ``on_interrupt`` fires).  A non-positive *duration*
        applies the end values and completes before returning.
        """
        if overwrite:
            self.kill_tweens_of(target)

        tween = Tween(target, props, duration, get_ease(ease), on_complete, on_interrupt)
        if duration <= 0:
            tween._advance(0.0)
            _fire(tween.on_complete, "complete")
            return tween

        self._active.append(tween)
        return tween

    def kill_tweens_of(self, target: Any) -> int:
        """Cancel every active tween of *target*; returns how many."""
        victims = [tw for tw in self._active if tw.target is target]
        if not victims:
            return 0
        self._active = [tw for tw in self._active if tw.target is not target]
        for tw in victims:
            tw.killed = True
            _fire(tw.on_interrupt, "interrupt")
        log.debug("Killed %d tween(s) of %r", len(victims), type(target).__name__)
        return len(victims)

    def kill_all(self) -> int:
        victims, self._active = self._active, []
        for tw in victims:
            tw.killed = True
            _fire(tw.on_interrupt, "interrupt")
        return len(victims)

    def update(self, dt: float) -> None:
        """Advance every active tween by *dt* seconds."""
        finished: list[Tween] = []
        for tw in list(self._active):
            if tw.killed:
                continue
            if tw._advance(dt):
                finished.append(tw)

        if finished:
            self._active = [tw for tw in self._active if not tw.completed]
            for tw in finished:
                _fire(tw.on_complete, "complete")

    async def run_until_complete(
        self,
        awaitable: Awaitable[T],
        *,
        frame_time: float = 1 / 60,
        max_frames: int = 100_000,
    ) -> T:
        """Await *awaitable* while ticking this engine once per loop turn.

        Raises
        ------
        TimeoutError
            If *awaitable* is still pending after *max_frames* frames.
        """
        task = asyncio.ensure_future(awaitable)
        frames = 0
        while not task.done():
            await asyncio.sleep(0)
            if task.done():
                break
            if frames >= max_frames:
                task.cancel()
                raise TimeoutError(f"Tweens did not settle within {max_frames} frames")
            self.update(frame_time)
            frames += 1
        log.debug("Tween driver ran %d frame(s)", frames)
        return task.result()
