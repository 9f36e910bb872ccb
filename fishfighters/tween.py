"""Frame-based value tweens with chained segments and easing curves."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Easing = Callable[[float], float]


def linear(t: float) -> float:
    """Identity easing over [0, 1]; values outside are clamped."""
    return min(max(float(t), 0.0), 1.0)


def quadratic_out(t: float) -> float:
    """Quadratic easing that decelerates towards the end."""
    return t * (2.0 - t)


def bounce_out(t: float) -> float:
    """Easing that bounces against the end value before settling."""
    if t < 1.0 / 2.75:
        return 7.5625 * t * t
    if t < 2.0 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


@dataclass
class _Segment:
    target: float
    frames: float = 0.0
    easing: Easing = linear


class Tween:
    """A tween from a start value through one or more targets.

    Build it with chained calls: ``Tween(0).to(10).during(60).via(quadratic_out)``.
    ``during`` and ``via`` apply to the most recently added target.
    """

    def __init__(self, start: float) -> None:
        self._start = float(start)
        self._segments: list[_Segment] = []
        self._frame = 0.0

    def _last(self) -> _Segment:
        if not self._segments:
            raise ValueError("a target must be added with to() first")
        return self._segments[-1]

    def _total_frames(self) -> float:
        return sum(segment.frames for segment in self._segments)

    def to(self, value: float) -> Tween:
        """Add a target value to reach after the previous one."""
        self._segments.append(_Segment(float(value)))
        return self

    def during(self, frames: float) -> Tween:
        """Set how many frames the last segment lasts."""
        if frames < 0:
            raise ValueError("a segment cannot last a negative number of frames")
        self._last().frames = float(frames)
        return self

    def via(self, easing: Easing) -> Tween:
        """Set the easing curve of the last segment."""
        self._last().easing = easing
        return self

    def step(self, frames: float) -> float:
        """Advance by ``frames`` (clamped to the tween's span) and return the value."""
        self._frame = min(max(self._frame + frames, 0.0), self._total_frames())
        return self.value()

    def progress(self) -> float:
        """Fraction of the whole tween that has elapsed, from 0 to 1."""
        total = self._total_frames()
        if total <= 0.0:
            return 1.0
        return self._frame / total

    def value(self) -> float:
        """The value at the current frame."""
        current = self._start
        remaining = self._frame
        for segment in self._segments:
            if remaining < segment.frames:
                t = remaining / segment.frames
                return current + (segment.target - current) * segment.easing(t)
            remaining -= segment.frames
            current = segment.target
        return current