"""Time machine cursor: a bounded, steppable year with play/pause.

The cursor never raises. Every year it receives is clamped into
``[min_year, max_year]``, and playback stops by itself at ``max_year``.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from oracle_earth.simulation.constants import (
    ERA_HISTORICAL,
    ERA_LIVE,
    ERA_PREDICTED,
    HISTORICAL_MILESTONES,
    MAX_YEAR,
    MIN_YEAR,
    PLAYBACK_INTERVAL_MS,
    PLAYBACK_SPEEDS,
    PRESENT_YEAR,
    QUICK_JUMPS,
)
from oracle_earth.simulation.models import TimeCursorState
from oracle_earth.simulation.scheduler import CancelToken, Scheduler

logger = logging.getLogger(__name__)


def era_label(year: int, present_year: int = PRESENT_YEAR) -> str:
    """Historical before the present year, Live on it, Predicted after."""
    if year < present_year:
        return ERA_HISTORICAL
    if year == present_year:
        return ERA_LIVE
    return ERA_PREDICTED


def nearest_milestone(year: int, milestones: list[dict] | None = None) -> dict | None:
    """Milestone at *year*, else the closest one (earlier entry wins ties)."""
    milestones = HISTORICAL_MILESTONES if milestones is None else milestones
    if not milestones:
        return None
    best = milestones[0]
    for entry in milestones[1:]:
        if abs(entry["year"] - year) < abs(best["year"] - year):
            best = entry
    return dict(best)


class TimeCursor:
    """Owns the current year, the playback flag and the playback speed."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_change: Callable[[int], None] | None = None,
        min_year: int = MIN_YEAR,
        max_year: int = MAX_YEAR,
        present_year: int = PRESENT_YEAR,
        interval_ms: int = PLAYBACK_INTERVAL_MS,
    ):
        self._scheduler = scheduler
        self._on_change = on_change
        self.min_year = min_year
        self.max_year = max_year
        self.present_year = present_year
        self.interval_ms = interval_ms

        self._year = self._clamp(present_year)
        self._speed = PLAYBACK_SPEEDS[0]
        self._playing = False
        self._timer: CancelToken | None = None

    # -- State ---------------------------------------------------------------

    @property
    def current_year(self) -> int:
        return self._year

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def label(self) -> str:
        return era_label(self._year, self.present_year)

    @property
    def progress(self) -> float:
        """Position of the cursor across the range, 0.0 to 1.0."""
        span = self.max_year - self.min_year
        if span == 0:
            return 1.0
        return (self._year - self.min_year) / span

    def milestone(self) -> dict | None:
        return nearest_milestone(self._year)

    def state(self) -> TimeCursorState:
        return TimeCursorState(
            current_year=self._year,
            is_playing=self._playing,
            speed=self._speed,
            min_year=self.min_year,
            max_year=self.max_year,
            present_year=self.present_year,
            label=self.label,
        )

    # -- Transitions ---------------------------------------------------------

    def seek(self, year: float) -> int:
        """Move to *year* (clamped). Playback state is left alone.

        NaN leaves the cursor where it is.
        """
        if math.isnan(year):
            logger.debug("Ignoring seek to NaN")
            return self._year
        self._set_year(self._clamp(year), always_notify=True)
        return self._year

    def reset(self) -> int:
        return self.seek(self.min_year)

    def jump_to(self, label: str) -> int:
        """Seek to a quick-jump label such as ``"9/11"``; unknown labels do nothing."""
        year = QUICK_JUMPS.get(label)
        if year is None:
            logger.debug("Unknown quick-jump label %r", label)
            return self._year
        return self.seek(year)

    def play(self) -> None:
        if self._playing:
            return
        self._playing = True
        self._timer = self._scheduler.schedule_repeating(self.interval_ms, self._tick)
        logger.debug("Playback started at %d (speed %dx)", self._year, self._speed)

    def pause(self) -> None:
        if not self._playing:
            return
        self._stop_timer()
        logger.debug("Playback paused at %d", self._year)

    def toggle(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.play()
        return self._playing

    def set_speed(self, speed: int) -> int:
        """Set the speed, snapping to the nearest allowed value."""
        self._speed = min(PLAYBACK_SPEEDS, key=lambda s: (abs(s - speed), s))
        return self._speed

    def cycle_speed(self) -> int:
        idx = PLAYBACK_SPEEDS.index(self._speed)
        self._speed = PLAYBACK_SPEEDS[(idx + 1) % len(PLAYBACK_SPEEDS)]
        return self._speed

    def close(self) -> None:
        """Stop playback and release the timer."""
        self._stop_timer()

    # -- Internals -----------------------------------------------------------

    def _tick(self) -> None:
        # A tick delivered after pause() must not move the cursor.
        if not self._playing:
            return
        next_year = self._year + self._speed
        if next_year > self.max_year:
            self._stop_timer()
            logger.info("Playback reached %d and stopped", self.max_year)
            self._set_year(self.max_year)
            return
        self._set_year(next_year)

    def _stop_timer(self) -> None:
        self._playing = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_year(self, year: int, always_notify: bool = False) -> None:
        changed = year != self._year
        self._year = year
        if self._on_change is not None and (changed or always_notify):
            self._on_change(year)

    def _clamp(self, year: float) -> int:
        if math.isinf(year):
            return self.max_year if year > 0 else self.min_year
        return max(self.min_year, min(self.max_year, int(year)))
