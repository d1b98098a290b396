"""Simulation session: owns the time cursor, crisis feed and evaluator.

The session is the scope that every periodic timer belongs to. Leaving
the ``with`` / ``async with`` block, normally or through an exception,
stops playback and the feed, so no tick can touch a discarded state.
"""

from __future__ import annotations

import logging
import random

from oracle_earth.config import OracleSettings
from oracle_earth.simulation.event_feed import EventFeed, EventSource, SyntheticEventSource
from oracle_earth.simulation.models import CrisisEvent, SimulationSnapshot
from oracle_earth.simulation.scenario_evaluator import AnalysisBackend, ScenarioEvaluator
from oracle_earth.simulation.scheduler import Scheduler
from oracle_earth.simulation.time_cursor import TimeCursor

logger = logging.getLogger(__name__)


class SimulationSession:
    def __init__(
        self,
        time_cursor: TimeCursor,
        feed: EventFeed,
        evaluator: ScenarioEvaluator,
    ):
        self.time_cursor = time_cursor
        self.feed = feed
        self.evaluator = evaluator
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: OracleSettings,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        source: EventSource | None = None,
        backend: AnalysisBackend | None = None,
    ) -> "SimulationSession":
        """Wire the three components from configuration.

        With no *source*, a synthetic one is built and the feed is
        pre-populated from it. A caller-supplied source starts empty.
        """
        time_cursor = TimeCursor(
            scheduler,
            min_year=settings.min_year,
            max_year=settings.max_year,
            present_year=settings.present_year,
            interval_ms=settings.playback_interval_ms,
        )
        initial: list[CrisisEvent] = []
        if source is None:
            synthetic = SyntheticEventSource(rng=rng, probability=settings.feed_event_probability)
            initial = synthetic.batch(settings.feed_initial_events)
            source = synthetic
        feed = EventFeed(
            scheduler,
            source,
            capacity=settings.feed_capacity,
            interval_ms=settings.feed_interval_ms,
        )
        evaluator = ScenarioEvaluator(backend=backend, delay_seconds=settings.analysis_delay_seconds)
        feed.seed(initial)
        return cls(time_cursor, feed, evaluator)

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Bring the crisis feed live (the cursor starts paused)."""
        self.feed.start()

    def close(self) -> None:
        """Cancel every timer the components own. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self.time_cursor.close()
        self.feed.close()
        logger.info("Simulation session closed")

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            time_cursor=self.time_cursor.state(),
            milestone=self.time_cursor.milestone(),
            feed_live=self.feed.is_live,
            events=self.feed.events,
            run_state=self.evaluator.state,
            selected_scenario_id=self.evaluator.selected.id if self.evaluator.selected else None,
            last_run=self.evaluator.last_run,
        )

    def __enter__(self) -> "SimulationSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "SimulationSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
