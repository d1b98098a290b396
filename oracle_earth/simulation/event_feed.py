"""Crisis event feed: a bounded, newest-first list fed by an event source.

The feed owns ordering and eviction. Where events come from is the
:class:`EventSource`'s business: ``SyntheticEventSource`` invents them from
a fixed template catalog, and a real ingestion pipeline can take its place
(or call :meth:`EventFeed.push` directly) without touching the feed.
"""

from __future__ import annotations

import logging
import random
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Iterable, Protocol

from oracle_earth.simulation.constants import (
    EVENT_TEMPLATES,
    FEED_CAPACITY,
    FEED_EVENT_PROBABILITY,
    FEED_INTERVAL_MS,
    FILTER_ALL,
    SEVERITIES,
)
from oracle_earth.simulation.models import CrisisEvent
from oracle_earth.simulation.scheduler import CancelToken, Scheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_time_ago(timestamp: datetime, now: datetime | None = None) -> str:
    """Human-readable age of an event: 'Just now', '5m ago', '3h ago', '2d ago'."""
    now = now or utc_now()
    minutes = int((now - timestamp).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


# ---------------------------------------------------------------------------
# Event sources
# ---------------------------------------------------------------------------

class EventSource(Protocol):
    def poll(self) -> CrisisEvent | None:
        """Return the next event, or None when nothing happened this tick."""
        ...


class SyntheticEventSource:
    """Random stand-in for a live incident stream.

    Each poll produces an event with independent probability *probability*,
    drawn uniformly from the template catalog with a uniform severity.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Clock = utc_now,
        probability: float = FEED_EVENT_PROBABILITY,
        templates: list[dict[str, str]] | None = None,
    ):
        self.rng = rng or random.Random()
        self.clock = clock
        self.probability = probability
        self.templates = templates or EVENT_TEMPLATES

    def generate(self) -> CrisisEvent:
        """Build one event unconditionally."""
        template = self.rng.choice(self.templates)
        severity = self.rng.choice(SEVERITIES)
        coordinates = (
            round(self.rng.uniform(-90.0, 90.0), 4),
            round(self.rng.uniform(-180.0, 180.0), 4),
        )
        return CrisisEvent(
            id=uuid.UUID(int=self.rng.getrandbits(128), version=4).hex,
            title=template["title"],
            location=template["location"],
            severity=severity,
            category=template["category"],
            created_at=self.clock(),
            description=template["description"],
            coordinates=coordinates,
        )

    def poll(self) -> CrisisEvent | None:
        if self.rng.random() >= self.probability:
            return None
        return self.generate()

    def batch(self, count: int) -> list[CrisisEvent]:
        """*count* events built unconditionally, for pre-populating a feed."""
        return [self.generate() for _ in range(count)]


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------

class EventFeed:
    """Newest-first crisis feed capped at *capacity* entries.

    ``start()`` / ``stop()`` switch between live and paused. Stopping keeps
    the current events. Ticks that arrive after ``stop()`` are ignored.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        source: EventSource,
        capacity: int = FEED_CAPACITY,
        interval_ms: int = FEED_INTERVAL_MS,
        on_event: Callable[[CrisisEvent], None] | None = None,
        on_select: Callable[[CrisisEvent], None] | None = None,
    ):
        self._scheduler = scheduler
        self.source = source
        self.capacity = capacity
        self.interval_ms = interval_ms
        self._on_event = on_event
        self._on_select = on_select
        self._events: deque[CrisisEvent] = deque()
        self._live = False
        self._timer: CancelToken | None = None

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def events(self) -> list[CrisisEvent]:
        """Snapshot of the feed, newest first."""
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def start(self) -> None:
        if self._live:
            return
        self._live = True
        self._timer = self._scheduler.schedule_repeating(self.interval_ms, self._tick)
        logger.info("Crisis feed is live (every %dms)", self.interval_ms)

    def stop(self) -> None:
        if not self._live:
            return
        self._live = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        logger.info("Crisis feed paused with %d event(s)", len(self._events))

    def set_live(self, live: bool) -> None:
        if live:
            self.start()
        else:
            self.stop()

    def close(self) -> None:
        self.stop()

    def push(self, event: CrisisEvent) -> None:
        """Insert *event* as the newest entry, evicting the oldest past capacity."""
        self._events.appendleft(event)
        while len(self._events) > self.capacity:
            evicted = self._events.pop()
            logger.debug("Evicted event %s (%s)", evicted.id, evicted.title)
        if self._on_event is not None:
            self._on_event(event)

    def seed(self, events: Iterable[CrisisEvent]) -> int:
        """Pre-populate the feed with *events*, oldest first. Returns how many were pushed."""
        count = 0
        for event in events:
            self.push(event)
            count += 1
        return count

    def filter_by(self, category: str = FILTER_ALL) -> list[CrisisEvent]:
        if category == FILTER_ALL:
            return self.events
        return [e for e in self._events if e.category == category]

    def get(self, event_id: str) -> CrisisEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def select(self, event_id: str) -> CrisisEvent | None:
        """Hand the event to the selection callback without touching the feed."""
        event = self.get(event_id)
        if event is not None and self._on_select is not None:
            self._on_select(event)
        return event

    def _tick(self) -> None:
        if not self._live:
            return
        try:
            event = self.source.poll()
        except Exception:
            logger.exception("Event source poll failed; skipping this tick")
            return
        if event is None:
            return
        logger.debug("New %s event: %s (%s)", event.severity, event.title, event.location)
        self.push(event)
