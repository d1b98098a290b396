"""Tests for the crisis event feed and the synthetic event source."""

import random
from datetime import timedelta

import pytest

from oracle_earth.simulation.constants import EVENT_CATEGORIES, EVENT_TEMPLATES, SEVERITIES
from oracle_earth.simulation.event_feed import EventFeed, SyntheticEventSource, format_time_ago


class ScriptedSource:
    """Event source that replays a fixed list, one poll per tick."""

    def __init__(self, events):
        self._events = list(events)

    def poll(self):
        if not self._events:
            return None
        return self._events.pop(0)


@pytest.fixture
def always_source(rng, clock):
    return SyntheticEventSource(rng=rng, clock=clock, probability=1.0)


# ---------------------------------------------------------------------------
# Synthetic source
# ---------------------------------------------------------------------------

class TestSyntheticEventSource:
    def test_generate_uses_catalog(self, always_source):
        titles = {t["title"]: t for t in EVENT_TEMPLATES}
        for _ in range(50):
            event = always_source.generate()
            template = titles[event.title]
            assert event.location == template["location"]
            assert event.category == template["category"]
            assert event.description == template["description"]
            assert event.severity in SEVERITIES

    def test_generated_coordinates_in_range(self, always_source):
        for _ in range(50):
            lat, lng = always_source.generate().coordinates
            assert -90.0 <= lat <= 90.0
            assert -180.0 <= lng <= 180.0

    def test_generated_ids_are_unique(self, always_source):
        ids = {always_source.generate().id for _ in range(200)}
        assert len(ids) == 200

    def test_same_seed_same_events(self, clock):
        a = SyntheticEventSource(rng=random.Random(7), clock=clock, probability=1.0)
        b = SyntheticEventSource(rng=random.Random(7), clock=clock, probability=1.0)
        assert [a.generate() for _ in range(5)] == [b.generate() for _ in range(5)]

    def test_created_at_from_clock(self, always_source, clock):
        assert always_source.generate().created_at == clock()

    def test_batch_ignores_probability(self, rng, clock):
        source = SyntheticEventSource(rng=rng, clock=clock, probability=0.0)
        events = source.batch(4)
        assert len(events) == 4
        assert len({e.id for e in events}) == 4

    def test_zero_probability_never_emits(self, rng, clock):
        source = SyntheticEventSource(rng=rng, clock=clock, probability=0.0)
        assert all(source.poll() is None for _ in range(100))

    def test_poll_rate_roughly_matches_probability(self, clock):
        source = SyntheticEventSource(rng=random.Random(99), clock=clock, probability=0.3)
        hits = sum(1 for _ in range(2000) if source.poll() is not None)
        assert 450 <= hits <= 750

    def test_covers_all_categories(self, always_source):
        seen = {always_source.generate().category for _ in range(200)}
        assert seen == set(EVENT_CATEGORIES)


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------

class TestEventFeed:
    def test_starts_paused_and_empty(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        assert feed.is_live is False
        assert feed.events == []
        assert len(feed) == 0

    def test_no_events_until_started(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        scheduler.advance(60_000)
        assert len(feed) == 0

    def test_tick_prepends_newest_first(self, scheduler, make_event):
        first, second = make_event(), make_event()
        feed = EventFeed(scheduler, ScriptedSource([first, second]))
        feed.start()
        scheduler.advance(10_000)
        assert [e.id for e in feed.events] == [second.id, first.id]

    def test_tick_without_event_leaves_feed(self, scheduler, rng, clock):
        feed = EventFeed(scheduler, SyntheticEventSource(rng=rng, clock=clock, probability=0.0))
        feed.start()
        scheduler.advance(50_000)
        assert len(feed) == 0

    def test_capacity_never_exceeded(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        feed.start()
        for _ in range(30):
            scheduler.advance(5000)
            assert len(feed) <= 10
        assert len(feed) == 10

    def test_oldest_evicted_first(self, scheduler, make_event):
        events = [make_event() for _ in range(12)]
        feed = EventFeed(scheduler, ScriptedSource(events))
        feed.start()
        scheduler.advance(12 * 5000)
        ids = [e.id for e in feed.events]
        assert ids == [e.id for e in reversed(events[2:])]
        assert events[0].id not in ids
        assert events[1].id not in ids

    def test_stop_keeps_events_and_ignores_later_ticks(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        feed.start()
        scheduler.advance(15_000)
        before = feed.events
        feed.stop()
        scheduler.advance(60_000)
        assert feed.is_live is False
        assert feed.events == before
        assert scheduler.active_timers == 0

    def test_stale_tick_after_stop_is_ignored(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        feed.start()
        feed.stop()
        feed._tick()
        assert len(feed) == 0

    def test_restart_resumes_generation(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        feed.set_live(True)
        scheduler.advance(5000)
        feed.set_live(False)
        feed.set_live(True)
        scheduler.advance(5000)
        assert len(feed) == 2

    def test_start_twice_keeps_one_timer(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        feed.start()
        feed.start()
        assert scheduler.active_timers == 1

    def test_on_event_callback(self, scheduler, make_event):
        received = []
        event = make_event()
        feed = EventFeed(scheduler, ScriptedSource([event]), on_event=received.append)
        feed.start()
        scheduler.advance(5000)
        assert received == [event]

    def test_seed_prepopulates(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source)
        assert feed.seed(always_source.batch(5)) == 5
        assert len(feed) == 5

    def test_seed_respects_capacity(self, scheduler, always_source):
        feed = EventFeed(scheduler, always_source, capacity=3)
        feed.seed(always_source.batch(8))
        assert len(feed) == 3

    def test_seed_newest_last(self, scheduler, make_event):
        first, second = make_event(), make_event()
        feed = EventFeed(scheduler, ScriptedSource([]))
        assert feed.seed(iter([first, second])) == 2
        assert feed.events == [second, first]

    def test_seed_empty_is_noop(self, scheduler):
        feed = EventFeed(scheduler, ScriptedSource([]))
        assert feed.seed([]) == 0
        assert len(feed) == 0

    def test_failed_poll_skips_tick_and_feed_keeps_running(self, scheduler, make_event, caplog):
        event = make_event()

        class FlakySource:
            def __init__(self):
                self.calls = 0

            def poll(self):
                self.calls += 1
                if self.calls == 1:
                    raise ConnectionError("ingest endpoint unreachable")
                return event if self.calls == 2 else None

        source = FlakySource()
        feed = EventFeed(scheduler, source)
        feed.start()
        with caplog.at_level("ERROR", logger="oracle_earth.simulation.event_feed"):
            scheduler.advance(15_000)
        assert source.calls == 3
        assert feed.is_live is True
        assert feed.events == [event]
        assert "ingest endpoint unreachable" in caplog.text

    def test_push_from_external_pipeline(self, scheduler, make_event):
        feed = EventFeed(scheduler, ScriptedSource([]), capacity=2)
        a, b, c = make_event(), make_event(), make_event()
        for event in (a, b, c):
            feed.push(event)
        assert feed.events == [c, b]


class TestFilterAndSelect:
    @pytest.fixture
    def feed(self, scheduler, make_event):
        feed = EventFeed(scheduler, ScriptedSource([]))
        for category in ["conflict", "environment", "conflict", "economy", "natural", "conflict"]:
            feed.push(make_event(category=category))
        return feed

    def test_filter_all_returns_full_feed(self, feed):
        assert feed.filter_by("all") == feed.events

    def test_filter_by_category_preserves_order(self, feed):
        conflicts = feed.filter_by("conflict")
        assert all(e.category == "conflict" for e in conflicts)
        assert conflicts == [e for e in feed.events if e.category == "conflict"]
        assert len(conflicts) == 3

    def test_filter_does_not_mutate(self, feed):
        before = feed.events
        feed.filter_by("economy")
        assert feed.events == before

    def test_filter_unknown_category_is_empty(self, feed):
        assert feed.filter_by("sports") == []

    def test_get_and_select(self, scheduler, make_event):
        selected = []
        event = make_event()
        feed = EventFeed(scheduler, ScriptedSource([]), on_select=selected.append)
        feed.push(event)
        assert feed.get(event.id) == event
        assert feed.select(event.id) == event
        assert selected == [event]
        assert feed.events == [event]

    def test_select_unknown_id(self, feed):
        assert feed.select("missing") is None


@pytest.mark.parametrize("age,expected", [
    (timedelta(seconds=30), "Just now"),
    (timedelta(minutes=5), "5m ago"),
    (timedelta(minutes=59), "59m ago"),
    (timedelta(hours=3), "3h ago"),
    (timedelta(days=2, hours=1), "2d ago"),
])
def test_format_time_ago(age, expected, clock):
    now = clock()
    assert format_time_ago(now - age, now=now) == expected
