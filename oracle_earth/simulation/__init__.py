"""Time machine, crisis feed and what-if simulator."""

from oracle_earth.simulation.event_feed import EventFeed, SyntheticEventSource
from oracle_earth.simulation.scenario_evaluator import ScenarioEvaluator, list_scenarios
from oracle_earth.simulation.scheduler import AsyncioScheduler, VirtualScheduler
from oracle_earth.simulation.session import SimulationSession
from oracle_earth.simulation.time_cursor import TimeCursor

__all__ = [
    "AsyncioScheduler",
    "EventFeed",
    "ScenarioEvaluator",
    "SimulationSession",
    "SyntheticEventSource",
    "TimeCursor",
    "VirtualScheduler",
    "list_scenarios",
]
