"""What-if scenario evaluator.

Maps a scenario id plus parameter adjustments to an :class:`OutcomeReport`.
Outcomes come from an :class:`AnalysisBackend`; the default backend reads
the hand-authored templates in ``constants.OUTCOME_TEMPLATES``. Parameter
overrides are clamped, merged and recorded on the run, but the template
backend does not yet vary its text or numbers with them.

Run lifecycle::

    IDLE --evaluate--> RUNNING --done--> COMPLETED --reset--> IDLE

A second ``evaluate`` while RUNNING is rejected and returns ``None``.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable, Protocol

from oracle_earth.simulation.constants import (
    ANALYSIS_DELAY_SECONDS,
    GENERIC_OUTCOME,
    OUTCOME_TEMPLATES,
    OVERRIDE_MAX_FACTOR,
    OVERRIDE_MIN_FACTOR,
    SCENARIO_CATALOG,
)
from oracle_earth.simulation.event_feed import Clock, utc_now
from oracle_earth.simulation.models import OutcomeReport, RunState, Scenario, ScenarioRun

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_CATALOG: tuple[Scenario, ...] = tuple(Scenario(**entry) for entry in SCENARIO_CATALOG)


def list_scenarios() -> list[Scenario]:
    """The fixed what-if catalog, in display order."""
    return list(_CATALOG)


def get_scenario(scenario_id: str) -> Scenario | None:
    for scenario in _CATALOG:
        if scenario.id == scenario_id:
            return scenario
    return None


def override_bounds(default: float) -> tuple[float, float]:
    """Allowed range for an override of *default*: 0.5x to 1.5x.

    Negative defaults flip the factors so the low bound stays below the high one.
    """
    a, b = default * OVERRIDE_MIN_FACTOR, default * OVERRIDE_MAX_FACTOR
    return (min(a, b), max(a, b))


def clamp_override(default: float, value: float | None) -> float:
    if value is None:
        return default
    value = float(value)
    if math.isnan(value):
        return default
    low, high = override_bounds(default)
    return max(low, min(high, value))


def clamp_overrides(scenario: Scenario, overrides: dict[str, float]) -> dict[str, float]:
    """Clamp each override into range and drop names the scenario does not define."""
    clamped: dict[str, float] = {}
    for name, value in overrides.items():
        if name not in scenario.base_parameters:
            logger.warning("Dropping unknown parameter %r for scenario %s", name, scenario.id)
            continue
        default = scenario.base_parameters[name]
        result = clamp_override(default, value)
        if result != value:
            logger.info("Clamped %s.%s from %s to %s", scenario.id, name, value, result)
        clamped[name] = result
    return clamped


# ---------------------------------------------------------------------------
# Analysis backends
# ---------------------------------------------------------------------------

class AnalysisBackend(Protocol):
    def analyze(
        self, scenario_id: str, scenario: Scenario | None, parameters: dict[str, float]
    ) -> OutcomeReport: ...


class TemplateAnalysisBackend:
    """Static per-scenario outcome lookup with a generic fallback."""

    def __init__(self, templates: dict[str, dict] | None = None, fallback: dict | None = None):
        self.templates = OUTCOME_TEMPLATES if templates is None else templates
        self.fallback = GENERIC_OUTCOME if fallback is None else fallback

    def analyze(
        self, scenario_id: str, scenario: Scenario | None, parameters: dict[str, float]
    ) -> OutcomeReport:
        template = self.templates.get(scenario_id, self.fallback)
        title = scenario.title if scenario is not None else scenario_id
        return OutcomeReport(scenario_title=title, **template)


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

class ScenarioEvaluator:
    """Holds the selection, pending parameter edits and the last run."""

    def __init__(
        self,
        backend: AnalysisBackend | None = None,
        delay_seconds: float = ANALYSIS_DELAY_SECONDS,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = utc_now,
        on_complete: Callable[[ScenarioRun], None] | None = None,
    ):
        self.backend = backend or TemplateAnalysisBackend()
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._clock = clock
        self._on_complete = on_complete

        self._state = RunState.IDLE
        self._selected: Scenario | None = None
        self._pending: dict[str, float] = {}
        self._last_run: ScenarioRun | None = None
        self._generation = 0

    # -- State ---------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def selected(self) -> Scenario | None:
        return self._selected

    @property
    def pending_overrides(self) -> dict[str, float]:
        return dict(self._pending)

    @property
    def last_run(self) -> ScenarioRun | None:
        return self._last_run

    @property
    def last_report(self) -> OutcomeReport | None:
        return self._last_run.outcome if self._last_run else None

    def list_scenarios(self) -> list[Scenario]:
        return list_scenarios()

    # -- Selection -----------------------------------------------------------

    def select(self, scenario_id: str) -> Scenario | None:
        """Choose the scenario for the next run; pending edits are discarded."""
        scenario = get_scenario(scenario_id)
        if scenario is None:
            logger.warning("Cannot select unknown scenario %r", scenario_id)
            return None
        self._selected = scenario
        self._pending = {}
        return scenario

    def set_parameter(self, name: str, value: float) -> float | None:
        """Stage an override for the selected scenario, clamped into range."""
        if self._selected is None:
            return None
        clamped = clamp_overrides(self._selected, {name: value})
        if name not in clamped:
            return None
        self._pending[name] = clamped[name]
        return clamped[name]

    # -- Evaluation ----------------------------------------------------------

    async def evaluate(
        self, scenario_id: str | None = None, overrides: dict[str, float] | None = None
    ) -> OutcomeReport | None:
        """Run the analysis for *scenario_id* (or the selection).

        Returns the report, or ``None`` when the call was rejected because
        another run is in flight, when nothing is selected, or when
        ``reset()`` discarded this run before it finished.
        """
        if self._state is RunState.RUNNING:
            logger.warning("Evaluation already running; rejecting %r", scenario_id)
            return None

        if scenario_id is None:
            if self._selected is None:
                return None
            scenario_id = self._selected.id
            requested = {**self._pending, **(overrides or {})}
        else:
            requested = dict(overrides or {})

        scenario = get_scenario(scenario_id)
        if scenario is None:
            logger.warning("Unknown scenario %r; using generic outcome", scenario_id)
            clamped: dict[str, float] = {}
            effective: dict[str, float] = {}
        else:
            clamped = clamp_overrides(scenario, requested)
            effective = {**scenario.base_parameters, **clamped}

        self._state = RunState.RUNNING
        generation = self._generation
        started_at = self._clock()
        try:
            if self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            report = self._analyze(scenario_id, scenario, effective)
        finally:
            if generation == self._generation and self._state is RunState.RUNNING:
                self._state = RunState.IDLE

        if generation != self._generation:
            logger.info("Discarding result for %s after reset", scenario_id)
            return None

        run = ScenarioRun(
            scenario_id=scenario_id,
            parameter_overrides=clamped,
            effective_parameters=effective,
            outcome=report,
            started_at=started_at,
            completed_at=self._clock(),
        )
        self._last_run = run
        self._state = RunState.COMPLETED
        if self._on_complete is not None:
            self._on_complete(run)
        return report

    def _analyze(
        self, scenario_id: str, scenario: Scenario | None, parameters: dict[str, float]
    ) -> OutcomeReport:
        try:
            return self.backend.analyze(scenario_id, scenario, parameters)
        except Exception:
            logger.exception("Analysis backend failed for %s; using generic outcome", scenario_id)
            title = scenario.title if scenario is not None else scenario_id
            return OutcomeReport(scenario_title=title, **GENERIC_OUTCOME)

    def reset(self) -> None:
        """Clear the last report and the selection; back to IDLE."""
        self._generation += 1
        self._state = RunState.IDLE
        self._selected = None
        self._pending = {}
        self._last_run = None
