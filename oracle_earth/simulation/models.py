"""Pydantic v2 models for the simulation layer.

Importable without the API, the LLM gateway or a database.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Severity = Literal["low", "medium", "high", "critical"]
EventCategory = Literal["conflict", "environment", "terrorism", "economy", "natural"]
ScenarioCategory = Literal["conflict", "environment", "economy", "policy"]
EraLabel = Literal["Historical", "Live", "Predicted"]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class TimeCursorState(BaseModel):
    current_year: int
    is_playing: bool = False
    speed: Literal[1, 2, 5] = 1
    min_year: int = 1990
    max_year: int = 2050
    present_year: int = 2024
    label: EraLabel


class CrisisEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    location: str
    severity: Severity
    category: EventCategory
    created_at: datetime
    description: str
    coordinates: tuple[float, float] | None = None  # (latitude, longitude)

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(cls, v: tuple[float, float] | None) -> tuple[float, float] | None:
        if v is None:
            return v
        lat, lng = v
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
            raise ValueError(f"Coordinates out of range: {v}")
        return v


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    category: ScenarioCategory
    base_parameters: dict[str, float]
    icon: str = ""


class OutcomeReport(BaseModel):
    scenario_title: str
    positive_outcomes: list[str] = Field(min_length=1)
    negative_outcomes: list[str] = Field(min_length=1)
    neutral_outcomes: list[str] = Field(min_length=1)
    probability_percent: int = Field(ge=0, le=100)
    timeframe_label: str
    global_impact_score: float = Field(ge=0.0, le=10.0)


class ScenarioRun(BaseModel):
    scenario_id: str
    parameter_overrides: dict[str, float] = {}
    effective_parameters: dict[str, float] = {}
    outcome: OutcomeReport
    started_at: datetime
    completed_at: datetime


class SimulationSnapshot(BaseModel):
    """Read-only view of every component, taken at one instant."""

    time_cursor: TimeCursorState
    milestone: dict | None = None
    feed_live: bool
    events: list[CrisisEvent] = []
    run_state: RunState
    selected_scenario_id: str | None = None
    last_run: ScenarioRun | None = None
