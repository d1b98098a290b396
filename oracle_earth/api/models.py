"""Pydantic request/response models for the Oracle Earth API."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from oracle_earth.intelligence.news import NewsArticle
from oracle_earth.simulation.models import CrisisEvent, OutcomeReport, RunState, Scenario, TimeCursorState

_NAME_RE = re.compile(r"^[\w \-'.,()&/]+$")


def _check_name(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be blank.")
    if not _NAME_RE.match(value):
        raise ValueError(f"{field} contains unsupported characters.")
    return value


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

class EvaluateRequest(BaseModel):
    scenario_id: str = Field(..., min_length=1, max_length=100)
    parameters: dict[str, float] = {}


class EvaluateResponse(BaseModel):
    scenario_id: str
    run_state: RunState
    report: OutcomeReport
    parameter_overrides: dict[str, float] = {}
    effective_parameters: dict[str, float] = {}


class ScenarioListResponse(BaseModel):
    scenarios: list[Scenario]


class SeekRequest(BaseModel):
    year: int


class SpeedRequest(BaseModel):
    speed: int | None = None  # None cycles 1 -> 2 -> 5 -> 1


class JumpRequest(BaseModel):
    label: str = Field(..., min_length=1, max_length=20)


class TimelineResponse(BaseModel):
    state: TimeCursorState
    milestone: dict | None = None
    progress: float


class EventListResponse(BaseModel):
    live: bool
    category: str = "all"
    events: list[CrisisEvent] = []


class FeedLiveRequest(BaseModel):
    live: bool


# ---------------------------------------------------------------------------
# Intelligence
# ---------------------------------------------------------------------------

class ConflictRequest(BaseModel):
    country1: str = Field(..., max_length=100)
    country2: str = Field(..., max_length=100)

    @field_validator("country1", "country2")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return _check_name(v, "Country")


class ConflictResponse(BaseModel):
    id: int | None = None
    country1: str
    country2: str
    probability: float
    factors: list[str]
    reasoning: str = ""
    cached: bool = False


class TreatyRequest(ConflictRequest):
    factors: list[str] = []


class TreatyResponse(BaseModel):
    treaty: str


class EnvironmentRequest(BaseModel):
    region: str = Field(..., max_length=100)
    type: str = Field(..., max_length=50)

    @field_validator("region", "type")
    @classmethod
    def validate_fields(cls, v: str) -> str:
        return _check_name(v, "Region and type")


class EnvironmentResponse(BaseModel):
    recommendations: str


class TerrorismRequest(BaseModel):
    country: str = Field(..., max_length=100)
    organization: str = Field(..., max_length=100)

    @field_validator("country", "organization")
    @classmethod
    def validate_fields(cls, v: str) -> str:
        return _check_name(v, "Country and organization")


class TerrorismResponse(BaseModel):
    analysis: str


class EconomicForecastRequest(BaseModel):
    country: str = Field(..., max_length=100)

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return _check_name(v, "Country")


class EconomicForecastResponse(BaseModel):
    forecast: str


# Ingestion bodies keep the stored column names (tradeBalance, riskLevel, ...)

class EnvironmentRecord(BaseModel):
    region: str = Field(..., max_length=100)
    type: str = Field(..., max_length=50)
    value: float
    unit: str = Field(..., max_length=50)
    coordinates: str = Field("0,0", pattern=r"^-?\d+(\.\d+)?,\s*-?\d+(\.\d+)?$")

    @field_validator("region", "type")
    @classmethod
    def validate_fields(cls, v: str) -> str:
        return _check_name(v, "Region and type")


class EconomicRecord(BaseModel):
    country: str = Field(..., max_length=100)
    gdp: float
    inflation: float
    unemployment: float
    tradeBalance: float

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return _check_name(v, "Country")


class TerrorismRecord(BaseModel):
    country: str = Field(..., max_length=100)
    organization: str = Field(..., max_length=100)
    riskLevel: Literal["low", "medium", "high", "critical"]
    fundingSources: str = Field("", max_length=500)
    lastActivity: str = Field("", max_length=50)

    @field_validator("country", "organization")
    @classmethod
    def validate_fields(cls, v: str) -> str:
        return _check_name(v, "Country and organization")


class InsertResponse(BaseModel):
    id: int | None = None
    success: bool = True


class NewsResponse(BaseModel):
    success: bool = True
    data: list[NewsArticle]
    timestamp: datetime
    category: str
    count: int
    sentiment: dict[str, int]


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    response: str


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    database_connected: bool = False
    llm_available: bool = False
    simulation_active: bool = False
