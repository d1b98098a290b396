"""AI analysis and intelligence data endpoints.

Analysis handlers always answer 200 with either the LLM result or a
fallback; only malformed requests are rejected (422).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from oracle_earth.api.deps import get_analyst, get_database, get_news
from oracle_earth.api.models import (
    ChatRequest,
    ChatResponse,
    ConflictRequest,
    ConflictResponse,
    EconomicForecastRequest,
    EconomicForecastResponse,
    EconomicRecord,
    EnvironmentRecord,
    EnvironmentRequest,
    EnvironmentResponse,
    InsertResponse,
    MessageResponse,
    NewsResponse,
    TerrorismRecord,
    TerrorismRequest,
    TerrorismResponse,
    TreatyRequest,
    TreatyResponse,
)
from oracle_earth.intelligence.analyst import OracleAnalyst
from oracle_earth.intelligence.news import DEFAULT_NEWS_LIMIT, NEWS_CATEGORIES, NewsDesk, sentiment_breakdown
from oracle_earth.simulation.constants import FILTER_ALL
from oracle_earth.storage.database import OracleDatabase, utc_timestamp
from oracle_earth.utils import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["intelligence"])


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

@router.post("/analyze-conflict", response_model=ConflictResponse)
def analyze_conflict(request: ConflictRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    analysis = analyst.analyze_conflict(request.country1, request.country2)
    return ConflictResponse(**analysis.model_dump())


@router.post("/generate-treaty", response_model=TreatyResponse)
def generate_treaty(request: TreatyRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    return TreatyResponse(treaty=analyst.generate_treaty(request.country1, request.country2, request.factors))


@router.post("/analyze-environment", response_model=EnvironmentResponse)
def analyze_environment(request: EnvironmentRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    return EnvironmentResponse(recommendations=analyst.analyze_environment(request.region, request.type))


@router.post("/analyze-terrorism", response_model=TerrorismResponse)
def analyze_terrorism(request: TerrorismRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    return TerrorismResponse(analysis=analyst.analyze_terrorism(request.country, request.organization))


@router.post("/economic-forecast", response_model=EconomicForecastResponse)
def economic_forecast(request: EconomicForecastRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    return EconomicForecastResponse(forecast=analyst.forecast_economy(request.country))


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, analyst: OracleAnalyst = Depends(get_analyst)):
    return ChatResponse(response=analyst.answer_question(request.message))


# ---------------------------------------------------------------------------
# Stored data
# ---------------------------------------------------------------------------

def _read(fetch, label: str) -> list[dict]:
    try:
        return fetch()
    except StorageError:
        logger.error("Failed to fetch %s", label)
        raise HTTPException(status_code=500, detail=f"Failed to fetch {label}")


@router.get("/chat-history")
def chat_history(database: OracleDatabase = Depends(get_database)):
    return _read(database.get_chat_history, "chat history")


@router.get("/conflicts")
def conflicts(database: OracleDatabase = Depends(get_database)):
    return _read(database.get_conflicts, "conflicts")


@router.get("/environment")
def environment(type: str | None = None, database: OracleDatabase = Depends(get_database)):
    return _read(lambda: database.get_environment_data(type), "environment data")


@router.get("/terrorism")
def terrorism(database: OracleDatabase = Depends(get_database)):
    return _read(database.get_terrorism_data, "terrorism data")


@router.get("/economy")
def economy(database: OracleDatabase = Depends(get_database)):
    return _read(database.get_economic_data, "economic data")


@router.post("/init-db", response_model=MessageResponse)
def init_db(database: OracleDatabase = Depends(get_database)):
    try:
        database.initialize()
        database.seed_demo_data()
    except StorageError:
        logger.error("Database initialization failed")
        raise HTTPException(status_code=500, detail="Failed to initialize database")
    return MessageResponse(message="Database initialized successfully")


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

def _write(insert, label: str) -> InsertResponse:
    try:
        row_id = insert()
    except StorageError:
        logger.error("Failed to insert %s", label)
        raise HTTPException(status_code=500, detail=f"Failed to insert {label}")
    logger.info("Stored %s row %s", label, row_id)
    return InsertResponse(id=row_id)


@router.post("/environment", response_model=InsertResponse)
def add_environment(record: EnvironmentRecord, database: OracleDatabase = Depends(get_database)):
    return _write(
        lambda: database.insert_environment_data(
            record.region, record.type, record.value, record.unit, record.coordinates, utc_timestamp()
        ),
        "environment data",
    )


@router.post("/economy", response_model=InsertResponse)
def add_economy(record: EconomicRecord, database: OracleDatabase = Depends(get_database)):
    return _write(
        lambda: database.insert_economic_data(
            record.country,
            record.gdp,
            record.inflation,
            record.unemployment,
            record.tradeBalance,
            utc_timestamp(),
        ),
        "economic data",
    )


@router.post("/terrorism", response_model=InsertResponse)
def add_terrorism(record: TerrorismRecord, database: OracleDatabase = Depends(get_database)):
    return _write(
        lambda: database.insert_terrorism_data(
            record.country, record.organization, record.riskLevel, record.fundingSources, record.lastActivity
        ),
        "terrorism data",
    )


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------

@router.get("/news", response_model=NewsResponse)
def news(
    category: str = FILTER_ALL,
    limit: int = Query(DEFAULT_NEWS_LIMIT, ge=1, le=100),
    breaking: bool = False,
    country: str | None = Query(None, max_length=100),
    desk: NewsDesk = Depends(get_news),
):
    if category != FILTER_ALL and category not in NEWS_CATEGORIES:
        raise HTTPException(status_code=422, detail=f"Unknown news category: {category}")
    if breaking:
        articles = desk.breaking()
    elif country:
        articles = desk.by_country(country)
    else:
        articles = desk.latest(category, limit)
    return NewsResponse(
        data=articles,
        timestamp=desk.clock(),
        category=category,
        count=len(articles),
        sentiment=sentiment_breakdown(articles),
    )
