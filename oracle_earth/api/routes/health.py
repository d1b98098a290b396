"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends

from oracle_earth.api.deps import get_analyst, get_database, get_session
from oracle_earth.api.models import HealthResponse
from oracle_earth.intelligence.analyst import OracleAnalyst
from oracle_earth.simulation.session import SimulationSession
from oracle_earth.storage.database import OracleDatabase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(
    database: OracleDatabase = Depends(get_database),
    analyst: OracleAnalyst = Depends(get_analyst),
    session: SimulationSession = Depends(get_session),
):
    """Check database connectivity and LLM availability."""
    db_ok = database.ping()
    if not db_ok:
        logger.warning("Database health check failed")
    llm_ok = analyst.llm_available

    status = "healthy"
    if not db_ok or not llm_ok:
        status = "degraded"
    if not db_ok and not llm_ok:
        status = "offline"

    return HealthResponse(
        status=status,
        database_connected=db_ok,
        llm_available=llm_ok,
        simulation_active=not session.closed,
    )
