"""Oracle Earth FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from oracle_earth import __version__
from oracle_earth.api.middleware import request_logging_middleware
from oracle_earth.config import OracleSettings, get_config
from oracle_earth.intelligence.analyst import OracleAnalyst
from oracle_earth.intelligence.news import NewsDesk
from oracle_earth.llm.adapter import LLMAdapter
from oracle_earth.simulation.scheduler import AsyncioScheduler
from oracle_earth.simulation.session import SimulationSession
from oracle_earth.storage.database import OracleDatabase

logger = logging.getLogger(__name__)


def build_llm(config: OracleSettings) -> LLMAdapter | None:
    """LLM adapter when an API key is configured, otherwise None (fallback mode)."""
    if not config.llm_configured:
        logger.warning("ORACLE_LLM_API_KEY is not set - analysis endpoints will use fallback responses")
        return None
    return LLMAdapter(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    config: OracleSettings = app.state.config

    database = OracleDatabase(config.database_file)
    database.initialize()
    app.state.database = database
    app.state.analyst = OracleAnalyst(llm=build_llm(config), database=database)
    app.state.news = NewsDesk()

    scheduler = AsyncioScheduler()
    session = SimulationSession.from_settings(config, scheduler)
    session.start()
    app.state.session = session

    logger.info("Oracle Earth API starting - db=%s, llm=%s", database.path, config.llm_model)
    try:
        yield
    finally:
        session.close()
        scheduler.cancel_all()
        database.close()
        logger.info("Oracle Earth API shutdown - timers cancelled, database closed")


def create_app(config: OracleSettings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    config = config or get_config()

    app = FastAPI(
        title="Oracle Earth API",
        description="Global intelligence dashboard - time machine, crisis feed, what-if simulator and AI analysis",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Request logging and X-Request-ID middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_logging_middleware)

    from oracle_earth.api.routes.health import router as health_router
    from oracle_earth.api.routes.intelligence import router as intelligence_router
    from oracle_earth.api.routes.simulation import router as simulation_router

    app.include_router(health_router)
    app.include_router(simulation_router)
    app.include_router(intelligence_router)

    return app


app = create_app()
