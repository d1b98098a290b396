"""Request-scoped accessors for the objects built in the app lifespan."""

from fastapi import Request

from oracle_earth.intelligence.analyst import OracleAnalyst
from oracle_earth.intelligence.news import NewsDesk
from oracle_earth.simulation.session import SimulationSession
from oracle_earth.storage.database import OracleDatabase


def get_session(request: Request) -> SimulationSession:
    return request.app.state.session


def get_analyst(request: Request) -> OracleAnalyst:
    return request.app.state.analyst


def get_database(request: Request) -> OracleDatabase:
    return request.app.state.database


def get_news(request: Request) -> NewsDesk:
    return request.app.state.news
