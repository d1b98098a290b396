"""Shared test fixtures for the Oracle Earth test suite."""

import os
import random
import tempfile
from datetime import datetime, timezone

import pytest

# Ensure test environment variables are set before any config import
os.environ["ORACLE_LLM_API_KEY"] = ""
os.environ.setdefault("ORACLE_DATABASE_PATH", os.path.join(tempfile.mkdtemp(), "oracle-test.db"))
os.environ.setdefault("ORACLE_ANALYSIS_DELAY_SECONDS", "0")
os.environ.setdefault("ORACLE_FEED_INITIAL_EVENTS", "5")

from oracle_earth.config import OracleSettings  # noqa: E402
from oracle_earth.simulation.models import CrisisEvent  # noqa: E402
from oracle_earth.simulation.scheduler import VirtualScheduler  # noqa: E402
from oracle_earth.storage.database import OracleDatabase  # noqa: E402

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    """Clock that always reads FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_event():
    """Factory for CrisisEvent objects with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> CrisisEvent:
        counter["n"] += 1
        fields = {
            "id": f"evt-{counter['n']}",
            "title": "Border Tensions Escalating",
            "location": "South China Sea",
            "severity": "high",
            "category": "conflict",
            "created_at": FIXED_NOW,
            "description": "Naval vessels from multiple nations in standoff",
        }
        fields.update(overrides)
        return CrisisEvent(**fields)

    return _make


@pytest.fixture
def database(tmp_path):
    """Initialized SQLite database in a temporary directory."""
    db = OracleDatabase(tmp_path / "oracle.db")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def settings(tmp_path):
    """Settings with no LLM key, no analysis delay and a temp database."""
    return OracleSettings(
        llm_api_key="",
        database_path=str(tmp_path / "api.db"),
        analysis_delay_seconds=0,
        feed_initial_events=3,
    )
