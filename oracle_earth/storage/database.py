"""SQLite storage for Oracle Earth intelligence data.

Five flat tables (conflicts, environment, terrorism, economic,
chat_history) accessed with parameterized insert/select statements.
One connection is shared across threads and guarded by a lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager, suppress
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from oracle_earth.utils import StorageError

logger = logging.getLogger(__name__)


# ============================================================================
# SCHEMA
# ============================================================================

SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS conflicts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        country1 TEXT NOT NULL,
        country2 TEXT NOT NULL,
        probability REAL NOT NULL,
        factors TEXT NOT NULL,
        lastUpdated TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS environment (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        region TEXT NOT NULL,
        type TEXT NOT NULL,
        value REAL NOT NULL,
        unit TEXT NOT NULL,
        coordinates TEXT NOT NULL,
        timestamp TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS terrorism (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        country TEXT NOT NULL,
        organization TEXT NOT NULL,
        riskLevel TEXT NOT NULL,
        fundingSources TEXT NOT NULL,
        lastActivity TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS economic (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        country TEXT NOT NULL,
        gdp REAL NOT NULL,
        inflation REAL NOT NULL,
        unemployment REAL NOT NULL,
        tradeBalance REAL NOT NULL,
        timestamp TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS chat_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        question TEXT NOT NULL,
        answer TEXT NOT NULL,
        timestamp TEXT NOT NULL,
        category TEXT NOT NULL
    )
    """,
)

# Severity order for terrorism rows (highest risk first)
_RISK_ORDER_SQL = (
    "CASE riskLevel WHEN 'critical' THEN 4 WHEN 'high' THEN 3 "
    "WHEN 'medium' THEN 2 WHEN 'low' THEN 1 ELSE 0 END"
)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# DEMO DATA
# ============================================================================

SAMPLE_CONFLICTS = [
    ("Russia", "Ukraine", 85, "Territorial disputes, Military buildup, Historical tensions"),
    ("China", "Taiwan", 65, "Sovereignty claims, Military exercises, Economic pressure"),
    ("India", "Pakistan", 45, "Kashmir dispute, Border tensions, Nuclear capabilities"),
]

SAMPLE_ENVIRONMENT = [
    ("Amazon Basin", "deforestation", 15.2, "% loss/year", "-3.4653,-62.2159"),
    ("Arctic", "glacier", -8.5, "% ice loss/year", "71.0,-8.0"),
    ("Global", "co2", 421.3, "ppm", "0,0"),
    ("Global", "temperature", 1.2, "°C above baseline", "0,0"),
]

SAMPLE_TERRORISM = [
    ("Afghanistan", "Taliban", "high", "Drug trafficking, Illegal mining", "2024-01-15"),
    ("Syria", "ISIS Remnants", "medium", "Oil smuggling, Extortion", "2024-01-10"),
    ("Nigeria", "Boko Haram", "high", "Kidnapping, Cattle rustling", "2024-01-20"),
    ("Somalia", "Al-Shabaab", "critical", "Piracy, Charcoal trade", "2024-01-25"),
]

SAMPLE_ECONOMIC = [
    ("United States", 26.9, 3.2, 3.7, -948.1),
    ("China", 17.7, 0.2, 5.2, 676.4),
    ("Japan", 4.9, 3.3, 2.6, -29.8),
    ("Germany", 4.3, 5.9, 3.0, 298.5),
]


# ============================================================================
# DATABASE
# ============================================================================

class OracleDatabase:
    """Thin parameterized-query wrapper over a single SQLite file."""

    def __init__(self, path: str | Path = "oracle-earth.db"):
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            try:
                cursor = self._conn.cursor()
                yield cursor
                self._conn.commit()
            except sqlite3.Error as exc:
                with suppress(sqlite3.Error):
                    self._conn.rollback()
                logger.error("SQLite error on %s: %s", self.path, exc)
                raise StorageError(str(exc)) from exc

    def _execute(self, sql: str, args: tuple = ()) -> int | None:
        with self._cursor() as cur:
            cur.execute(sql, args)
            return cur.lastrowid

    def _fetch(self, sql: str, args: tuple = ()) -> list[dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute(sql, args)
            return [dict(row) for row in cur.fetchall()]

    # -- Lifecycle ------------------------------------------------------------

    def initialize(self) -> None:
        """Create all tables if they do not exist."""
        with self._cursor() as cur:
            cur.execute("PRAGMA foreign_keys = ON")
            for statement in SCHEMA:
                cur.execute(statement)
        logger.info("Database initialized at %s", self.path)

    def seed_demo_data(self) -> None:
        """Insert the sample conflict, environment, terrorism and economic rows."""
        now = utc_timestamp()
        for country1, country2, probability, factors in SAMPLE_CONFLICTS:
            self.insert_conflict(country1, country2, probability, factors, now)
        for region, env_type, value, unit, coordinates in SAMPLE_ENVIRONMENT:
            self.insert_environment_data(region, env_type, value, unit, coordinates, now)
        for row in SAMPLE_TERRORISM:
            self.insert_terrorism_data(*row)
        for country, gdp, inflation, unemployment, trade_balance in SAMPLE_ECONOMIC:
            self.insert_economic_data(country, gdp, inflation, unemployment, trade_balance, now)
        logger.info("Oracle Earth database seeded with sample data")

    def ping(self) -> bool:
        try:
            return bool(self._fetch("SELECT 1 AS ok"))
        except StorageError:
            return False

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # -- Conflicts ------------------------------------------------------------

    def insert_conflict(
        self, country1: str, country2: str, probability: float, factors: str, last_updated: str
    ) -> int | None:
        return self._execute(
            "INSERT INTO conflicts (country1, country2, probability, factors, lastUpdated) "
            "VALUES (?, ?, ?, ?, ?)",
            (country1, country2, probability, factors, last_updated),
        )

    def get_conflicts(self) -> list[dict[str, Any]]:
        return self._fetch("SELECT * FROM conflicts ORDER BY probability DESC")

    def get_conflict_by_countries(self, country1: str, country2: str) -> list[dict[str, Any]]:
        return self._fetch(
            "SELECT * FROM conflicts WHERE (country1 = ? AND country2 = ?) "
            "OR (country1 = ? AND country2 = ?)",
            (country1, country2, country2, country1),
        )

    # -- Environment ----------------------------------------------------------

    def insert_environment_data(
        self, region: str, env_type: str, value: float, unit: str, coordinates: str, timestamp: str
    ) -> int | None:
        return self._execute(
            "INSERT INTO environment (region, type, value, unit, coordinates, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (region, env_type, value, unit, coordinates, timestamp),
        )

    def get_environment_data(self, env_type: str | None = None) -> list[dict[str, Any]]:
        if env_type is None:
            return self._fetch("SELECT * FROM environment ORDER BY timestamp DESC")
        return self._fetch(
            "SELECT * FROM environment WHERE type = ? ORDER BY timestamp DESC", (env_type,)
        )

    # -- Terrorism ------------------------------------------------------------

    def insert_terrorism_data(
        self, country: str, organization: str, risk_level: str, funding_sources: str, last_activity: str
    ) -> int | None:
        return self._execute(
            "INSERT INTO terrorism (country, organization, riskLevel, fundingSources, lastActivity) "
            "VALUES (?, ?, ?, ?, ?)",
            (country, organization, risk_level, funding_sources, last_activity),
        )

    def get_terrorism_data(self) -> list[dict[str, Any]]:
        return self._fetch(f"SELECT * FROM terrorism ORDER BY {_RISK_ORDER_SQL} DESC, id ASC")

    # -- Economic -------------------------------------------------------------

    def insert_economic_data(
        self,
        country: str,
        gdp: float,
        inflation: float,
        unemployment: float,
        trade_balance: float,
        timestamp: str,
    ) -> int | None:
        return self._execute(
            "INSERT INTO economic (country, gdp, inflation, unemployment, tradeBalance, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (country, gdp, inflation, unemployment, trade_balance, timestamp),
        )

    def get_economic_data(self) -> list[dict[str, Any]]:
        return self._fetch("SELECT * FROM economic ORDER BY timestamp DESC")

    # -- Chat history ---------------------------------------------------------

    def insert_chat_history(self, question: str, answer: str, timestamp: str, category: str) -> int | None:
        return self._execute(
            "INSERT INTO chat_history (question, answer, timestamp, category) VALUES (?, ?, ?, ?)",
            (question, answer, timestamp, category),
        )

    def get_chat_history(self, limit: int = 50) -> list[dict[str, Any]]:
        return self._fetch(
            "SELECT * FROM chat_history ORDER BY timestamp DESC, id DESC LIMIT ?", (limit,)
        )
