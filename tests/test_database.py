"""Tests for the SQLite intelligence store."""

import pytest

from oracle_earth.storage.database import OracleDatabase, utc_timestamp
from oracle_earth.utils import StorageError


def test_initialize_is_idempotent(database):
    database.initialize()
    assert database.get_conflicts() == []


def test_ping(database):
    assert database.ping() is True


def test_ping_after_close(tmp_path):
    db = OracleDatabase(tmp_path / "closed.db")
    db.initialize()
    db.close()
    assert db.ping() is False


def test_creates_parent_directory(tmp_path):
    db = OracleDatabase(tmp_path / "nested" / "dir" / "oracle.db")
    db.initialize()
    assert (tmp_path / "nested" / "dir" / "oracle.db").exists()
    db.close()


def test_in_memory_database():
    db = OracleDatabase(":memory:")
    db.initialize()
    db.insert_conflict("A", "B", 10, "x", utc_timestamp())
    assert len(db.get_conflicts()) == 1
    db.close()


def test_query_before_initialize_raises_storage_error(tmp_path):
    db = OracleDatabase(tmp_path / "empty.db")
    with pytest.raises(StorageError):
        db.get_conflicts()
    db.close()


class TestConflicts:
    def test_insert_returns_row_id(self, database):
        row_id = database.insert_conflict("Russia", "Ukraine", 85, "Territorial disputes", utc_timestamp())
        assert row_id == 1

    def test_sorted_by_probability(self, database):
        now = utc_timestamp()
        database.insert_conflict("A", "B", 20, "x", now)
        database.insert_conflict("C", "D", 90, "y", now)
        database.insert_conflict("E", "F", 55, "z", now)
        assert [row["probability"] for row in database.get_conflicts()] == [90, 55, 20]

    def test_lookup_matches_either_order(self, database):
        database.insert_conflict("India", "Pakistan", 45, "Kashmir dispute", utc_timestamp())
        assert len(database.get_conflict_by_countries("India", "Pakistan")) == 1
        assert len(database.get_conflict_by_countries("Pakistan", "India")) == 1
        assert database.get_conflict_by_countries("India", "China") == []

    def test_row_columns(self, database):
        database.insert_conflict("A", "B", 10, "x, y", "2024-01-01T00:00:00+00:00")
        row = database.get_conflicts()[0]
        assert row == {
            "id": 1,
            "country1": "A",
            "country2": "B",
            "probability": 10.0,
            "factors": "x, y",
            "lastUpdated": "2024-01-01T00:00:00+00:00",
        }


class TestOtherTables:
    def test_environment_filter_by_type(self, database):
        now = utc_timestamp()
        database.insert_environment_data("Arctic", "glacier", -8.5, "%", "71,-8", now)
        database.insert_environment_data("Global", "co2", 421.3, "ppm", "0,0", now)
        assert len(database.get_environment_data()) == 2
        co2 = database.get_environment_data("co2")
        assert [row["region"] for row in co2] == ["Global"]

    def test_terrorism_sorted_by_risk(self, database):
        database.insert_terrorism_data("A", "Low Org", "low", "x", "2024-01-01")
        database.insert_terrorism_data("B", "Critical Org", "critical", "x", "2024-01-01")
        database.insert_terrorism_data("C", "Medium Org", "medium", "x", "2024-01-01")
        database.insert_terrorism_data("D", "High Org", "high", "x", "2024-01-01")
        levels = [row["riskLevel"] for row in database.get_terrorism_data()]
        assert levels == ["critical", "high", "medium", "low"]

    def test_economic(self, database):
        database.insert_economic_data("Japan", 4.9, 3.3, 2.6, -29.8, utc_timestamp())
        row = database.get_economic_data()[0]
        assert row["country"] == "Japan"
        assert row["tradeBalance"] == -29.8

    def test_chat_history_newest_first_with_limit(self, database):
        database.insert_chat_history("q1", "a1", "2024-01-01T00:00:00", "general")
        database.insert_chat_history("q2", "a2", "2024-01-02T00:00:00", "conflict")
        database.insert_chat_history("q3", "a3", "2024-01-03T00:00:00", "economy")
        history = database.get_chat_history(limit=2)
        assert [row["question"] for row in history] == ["q3", "q2"]


def test_seed_demo_data(database):
    database.seed_demo_data()
    assert len(database.get_conflicts()) == 3
    assert len(database.get_environment_data()) == 4
    assert len(database.get_terrorism_data()) == 4
    assert len(database.get_economic_data()) == 4
    assert database.get_terrorism_data()[0]["organization"] == "Al-Shabaab"
