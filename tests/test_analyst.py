"""Tests for OracleAnalyst: LLM-backed analysis and its fallbacks."""

import random
from unittest.mock import MagicMock

import pytest

from oracle_earth.intelligence.analyst import (
    FALLBACK_CHAT_MESSAGE,
    NO_LLM_MESSAGE,
    OracleAnalyst,
    categorize_message,
)
from oracle_earth.storage.database import utc_timestamp
from oracle_earth.utils import LLMUnavailableError, StorageError


@pytest.fixture
def llm():
    return MagicMock()


@pytest.fixture
def analyst(llm, database):
    return OracleAnalyst(llm=llm, database=database, rng=random.Random(3))


@pytest.fixture
def offline(database):
    return OracleAnalyst(llm=None, database=database, rng=random.Random(3))


@pytest.mark.parametrize("message,category", [
    ("Will there be a WAR in Europe?", "conflict"),
    ("How bad is climate change?", "environment"),
    ("Security threats in the Sahel", "terrorism"),
    ("Economic outlook for Japan", "economy"),
    ("Hello Earth", "general"),
])
def test_categorize_message(message, category):
    assert categorize_message(message) == category


class TestConflict:
    def test_llm_result_is_parsed_and_stored(self, analyst, llm, database):
        llm.complete_json.return_value = (
            {"probability": 42, "factors": ["Border dispute", "Trade war"], "reasoning": "Tense"},
            "raw",
        )
        result = analyst.analyze_conflict("Chile", "Peru")
        assert result.probability == 42
        assert result.factors == ["Border dispute", "Trade war"]
        assert result.reasoning == "Tense"
        assert result.cached is False
        assert result.id is not None
        stored = database.get_conflict_by_countries("Peru", "Chile")
        assert stored[0]["factors"] == "Border dispute, Trade war"

    def test_cached_result_skips_llm(self, analyst, llm, database):
        database.insert_conflict("Chile", "Peru", 33, "Old dispute", utc_timestamp())
        result = analyst.analyze_conflict("Peru", "Chile")
        assert result.cached is True
        assert result.probability == 33
        assert result.factors == ["Old dispute"]
        llm.complete_json.assert_not_called()

    def test_unparsable_reply_uses_default_probability(self, analyst, llm):
        llm.complete_json.return_value = (None, "I cannot answer in JSON")
        result = analyst.analyze_conflict("Chile", "Peru")
        assert result.probability == 15
        assert result.reasoning == "I cannot answer in JSON"
        assert result.factors == ["Diplomatic tensions", "Economic competition", "Regional disputes"]

    def test_probability_clamped(self, analyst, llm):
        llm.complete_json.return_value = ({"probability": 250, "factors": "a, b"}, "raw")
        result = analyst.analyze_conflict("Chile", "Peru")
        assert result.probability == 100
        assert result.factors == ["a", "b"]

    def test_llm_failure_returns_random_fallback(self, analyst, llm):
        llm.complete_json.side_effect = LLMUnavailableError("down", status_code=402)
        result = analyst.analyze_conflict("Chile", "Peru")
        assert 20 <= result.probability <= 80
        assert result.id is None

    def test_no_llm_fallback(self, offline):
        result = offline.analyze_conflict("Chile", "Peru")
        assert 20 <= result.probability <= 80
        assert "Historical disputes" in result.factors

    def test_storage_failure_still_returns_result(self, llm):
        database = MagicMock()
        database.get_conflict_by_countries.side_effect = StorageError("locked")
        database.insert_conflict.side_effect = StorageError("locked")
        llm.complete_json.return_value = ({"probability": 10}, "raw")
        result = OracleAnalyst(llm=llm, database=database).analyze_conflict("A", "B")
        assert result.probability == 10
        assert result.id is None


class TestTreaty:
    def test_llm_treaty(self, analyst, llm):
        llm.complete.return_value = "TREATY TEXT"
        assert analyst.generate_treaty("A", "B", ["water"]) == "TREATY TEXT"

    def test_fallback_treaty_names_both_parties(self, offline):
        treaty = offline.generate_treaty("Chile", "Peru")
        assert "Between Chile and Peru" in treaty
        assert "ARTICLE V - IMPLEMENTATION" in treaty

    def test_llm_failure_uses_template(self, analyst, llm):
        llm.complete.side_effect = LLMUnavailableError("down")
        assert "PEACE TREATY PROPOSAL" in analyst.generate_treaty("A", "B")


class TestEnvironmentAndTerrorism:
    def test_environment_report(self, analyst, llm):
        llm.complete_json.return_value = (
            {"analysis": "Ice is melting", "recommendations": ["Cut emissions"], "urgency": "critical"},
            "raw",
        )
        report = analyst.analyze_environment("Arctic", "glacier")
        assert "Current Value: -8.5" in report
        assert "Ice is melting" in report
        assert "1. Cut emissions" in report
        assert "URGENCY LEVEL: CRITICAL" in report

    def test_environment_raw_text_when_not_json(self, analyst, llm):
        llm.complete_json.return_value = (None, "Plain words")
        report = analyst.analyze_environment("Amazon Basin", "deforestation")
        assert "Plain words" in report
        assert "URGENCY LEVEL: MEDIUM" in report

    def test_environment_fallback(self, offline):
        report = offline.analyze_environment("Arctic", "glacier")
        assert "URGENCY LEVEL: HIGH" in report

    def test_terrorism_report(self, analyst, llm):
        llm.complete_json.return_value = ({"riskLevel": "high", "analysis": "Active cells"}, "raw")
        report = analyst.analyze_terrorism("Somalia", "Al-Shabaab")
        assert "Risk Level: HIGH" in report
        assert "Active cells" in report

    def test_terrorism_fallback_on_error(self, analyst, llm):
        llm.complete_json.side_effect = LLMUnavailableError("down")
        report = analyst.analyze_terrorism("Somalia", "Al-Shabaab")
        assert "Risk Level: MEDIUM" in report


class TestChat:
    def test_no_llm_message(self, offline):
        assert offline.answer_question("Hi") == NO_LLM_MESSAGE

    def test_answer_is_stored_with_category(self, analyst, llm, database):
        llm.complete.return_value = "Peace is possible."
        assert analyst.answer_question("Will the war end?") == "Peace is possible."
        row = database.get_chat_history()[0]
        assert row["category"] == "conflict"
        assert row["answer"] == "Peace is possible."

    def test_context_included_in_prompt(self, analyst, llm, database):
        database.seed_demo_data()
        llm.complete.return_value = "ok"
        analyst.answer_question("Status?")
        messages = llm.complete.call_args.args[0]
        joined = " ".join(m["content"] for m in messages)
        assert "Russia vs Ukraine" in joined

    def test_llm_failure_returns_fallback_and_skips_storage(self, analyst, llm, database):
        llm.complete.side_effect = LLMUnavailableError("down")
        assert analyst.answer_question("Hi") == FALLBACK_CHAT_MESSAGE
        assert database.get_chat_history() == []

    def test_build_context_without_database(self, llm):
        assert OracleAnalyst(llm=llm).build_context() == ""


class TestEconomicForecast:
    def test_llm_forecast_is_wrapped(self, analyst, llm):
        llm.complete.return_value = "  GDP grows 1.1% next year.\n"
        report = analyst.forecast_economy("Japan")
        lines = report.splitlines()
        assert lines[:3] == [
            "ECONOMIC FORECAST REPORT",
            "Country: Japan",
            "Forecast Period: Next 12-24 Months",
        ]
        assert lines[3].startswith("Generated: ")
        assert "GDP grows 1.1% next year." in lines
        assert "METHODOLOGY:" in report
        assert "DISCLAIMER:" in report
        messages = llm.complete.call_args[0][0]
        assert "Japan" in messages[1]["content"]

    def test_no_llm_fallback(self, offline):
        report = offline.forecast_economy("Brazil")
        assert report.startswith("ECONOMIC FORECAST REPORT\nCountry: Brazil")
        assert "- GDP Growth: 2.1-2.8% annually" in report
        assert "- Inflation: 2.5-3.5% range" in report
        assert "RISK FACTORS:" in report and "OPPORTUNITIES:" in report
        assert "METHODOLOGY:" not in report

    def test_llm_failure_uses_fallback(self, analyst, llm):
        llm.complete.side_effect = LLMUnavailableError("rate limited", status_code=429)
        report = analyst.forecast_economy("Germany")
        assert "EXECUTIVE SUMMARY:" in report
        assert "Country: Germany" in report
