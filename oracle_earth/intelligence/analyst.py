"""LLM-backed intelligence analysis with hardcoded fallbacks.

Every public method returns a usable result. When the LLM gateway is
missing or fails, or the database is unavailable, the failure is logged
and a fallback value is returned instead.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from oracle_earth.llm import prompts
from oracle_earth.llm.adapter import LLMAdapter
from oracle_earth.storage.database import OracleDatabase, utc_timestamp
from oracle_earth.utils import LLMUnavailableError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_CONFLICT_FACTORS = ["Diplomatic tensions", "Economic competition", "Regional disputes"]
FALLBACK_CONFLICT_FACTORS = ["Diplomatic tensions", "Economic competition", "Historical disputes"]
FALLBACK_CONFLICT_REASONING = (
    "Analysis based on current geopolitical indicators and historical patterns."
)

# Mock "current" readings per environmental data type
ENVIRONMENT_MOCK_VALUES: dict[str, float] = {
    "deforestation": 15.2,
    "co2": 421.3,
    "glacier": -8.5,
}
ENVIRONMENT_DEFAULT_VALUE = 1.2

NO_LLM_MESSAGE = (
    "I'm Earth, but I'm currently experiencing some technical difficulties with my AI "
    "consciousness. My human caretakers need to configure my neural pathways (API keys) "
    "properly. Please check back soon! 🌍"
)

FALLBACK_CHAT_MESSAGE = """\
I understand you're asking about global affairs. While I'm currently experiencing some technical \
difficulties accessing my full intelligence database, I can still help with general questions about:

🛡️ Peace & Conflict Analysis
🌍 Environmental Monitoring
⚠️ Counter-Terrorism Intelligence
📈 Economic Indicators

Please try rephrasing your question or ask about a specific topic area, and I'll do my best to \
provide insights based on available data."""

FALLBACK_TREATY_TEMPLATE = """\
PEACE TREATY PROPOSAL
Between {country1} and {country2}

PREAMBLE
Recognizing the need for lasting peace and mutual cooperation, both nations commit to resolving \
conflicts through diplomatic means.

ARTICLE I - CEASEFIRE AND NON-AGGRESSION
1. Immediate cessation of all hostile activities
2. Establishment of buffer zones and monitoring mechanisms
3. Commitment to peaceful resolution of disputes

ARTICLE II - ECONOMIC COOPERATION
1. Trade normalization and economic partnerships
2. Joint infrastructure development projects
3. Technology and knowledge sharing agreements

ARTICLE III - DIPLOMATIC RELATIONS
1. Re-establishment of full diplomatic relations
2. Regular high-level diplomatic consultations
3. Cultural and educational exchange programs

ARTICLE IV - CONFLICT RESOLUTION
1. Establishment of joint mediation committee
2. International arbitration for unresolved disputes
3. Regular review and assessment mechanisms

ARTICLE V - IMPLEMENTATION
1. Phased implementation over 24 months
2. International monitoring and verification
3. Regular progress reviews and adjustments

This treaty shall enter into force upon ratification by both parties."""

_CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("conflict", ("conflict", "war")),
    ("environment", ("environment", "climate")),
    ("terrorism", ("terrorism", "security")),
    ("economy", ("economy", "economic")),
]


class ConflictAnalysis(BaseModel):
    country1: str
    country2: str
    probability: float
    factors: list[str]
    reasoning: str = ""
    id: int | None = None
    cached: bool = False


def categorize_message(message: str) -> str:
    """Keyword bucket for a chat message; 'general' when nothing matches."""
    lowered = message.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return "general"


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def _as_str_list(value: Any, default: list[str]) -> list[str]:
    if isinstance(value, list) and value:
        return [str(v) for v in value]
    if isinstance(value, str) and value.strip():
        return [s.strip() for s in value.split(",") if s.strip()]
    return list(default)


def _forecast_header(country: str) -> list[str]:
    return [
        "ECONOMIC FORECAST REPORT",
        f"Country: {country}",
        "Forecast Period: Next 12-24 Months",
        f"Generated: {datetime.now(timezone.utc):%Y-%m-%d}",
    ]


class OracleAnalyst:
    """Conflict, treaty, environment, terrorism, economic and chat analysis."""

    def __init__(
        self,
        llm: LLMAdapter | None = None,
        database: OracleDatabase | None = None,
        rng: random.Random | None = None,
    ):
        self.llm = llm
        self.database = database
        self.rng = rng or random.Random()

    @property
    def llm_available(self) -> bool:
        return self.llm is not None

    # -- Peace & conflict -----------------------------------------------------

    def analyze_conflict(self, country1: str, country2: str) -> ConflictAnalysis:
        cached = self._cached_conflict(country1, country2)
        if cached is not None:
            return cached

        if self.llm is None:
            return self._fallback_conflict(country1, country2)

        try:
            parsed, raw = self.llm.complete_json(prompts.conflict_messages(country1, country2))
        except LLMUnavailableError as exc:
            logger.error("Conflict analysis failed for %s/%s: %s", country1, country2, exc)
            return self._fallback_conflict(country1, country2)

        if parsed is None:
            analysis = ConflictAnalysis(
                country1=country1,
                country2=country2,
                probability=15,
                factors=list(DEFAULT_CONFLICT_FACTORS),
                reasoning=raw,
            )
        else:
            try:
                probability = float(parsed.get("probability", 15))
            except (TypeError, ValueError):
                probability = 15.0
            analysis = ConflictAnalysis(
                country1=country1,
                country2=country2,
                probability=max(0.0, min(100.0, probability)),
                factors=_as_str_list(parsed.get("factors"), DEFAULT_CONFLICT_FACTORS),
                reasoning=str(parsed.get("reasoning", "")),
            )

        if self.database is not None:
            try:
                analysis.id = self.database.insert_conflict(
                    country1, country2, analysis.probability, ", ".join(analysis.factors), utc_timestamp()
                )
            except StorageError:
                logger.warning("Could not store conflict analysis for %s/%s", country1, country2)
        return analysis

    def _cached_conflict(self, country1: str, country2: str) -> ConflictAnalysis | None:
        if self.database is None:
            return None
        try:
            rows = self.database.get_conflict_by_countries(country1, country2)
        except StorageError:
            return None
        if not rows:
            return None
        row = rows[0]
        return ConflictAnalysis(
            id=row["id"],
            country1=row["country1"],
            country2=row["country2"],
            probability=row["probability"],
            factors=_as_str_list(row["factors"], DEFAULT_CONFLICT_FACTORS),
            cached=True,
        )

    def _fallback_conflict(self, country1: str, country2: str) -> ConflictAnalysis:
        return ConflictAnalysis(
            country1=country1,
            country2=country2,
            probability=self.rng.randint(20, 80),
            factors=list(FALLBACK_CONFLICT_FACTORS),
            reasoning=FALLBACK_CONFLICT_REASONING,
        )

    def generate_treaty(self, country1: str, country2: str, factors: list[str] | None = None) -> str:
        fallback = FALLBACK_TREATY_TEMPLATE.format(country1=country1, country2=country2)
        if self.llm is None:
            return fallback
        try:
            return self.llm.complete(prompts.treaty_messages(country1, country2, factors or []))
        except LLMUnavailableError as exc:
            logger.error("Treaty generation failed for %s/%s: %s", country1, country2, exc)
            return fallback

    # -- Environment ----------------------------------------------------------

    def analyze_environment(self, region: str, data_type: str) -> str:
        value = ENVIRONMENT_MOCK_VALUES.get(data_type, ENVIRONMENT_DEFAULT_VALUE)
        if self.llm is None:
            return self._fallback_environment(region, data_type)
        try:
            parsed, raw = self.llm.complete_json(prompts.environment_messages(region, data_type, value))
        except LLMUnavailableError as exc:
            logger.error("Environment analysis failed for %s (%s): %s", region, data_type, exc)
            return self._fallback_environment(region, data_type)

        parsed = parsed or {}
        analysis = str(parsed.get("analysis") or raw)
        recommendations = _as_str_list(
            parsed.get("recommendations"), ["Monitor trends", "Implement conservation measures"]
        )
        urgency = str(parsed.get("urgency") or "medium")
        return "\n".join([
            "ENVIRONMENTAL ANALYSIS REPORT",
            f"Region: {region}",
            f"Type: {data_type}",
            f"Current Value: {value}",
            "",
            "ANALYSIS:",
            analysis,
            "",
            "RECOMMENDATIONS:",
            _numbered(recommendations),
            "",
            f"URGENCY LEVEL: {urgency.upper()}",
            "",
            "IMMEDIATE ACTIONS:",
            "- Implement monitoring systems",
            "- Engage local stakeholders",
            "- Coordinate with international organizations",
            "- Develop mitigation strategies",
            "",
            "LONG-TERM STRATEGY:",
            "- Sustainable development planning",
            "- Technology transfer programs",
            "- Capacity building initiatives",
            "- Regular assessment and review",
        ])

    @staticmethod
    def _fallback_environment(region: str, data_type: str) -> str:
        return "\n".join([
            "ENVIRONMENTAL ANALYSIS REPORT",
            f"Region: {region or 'Selected Region'}",
            f"Type: {data_type or 'Environmental Factor'}",
            "",
            "ANALYSIS:",
            "Current environmental conditions require immediate attention and coordinated response efforts.",
            "",
            "RECOMMENDATIONS:",
            _numbered([
                "Implement comprehensive monitoring systems",
                "Engage local communities and stakeholders",
                "Develop sustainable mitigation strategies",
                "Coordinate with international environmental organizations",
                "Establish regular assessment protocols",
            ]),
            "",
            "URGENCY LEVEL: HIGH",
            "",
            "Please consult with environmental experts for detailed analysis and implementation strategies.",
        ])

    # -- Counter-terrorism ----------------------------------------------------

    def analyze_terrorism(self, country: str, organization: str) -> str:
        if self.llm is None:
            return self._fallback_terrorism(country, organization)
        try:
            parsed, raw = self.llm.complete_json(prompts.terrorism_messages(country, organization))
        except LLMUnavailableError as exc:
            logger.error("Terrorism analysis failed for %s in %s: %s", organization, country, exc)
            return self._fallback_terrorism(country, organization)

        parsed = parsed or {}
        risk_level = str(parsed.get("riskLevel") or "medium")
        analysis = str(parsed.get("analysis") or raw)
        recommendations = _as_str_list(
            parsed.get("recommendations"), ["Enhanced monitoring", "International cooperation"]
        )
        return "\n".join([
            "COUNTER-TERRORISM ANALYSIS REPORT",
            f"Country: {country}",
            f"Organization: {organization}",
            f"Risk Level: {risk_level.upper()}",
            "",
            "THREAT ASSESSMENT:",
            analysis,
            "",
            "SECURITY RECOMMENDATIONS:",
            _numbered(recommendations),
            "",
            "MONITORING PRIORITIES:",
            "- Financial transactions and funding sources",
            "- Communication networks and recruitment",
            "- Movement patterns and operational planning",
            "- International connections and support networks",
            "",
            "This analysis is based on open-source intelligence and should be supplemented with "
            "classified information for operational planning.",
        ])

    @staticmethod
    def _fallback_terrorism(country: str, organization: str) -> str:
        return "\n".join([
            "COUNTER-TERRORISM ANALYSIS REPORT",
            f"Country: {country or 'Selected Country'}",
            f"Organization: {organization or 'Target Organization'}",
            "Risk Level: MEDIUM",
            "",
            "THREAT ASSESSMENT:",
            "Current intelligence indicates moderate threat levels requiring continued monitoring and assessment.",
            "",
            "SECURITY RECOMMENDATIONS:",
            _numbered([
                "Enhanced surveillance and monitoring",
                "International intelligence cooperation",
                "Community engagement programs",
                "Financial tracking and disruption",
                "Counter-radicalization initiatives",
            ]),
            "",
            "Please consult with security experts and intelligence agencies for detailed operational planning.",
        ])

    # -- Economy --------------------------------------------------------------

    def forecast_economy(self, country: str) -> str:
        """12-24 month outlook for *country*; a generic projection when the LLM is unreachable."""
        if self.llm is None:
            return self._fallback_forecast(country)
        try:
            forecast = self.llm.complete(prompts.economic_forecast_messages(country))
        except LLMUnavailableError as exc:
            logger.error("Economic forecast failed for %s: %s", country, exc)
            return self._fallback_forecast(country)
        return "\n".join([
            *_forecast_header(country),
            "",
            forecast.strip(),
            "",
            "METHODOLOGY:",
            "This forecast is generated using AI analysis of:",
            "- Current economic indicators",
            "- Global market trends",
            "- Geopolitical factors",
            "- Historical patterns",
            "- Policy implications",
            "",
            "DISCLAIMER:",
            "Economic forecasts are subject to uncertainty and should be used in conjunction with "
            "professional economic analysis and current market data.",
        ])

    @staticmethod
    def _fallback_forecast(country: str) -> str:
        return "\n".join([
            *_forecast_header(country or "Selected Country"),
            "",
            "EXECUTIVE SUMMARY:",
            "Economic outlook shows mixed indicators with moderate growth expected in the coming quarters.",
            "",
            "KEY PROJECTIONS:",
            "- GDP Growth: 2.1-2.8% annually",
            "- Inflation: 2.5-3.5% range",
            "- Unemployment: Stable to slightly declining",
            "- Trade Balance: Dependent on global conditions",
            "",
            "RISK FACTORS:",
            "- Global economic uncertainty",
            "- Geopolitical tensions",
            "- Supply chain disruptions",
            "- Monetary policy changes",
            "",
            "OPPORTUNITIES:",
            "- Technology sector growth",
            "- Infrastructure investment",
            "- Green energy transition",
            "- Digital transformation",
            "",
            "Please consult with economic experts for detailed analysis and investment decisions.",
        ])

    # -- Global questions -----------------------------------------------------

    def build_context(self) -> str:
        """Summarize the five most recent rows of each intelligence table."""
        if self.database is None:
            return ""
        try:
            conflicts = self.database.get_conflicts()[:5]
            environment = self.database.get_environment_data()[:5]
            terrorism = self.database.get_terrorism_data()[:5]
        except StorageError:
            logger.warning("Could not load context data for chat")
            conflicts, environment, terrorism = [], [], []
        return "\n".join([
            "Recent Global Intelligence Data:",
            "- Active Conflicts: " + ", ".join(
                f"{c['country1']} vs {c['country2']} ({c['probability']:g}% risk)" for c in conflicts
            ),
            "- Environmental Alerts: " + ", ".join(
                f"{e['region']}: {e['type']} {e['value']:g}{e['unit']}" for e in environment
            ),
            "- Security Threats: " + ", ".join(
                f"{t['country']}: {t['organization']} ({t['riskLevel']} risk)" for t in terrorism
            ),
        ])

    def answer_question(self, message: str) -> str:
        if self.llm is None:
            return NO_LLM_MESSAGE
        try:
            answer = self.llm.complete(prompts.earth_messages(message, self.build_context() or None))
        except LLMUnavailableError as exc:
            logger.error("Chat answer failed: %s", exc)
            return FALLBACK_CHAT_MESSAGE

        if self.database is not None:
            try:
                self.database.insert_chat_history(
                    message, answer, utc_timestamp(), categorize_message(message)
                )
            except StorageError:
                logger.warning("Could not store chat history")
        return answer
