"""Mock real-time news desk.

Serves a fixed set of wire stories re-stamped with random publication
times within the last 24 hours. The set is regenerated every five
minutes, so repeated polls see a stable ordering between refreshes.
"""

from __future__ import annotations

import logging
import random
import re
from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel

from oracle_earth.simulation.constants import FILTER_ALL
from oracle_earth.simulation.event_feed import Clock, utc_now

logger = logging.getLogger(__name__)

NEWS_REFRESH = timedelta(minutes=5)
NEWS_WINDOW = timedelta(hours=24)
BREAKING_WINDOW = timedelta(hours=2)
DEFAULT_NEWS_LIMIT = 10
NEWS_URL_BASE = "https://oracle-earth-intelligence.com/news/"

NEWS_CATEGORIES = ("conflict", "environment", "terrorism", "economy", "general")

NewsCategory = Literal["conflict", "environment", "terrorism", "economy", "general"]
NewsSeverity = Literal["low", "medium", "high", "critical"]
Sentiment = Literal["positive", "neutral", "negative"]

WIRE_STORIES: list[dict] = [
    {
        "title": "Diplomatic Tensions Rise Between Major Powers",
        "description": "Recent diplomatic exchanges suggest increasing tensions over territorial disputes "
                       "in the South China Sea.",
        "source": "Global Intelligence Wire",
        "category": "conflict",
        "country": "China",
        "severity": "high",
        "sentiment": "negative",
    },
    {
        "title": "Climate Summit Reaches Breakthrough Agreement",
        "description": "World leaders announce new commitments to reduce carbon emissions by 50% over "
                       "the next decade.",
        "source": "Environmental News Network",
        "category": "environment",
        "severity": "medium",
        "sentiment": "positive",
    },
    {
        "title": "Economic Markets Show Signs of Recovery",
        "description": "Global markets surge as inflation rates begin to stabilize across major economies.",
        "source": "Economic Intelligence Daily",
        "category": "economy",
        "severity": "low",
        "sentiment": "positive",
    },
    {
        "title": "Counter-Terrorism Operation Disrupts Major Network",
        "description": "International cooperation leads to successful operation against terrorist "
                       "financing networks.",
        "source": "Security Intelligence Report",
        "category": "terrorism",
        "severity": "high",
        "sentiment": "positive",
    },
    {
        "title": "Humanitarian Crisis Escalates in Conflict Zone",
        "description": "UN reports increasing civilian casualties as regional conflict intensifies.",
        "source": "Humanitarian Intelligence",
        "category": "conflict",
        "severity": "critical",
        "sentiment": "negative",
    },
    {
        "title": "Breakthrough in Renewable Energy Technology",
        "description": "New solar panel technology promises 40% increase in efficiency at lower costs.",
        "source": "Tech & Environment Today",
        "category": "environment",
        "severity": "low",
        "sentiment": "positive",
    },
    {
        "title": "Trade Agreement Reduces Regional Tensions",
        "description": "Historic trade deal between neighboring countries expected to improve "
                       "diplomatic relations.",
        "source": "Economic Diplomacy Wire",
        "category": "economy",
        "severity": "medium",
        "sentiment": "positive",
    },
    {
        "title": "Cyber Security Threat Level Elevated",
        "description": "Intelligence agencies report increased cyber attack attempts on critical "
                       "infrastructure.",
        "source": "Cyber Intelligence Alert",
        "category": "terrorism",
        "severity": "high",
        "sentiment": "negative",
    },
]


class NewsArticle(BaseModel):
    id: str
    title: str
    description: str
    url: str
    source: str
    publishedAt: datetime
    category: NewsCategory
    country: str | None = None
    severity: NewsSeverity
    sentiment: Sentiment


def article_slug(title: str) -> str:
    return re.sub(r"\s+", "-", title.lower())


class NewsDesk:
    """Cached mock news with category, breaking and country views."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Clock = utc_now,
        stories: list[dict] | None = None,
    ):
        self.rng = rng or random.Random()
        self.clock = clock
        self.stories = WIRE_STORIES if stories is None else stories
        self._cache: list[NewsArticle] = []
        self._refreshed_at: datetime | None = None

    def _generate(self, now: datetime) -> list[NewsArticle]:
        stamp = int(now.timestamp() * 1000)
        window_s = NEWS_WINDOW.total_seconds()
        return [
            NewsArticle(
                id=f"news-{stamp}-{index}",
                url=NEWS_URL_BASE + article_slug(story["title"]),
                publishedAt=now - timedelta(seconds=self.rng.uniform(0, window_s)),
                **story,
            )
            for index, story in enumerate(self.stories)
        ]

    def _articles(self) -> list[NewsArticle]:
        now = self.clock()
        if not self._cache or self._refreshed_at is None or now - self._refreshed_at > NEWS_REFRESH:
            self._cache = self._generate(now)
            self._refreshed_at = now
            logger.debug("Refreshed news cache with %d article(s)", len(self._cache))
        return self._cache

    def latest(self, category: str = FILTER_ALL, limit: int = DEFAULT_NEWS_LIMIT) -> list[NewsArticle]:
        """Newest-first articles, optionally restricted to one category."""
        articles = self._articles()
        if category and category != FILTER_ALL:
            articles = [a for a in articles if a.category == category]
        ordered = sorted(articles, key=lambda a: a.publishedAt, reverse=True)
        return ordered[:max(limit, 0)]

    def breaking(self) -> list[NewsArticle]:
        """Critical stories, plus high-severity ones published in the last two hours."""
        cutoff = self.clock() - BREAKING_WINDOW
        return [
            a for a in self.latest()
            if a.severity == "critical" or (a.severity == "high" and a.publishedAt > cutoff)
        ]

    def by_country(self, country: str) -> list[NewsArticle]:
        needle = country.lower()
        return [
            a for a in self.latest()
            if needle in (a.country or "").lower()
            or needle in a.title.lower()
            or needle in a.description.lower()
        ]


def sentiment_breakdown(articles: list[NewsArticle]) -> dict[str, int]:
    """Percentage of positive, neutral and negative articles, rounded."""
    counts = {"positive": 0, "neutral": 0, "negative": 0}
    if not articles:
        return counts
    for article in articles:
        counts[article.sentiment] += 1
    total = len(articles)
    return {k: round(v / total * 100) for k, v in counts.items()}
