"""
Simulation reference data: year bounds, event templates, the what-if
scenario catalog and its hand-authored outcome templates.
"""

# Time machine range. present year drives the Historical/Live/Predicted framing.
MIN_YEAR = 1990
MAX_YEAR = 2050
PRESENT_YEAR = 2024

PLAYBACK_SPEEDS: tuple[int, ...] = (1, 2, 5)
PLAYBACK_INTERVAL_MS = 200

ERA_HISTORICAL = "Historical"
ERA_LIVE = "Live"
ERA_PREDICTED = "Predicted"

HISTORICAL_MILESTONES: list[dict] = [
    {"year": 1990, "event": "End of Cold War", "type": "conflict"},
    {"year": 1995, "event": "Kyoto Protocol discussions begin", "type": "environment"},
    {"year": 2001, "event": "9/11 Attacks", "type": "terrorism"},
    {"year": 2008, "event": "Global Financial Crisis", "type": "economy"},
    {"year": 2011, "event": "Arab Spring", "type": "conflict"},
    {"year": 2015, "event": "Paris Climate Agreement", "type": "environment"},
    {"year": 2020, "event": "COVID-19 Pandemic", "type": "global"},
    {"year": 2022, "event": "Russia-Ukraine War", "type": "conflict"},
    {"year": 2024, "event": "Present Day", "type": "current"},
    {"year": 2030, "event": "Climate Targets Deadline", "type": "future"},
    {"year": 2050, "event": "Net Zero Goals", "type": "future"},
]

QUICK_JUMPS: dict[str, int] = {
    "9/11": 2001,
    "Crisis": 2008,
    "Ukraine": 2022,
    "Future": 2030,
}

# Crisis feed
FEED_CAPACITY = 10
FEED_INTERVAL_MS = 5000
FEED_EVENT_PROBABILITY = 0.3

SEVERITIES: tuple[str, ...] = ("low", "medium", "high", "critical")
EVENT_CATEGORIES: tuple[str, ...] = ("conflict", "environment", "terrorism", "economy", "natural")
FILTER_ALL = "all"

EVENT_TEMPLATES: list[dict[str, str]] = [
    {
        "title": "Cyber Attack on Infrastructure",
        "location": "Eastern Europe",
        "category": "terrorism",
        "description": "Major cyber attack targeting power grid systems",
    },
    {
        "title": "Wildfire Spreading Rapidly",
        "location": "California, USA",
        "category": "environment",
        "description": "Forest fires threatening residential areas",
    },
    {
        "title": "Border Tensions Escalating",
        "location": "South China Sea",
        "category": "conflict",
        "description": "Naval vessels from multiple nations in standoff",
    },
    {
        "title": "Market Volatility Spike",
        "location": "Global Markets",
        "category": "economy",
        "description": "Sudden drop in major stock indices worldwide",
    },
    {
        "title": "Earthquake Magnitude 6.2",
        "location": "Pacific Ring of Fire",
        "category": "natural",
        "description": "Seismic activity detected, tsunami warning issued",
    },
]

# What-if simulator
ANALYSIS_DELAY_SECONDS = 2.0
OVERRIDE_MIN_FACTOR = 0.5
OVERRIDE_MAX_FACTOR = 1.5

SCENARIO_CATALOG: list[dict] = [
    {
        "id": "climate-action",
        "title": "Global Carbon Tax Implementation",
        "description": "What if all countries implement a $100/ton carbon tax?",
        "category": "environment",
        "base_parameters": {"carbonTax": 100, "compliance": 85, "economicImpact": -2.5},
        "icon": "🌱",
    },
    {
        "id": "peace-treaty",
        "title": "Major Conflict Resolution",
        "description": "What if Russia-Ukraine conflict ends with peace treaty?",
        "category": "conflict",
        "base_parameters": {"conflictReduction": 80, "economicRecovery": 15, "refugeeReturn": 60},
        "icon": "🕊️",
    },
    {
        "id": "economic-cooperation",
        "title": "Global Trade Alliance",
        "description": "What if major economies form new trade alliance?",
        "category": "economy",
        "base_parameters": {"tradeIncrease": 25, "gdpGrowth": 3.2, "inflation": -1.5},
        "icon": "🤝",
    },
    {
        "id": "renewable-transition",
        "title": "Rapid Renewable Energy Shift",
        "description": "What if renewable energy reaches 80% by 2030?",
        "category": "environment",
        "base_parameters": {"renewablePercent": 80, "jobsCreated": 50000000, "emissions": -45},
        "icon": "⚡",
    },
    {
        "id": "cyber-security",
        "title": "Global Cyber Defense Pact",
        "description": "What if all nations unite against cyber threats?",
        "category": "policy",
        "base_parameters": {"cyberAttacks": -70, "cooperation": 90, "techInvestment": 500},
        "icon": "🛡️",
    },
]

# Bespoke outcome templates. Scenarios without an entry use GENERIC_OUTCOME.
OUTCOME_TEMPLATES: dict[str, dict] = {
    "climate-action": {
        "positive_outcomes": [
            "Global CO2 emissions reduced by 35%",
            "Green technology investment increases by $2T",
            "Air quality improves in major cities",
            "Renewable energy jobs created: 25M+",
        ],
        "negative_outcomes": [
            "Initial GDP reduction of 2.5% globally",
            "Energy costs increase by 15-20%",
            "Some industries face significant restructuring",
            "Developing nations need financial support",
        ],
        "neutral_outcomes": [
            "Transition period of 5-7 years expected",
            "Consumer behavior adapts gradually",
            "Technology innovation accelerates",
        ],
        "probability_percent": 75,
        "timeframe_label": "10-15 years",
        "global_impact_score": 8.5,
    },
    "peace-treaty": {
        "positive_outcomes": [
            "Military spending redirected to development",
            "Refugee crisis resolved for 6M+ people",
            "Regional economic recovery begins",
            "Global food security improves",
        ],
        "negative_outcomes": [
            "Reconstruction costs exceed $500B",
            "Political tensions remain in some areas",
            "War crimes tribunals create ongoing disputes",
        ],
        "neutral_outcomes": [
            "International monitoring required",
            "Gradual normalization of relations",
            "Energy markets stabilize",
        ],
        "probability_percent": 65,
        "timeframe_label": "2-5 years",
        "global_impact_score": 7.2,
    },
    "economic-cooperation": {
        "positive_outcomes": [
            "Global GDP increases by $8T over 5 years",
            "Trade barriers reduced by 40%",
            "Technology transfer accelerates",
            "Emerging markets benefit significantly",
        ],
        "negative_outcomes": [
            "Some domestic industries face competition",
            "Regulatory harmonization challenges",
            "Potential for trade disputes",
        ],
        "neutral_outcomes": [
            "Gradual implementation over 3 years",
            "Mixed short-term effects",
            "Long-term benefits more pronounced",
        ],
        "probability_percent": 70,
        "timeframe_label": "3-8 years",
        "global_impact_score": 6.8,
    },
}

GENERIC_OUTCOME: dict = {
    "positive_outcomes": ["Positive outcomes likely", "Innovation accelerated"],
    "negative_outcomes": ["Some challenges expected", "Adaptation period required"],
    "neutral_outcomes": ["Mixed results anticipated"],
    "probability_percent": 60,
    "timeframe_label": "5-10 years",
    "global_impact_score": 5.0,
}
