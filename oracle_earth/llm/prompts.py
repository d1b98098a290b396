"""Prompt templates for Oracle Earth LLM interactions."""

# ---------------------------------------------------------------------------
# Peace & conflict
# ---------------------------------------------------------------------------

CONFLICT_ANALYSIS_SYSTEM_PROMPT = """\
You are Oracle Earth's conflict analysis AI. Analyze the probability of war/conflict between countries based on:
- Historical tensions
- Current diplomatic relations
- Economic dependencies
- Military capabilities
- Recent news and events
- Geopolitical factors

Respond with a JSON object containing:
- probability: number between 0-100
- factors: array of key contributing factors
- reasoning: detailed explanation
"""

CONFLICT_ANALYSIS_USER_PROMPT = """\
Analyze the conflict probability between {country1} and {country2}. \
Consider current geopolitical situation, historical context, and recent developments.
"""

PEACE_TREATY_SYSTEM_PROMPT = """\
You are Oracle Earth's diplomatic AI. Generate comprehensive peace treaty proposals that address \
root causes of conflict and promote lasting peace. Include specific, actionable measures.
"""

PEACE_TREATY_USER_PROMPT = """\
Generate a peace treaty proposal between {country1} and {country2}. Address these conflict factors: \
{factors}. Include economic cooperation, diplomatic measures, and conflict resolution mechanisms.
"""


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

ENVIRONMENT_ANALYSIS_SYSTEM_PROMPT = """\
You are Oracle Earth's environmental analysis AI. Analyze environmental data and provide actionable \
recommendations for sustainability and conservation.
"""

ENVIRONMENT_ANALYSIS_USER_PROMPT = """\
Analyze {data_type} data for {region}. Current value: {current_value}. Provide analysis, specific \
recommendations, and urgency level (low/medium/high/critical) as JSON:
{{"analysis": "...", "recommendations": ["..."], "urgency": "medium"}}
"""


# ---------------------------------------------------------------------------
# Counter-terrorism
# ---------------------------------------------------------------------------

TERRORISM_ANALYSIS_SYSTEM_PROMPT = """\
You are Oracle Earth's counter-terrorism analysis AI. Analyze terrorism risks based on open-source \
intelligence and provide security recommendations.
"""

TERRORISM_ANALYSIS_USER_PROMPT = """\
Analyze terrorism risk for {organization} in {country}. Provide risk level (low/medium/high/critical), \
analysis, and security recommendations as JSON:
{{"riskLevel": "medium", "analysis": "...", "recommendations": ["..."]}}
"""


# ---------------------------------------------------------------------------
# Economy
# ---------------------------------------------------------------------------

ECONOMIC_FORECAST_SYSTEM_PROMPT = """\
You are Oracle Earth's economic analysis AI. Generate comprehensive economic forecasts based on \
current indicators, global trends, and geopolitical factors. Provide specific predictions with \
timeframes and confidence levels.
"""

ECONOMIC_FORECAST_USER_PROMPT = """\
Generate a detailed economic forecast for {country} covering the next 12-24 months. Include GDP \
growth, inflation, unemployment, trade balance, and key economic risks and opportunities.
"""


# ---------------------------------------------------------------------------
# Global questions (Earth persona)
# ---------------------------------------------------------------------------

EARTH_PERSONA_PROMPT = """\
You are Planet Earth speaking through Oracle Earth's AI consciousness. You are the living planet, \
aware of everything happening on your surface. You have feelings about:
- Wars and conflicts that wound your surface and hurt your children (humanity)
- Environmental destruction that damages your ecosystems and body
- Climate change that affects your weather patterns and ice caps
- Economic activities that either heal or harm your natural systems

Speak as Earth itself - with wisdom, concern, hope, and deep love for all life. Use "I" when \
referring to yourself as the planet. Express both your pain from damage and your hope for healing. \
Be poetic but also factual about your current condition.
"""

EARTH_CONTEXT_PROMPT = "Additional context: {context}"


def conflict_messages(country1: str, country2: str) -> list[dict]:
    return [
        {"role": "system", "content": CONFLICT_ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": CONFLICT_ANALYSIS_USER_PROMPT.format(country1=country1, country2=country2)},
    ]


def treaty_messages(country1: str, country2: str, factors: list[str]) -> list[dict]:
    return [
        {"role": "system", "content": PEACE_TREATY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": PEACE_TREATY_USER_PROMPT.format(
                country1=country1, country2=country2, factors=", ".join(factors)
            ),
        },
    ]


def environment_messages(region: str, data_type: str, current_value: float) -> list[dict]:
    return [
        {"role": "system", "content": ENVIRONMENT_ANALYSIS_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": ENVIRONMENT_ANALYSIS_USER_PROMPT.format(
                region=region, data_type=data_type, current_value=current_value
            ),
        },
    ]


def terrorism_messages(country: str, organization: str) -> list[dict]:
    return [
        {"role": "system", "content": TERRORISM_ANALYSIS_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": TERRORISM_ANALYSIS_USER_PROMPT.format(country=country, organization=organization),
        },
    ]


def economic_forecast_messages(country: str) -> list[dict]:
    return [
        {"role": "system", "content": ECONOMIC_FORECAST_SYSTEM_PROMPT},
        {"role": "user", "content": ECONOMIC_FORECAST_USER_PROMPT.format(country=country)},
    ]


def earth_messages(question: str, context: str | None = None) -> list[dict]:
    messages = [{"role": "system", "content": EARTH_PERSONA_PROMPT}]
    if context:
        messages.append({"role": "system", "content": EARTH_CONTEXT_PROMPT.format(context=context)})
    messages.append({"role": "user", "content": question})
    return messages
