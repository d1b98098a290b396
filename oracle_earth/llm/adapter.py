"""OpenAI-compatible LLM interface for the OpenRouter gateway.

Requires a valid ``ORACLE_LLM_API_KEY``. Each model is retried twice on
timeouts and transient HTTP errors (429, 500, 502, 503) with backoff; when
a model keeps failing the next one in ``ORACLE_LLM_FALLBACK_MODELS`` is
tried. When every model fails, :class:`LLMUnavailableError` is raised.
"""

import functools
import json
import logging
import re
import time

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from oracle_earth.config import OracleSettings
from oracle_earth.utils import LLMUnavailableError

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response generated"


# ---------------------------------------------------------------------------
# Retry decorator for LLM calls
# ---------------------------------------------------------------------------

# Gateway statuses worth another attempt on the same model
TRANSIENT_STATUS = frozenset({429, 500, 502, 503})


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, APITimeoutError):
        return True
    return isinstance(exc, APIStatusError) and exc.status_code in TRANSIENT_STATUS


def _llm_retry(max_attempts: int = 3, backoff_seconds: tuple[float, ...] = (2.0, 5.0)):
    """Retry a single-model call on timeouts and transient gateway statuses.

    Non-transient errors (402, 401, 400...) propagate immediately so the
    caller can move on to the next model.
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except (APITimeoutError, APIStatusError) as exc:
                    if attempt == max_attempts or not _is_transient(exc):
                        raise
                    wait = backoff_seconds[min(attempt, len(backoff_seconds)) - 1]
                    logger.warning(
                        "LLM attempt %d/%d failed (%s); retrying in %.1fs",
                        attempt, max_attempts, getattr(exc, "status_code", "timeout"), wait,
                    )
                    time.sleep(wait)
        return wrapper
    return decorator


def _exhausted_message(status_code: int | None) -> str:
    if status_code == 402:
        return "All available models require payment. Please check your OpenRouter account credits."
    if status_code == 401:
        return "Invalid API key. Please check your OpenRouter configuration."
    if status_code == 429:
        return "Rate limit exceeded. Please try again later."
    return f"Failed to get AI response from all models: {status_code or 'Unknown error'}"


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_json(text: str) -> dict | None:
    """Pull the first JSON object out of an LLM reply.

    Handles bare JSON, fenced code blocks and objects surrounded by prose.
    Returns None when nothing parses to a dict.
    """
    if not text:
        return None
    candidates = [text.strip()]
    candidates.extend(m.strip() for m in _FENCE_RE.findall(text))
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------

class LLMAdapter:
    """Chat-completion client with per-model retry and model fallback."""

    def __init__(self, config: OracleSettings, client: OpenAI | None = None):
        self.config = config
        if not config.llm_configured:
            raise ValueError(
                "ORACLE_LLM_API_KEY is required. Set it in .env or as an environment variable."
            )

        self.default_model = config.llm_model
        self.fallback_models = config.llm_fallback_model_list
        self.client = client or OpenAI(
            base_url=config.llm_base_url,
            api_key=config.llm_api_key,
            timeout=config.llm_timeout,
            default_headers={
                "HTTP-Referer": config.llm_referer,
                "X-Title": config.llm_app_title,
            },
        )
        logger.info(
            "LLMAdapter initialized: model=%s, fallbacks=%d",
            self.default_model, len(self.fallback_models),
        )

    def models_to_try(self, model: str | None = None) -> list[str]:
        models = [model or self.default_model]
        for fallback in self.fallback_models:
            if fallback not in models:
                models.append(fallback)
        return models

    @_llm_retry(max_attempts=3, backoff_seconds=(2.0, 5.0))
    def _complete_once(self, messages: list[dict], model: str, temperature: float) -> str:
        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=self.config.llm_max_tokens,
        )
        if not response.choices:
            return NO_RESPONSE
        return response.choices[0].message.content or NO_RESPONSE

    def complete(
        self, messages: list[dict], model: str | None = None, temperature: float | None = None
    ) -> str:
        """Send messages to the first model that answers and return its text."""
        temperature = self.config.llm_temperature if temperature is None else temperature
        last_status: int | None = None
        for current in self.models_to_try(model):
            try:
                logger.debug("Trying model: %s", current)
                return self._complete_once(messages, current, temperature)
            except APIStatusError as exc:
                last_status = exc.status_code
                logger.warning("Model %s failed with HTTP %d", current, exc.status_code)
            except (APITimeoutError, APIConnectionError) as exc:
                last_status = None
                logger.warning("Model %s unreachable: %s", current, exc)
        logger.error("All models failed (last status %s)", last_status)
        raise LLMUnavailableError(_exhausted_message(last_status), status_code=last_status)

    def complete_json(self, messages: list[dict], model: str | None = None) -> tuple[dict | None, str]:
        """Send messages and parse a JSON object from the reply.

        Returns ``(parsed, raw_text)``; ``parsed`` is None when the reply
        holds no JSON object.
        """
        text = self.complete(messages, model=model)
        return extract_json(text), text
