# File: academy/core/ai_service.py

import logging
from typing import Any, Dict, Optional

import requests
from openai import OpenAI, OpenAIError

from academy.core.config import settings
from academy.utils.json_utils import extract_json_object

logger = logging.getLogger(__name__)


class AIUnavailableError(ConnectionError):
    """No credential is configured for the selected provider."""


class AIResponseError(ValueError):
    """The provider answered, but with nothing usable."""


# Everything a provider call can fail with. Callers with a fallback catch these.
AI_ERRORS = (AIUnavailableError, AIResponseError, requests.RequestException, OpenAIError, ValueError, KeyError)


_openai_client: Optional[OpenAI] = None


def _get_openai_client() -> OpenAI:
    global _openai_client
    if not settings.OPENAI_API_KEY:
        raise AIUnavailableError("OpenAI client is not configured (missing OPENAI_API_KEY).")
    if _openai_client is None:
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
        logger.info("OpenAI client configured.")
    return _openai_client


def is_available() -> bool:
    return settings.ai_enabled


def _call_gemini(prompt: str, temperature: Optional[float] = None, max_output_tokens: Optional[int] = None) -> str:
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise AIUnavailableError("Gemini model is unavailable (missing GEMINI_API_KEY).")

    payload: Dict[str, Any] = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {},
    }
    if temperature is not None:
        payload["generationConfig"]["temperature"] = temperature
    if max_output_tokens is not None:
        payload["generationConfig"]["maxOutputTokens"] = max_output_tokens

    endpoint = f"{settings.GEMINI_API_BASE_URL.rstrip('/')}/{settings.GEMINI_MODEL}:generateContent"
    try:
        response = requests.post(
            endpoint,
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
            json=payload,
            timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Gemini API call failed: %s", exc)
        raise

    data: Dict[str, Any] = response.json()
    for candidate in data.get("candidates") or []:
        content = candidate.get("content") or {}
        parts = content.get("parts") or []
        texts = [part.get("text", "") for part in parts if isinstance(part, dict)]
        combined = "".join(texts).strip()
        if combined:
            return combined

    logger.error("Gemini response without usable content: %s", data)
    raise AIResponseError("Empty Gemini response")


def _call_openai_llm(prompt: str, temperature: Optional[float] = None, max_output_tokens: Optional[int] = None) -> str:
    client = _get_openai_client()
    kwargs: Dict[str, Any] = {
        "model": settings.OPENAI_MODEL,
        "messages": [{"role": "user", "content": prompt}],
    }
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_output_tokens is not None:
        kwargs["max_tokens"] = max_output_tokens
    try:
        logger.info("Calling OpenAI with model %s", settings.OPENAI_MODEL)
        response = client.chat.completions.create(**kwargs)
    except Exception as e:
        logger.error("OpenAI API error: %s", e)
        raise
    content = response.choices[0].message.content
    if not content:
        raise AIResponseError("Empty OpenAI response")
    return content


def generate_text(prompt: str, *, temperature: Optional[float] = None, max_output_tokens: Optional[int] = None) -> str:
    """
    Send a single prompt to the configured provider and return the raw text.

    Raises ``AIUnavailableError`` when no credential is configured,
    ``requests.RequestException`` / SDK errors on transport failures and
    ``AIResponseError`` on empty answers.
    """
    provider = (settings.AI_PROVIDER or "gemini").lower()
    logger.info("AI call (provider=%s, temperature=%s, max_tokens=%s)", provider, temperature, max_output_tokens)
    if provider == "openai":
        return _call_openai_llm(prompt, temperature=temperature, max_output_tokens=max_output_tokens)
    return _call_gemini(prompt, temperature=temperature, max_output_tokens=max_output_tokens)


def generate_json(prompt: str, *, temperature: Optional[float] = None, max_output_tokens: Optional[int] = None) -> Dict[str, Any]:
    """``generate_text`` followed by extraction of the first JSON object in the reply."""
    raw = generate_text(prompt, temperature=temperature, max_output_tokens=max_output_tokens)
    try:
        return extract_json_object(raw)
    except ValueError:
        logger.warning("AI reply is not JSON: %.200s", raw)
        raise
