"""
Thin wrapper around the hosted Gemini model.

Routes never talk to the SDK directly so tests can replace
`generate_text` with a stub.
"""
import json
import re
from typing import Any, List, Optional, Union

from google import genai
from google.genai import types

from finance_dashboard.core.config import settings
from finance_dashboard.logger_config import logger

_client: Optional[genai.Client] = None

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class AIServiceError(Exception):
    """The model call failed or returned something unusable."""


class AIUnavailableError(AIServiceError):
    """No API key is configured."""


def _get_client() -> genai.Client:
    global _client
    if not settings.ai_enabled:
        raise AIUnavailableError("GEMINI_API_KEY is not configured")
    if _client is None:
        _client = genai.Client(api_key=settings.GEMINI_API_KEY.strip())
    return _client


def generate_text(
    contents: Union[str, List[dict]],
    system_instruction: Optional[str] = None,
) -> str:
    """Send a prompt (or a chat history) to the model and return its text."""
    client = _get_client()
    config = None
    if system_instruction:
        config = types.GenerateContentConfig(system_instruction=system_instruction)

    try:
        response = client.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=contents,
            config=config,
        )
    except Exception as e:
        logger.exception("Gemini request failed")
        raise AIServiceError(str(e)) from e

    text = (response.text or "").strip()
    if not text:
        raise AIServiceError("Empty response from model")
    return text


def extract_json(text: str) -> Any:
    """
    Parse JSON out of a model reply, tolerating markdown fences and
    chatter around the payload.
    """
    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("[", "]"), ("{", "}")):
        start = cleaned.find(opener)
        end = cleaned.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(cleaned[start:end + 1])
            except json.JSONDecodeError:
                continue
    raise AIServiceError("Model reply is not valid JSON")


def generate_json(prompt: str) -> Any:
    return extract_json(generate_text(prompt))
