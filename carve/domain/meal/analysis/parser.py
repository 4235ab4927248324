"""Parsing of chat-completion responses into AnalysisResult.

Two layers:
* envelope: ``{"choices": [{"message": {"content": "..."}}]}``
* content: nutrition JSON, possibly wrapped in Markdown code fences
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from carve.domain.meal.analysis.models import AnalysisResult
from carve.domain.shared.errors import (
    InvalidJSONError,
    InvalidResponseError,
    NoContentError,
)

__all__ = [
    "strip_code_fences",
    "extract_content",
    "parse_result",
    "parse_completion",
    "parse_error_message",
]


def strip_code_fences(content: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    return content.replace("```json", "").replace("```", "").strip()


def _load_envelope(body: str) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError) as exc:
        raise InvalidResponseError(f"Response is not JSON: {exc}") from exc


def extract_content(body: str) -> str:
    """Return the first choice's message content.

    Raises:
        InvalidResponseError: Body is not a JSON object
        NoContentError: No choice, message or content string
    """
    envelope = _load_envelope(body)
    if not isinstance(envelope, dict):
        raise InvalidResponseError("Response root is not an object")

    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        raise NoContentError("Response has no choices")
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise NoContentError("Response choice has no message content")
    return content


def parse_result(content: str) -> AnalysisResult:
    """Parse (fenced) nutrition JSON.

    Raises:
        InvalidJSONError: Malformed JSON or schema mismatch
    """
    cleaned = strip_code_fences(content)
    try:
        data = json.loads(cleaned)
    except ValueError as exc:
        raise InvalidJSONError(f"Content is not valid JSON: {cleaned[:200]!r}") from exc
    if not isinstance(data, dict):
        raise InvalidJSONError("Content JSON is not an object")
    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        raise InvalidJSONError(f"Content does not match nutrition schema: {exc}") from exc


def parse_completion(body: str) -> AnalysisResult:
    """Envelope + content parsing of a 200 response body."""
    return parse_result(extract_content(body))


def parse_error_message(body: str) -> str:
    """Best-effort message of a non-200 body.

    Uses ``error.message`` from a structured body, else the raw text.
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return body
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return str(error["message"])
    return body
