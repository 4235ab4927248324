"""
Domain exceptions.

Typed exceptions for explicit error handling.
Every failure of the food-analysis pipeline is an AnalysisError subclass
tagged with an AnalysisErrorKind, so callers can branch on the kind
without string matching.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain-specific exceptions inherit from this.
    Allows catching all domain errors with single except clause.
    """

    pass


class ConfigurationError(DomainError):
    """
    Required configuration is missing.

    Example:
        >>> raise ConfigurationError("OPENAI_API_KEY not found")
    """

    pass


class ExternalServiceError(DomainError):
    """
    External service call could not be made.

    Raised when:
    - Client is used outside its async context manager

    Example:
        >>> raise ExternalServiceError("Client not initialized, use async with")
    """

    pass


# ═══════════════════════════════════════════════════════════
# ANALYSIS PIPELINE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class AnalysisErrorKind(str, Enum):
    """Failure taxonomy of a single analyze() call."""

    NO_CONNECTION = "NO_CONNECTION"
    INVALID_INPUT = "INVALID_INPUT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    API_ERROR = "API_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    NO_CONTENT = "NO_CONTENT"
    INVALID_JSON = "INVALID_JSON"
    MAX_RETRIES_EXCEEDED = "MAX_RETRIES_EXCEEDED"
    UNKNOWN = "UNKNOWN"


class AnalysisError(DomainError):
    """
    Base exception for food analysis failures.

    Subclasses set ``kind``. All of them are terminal for the call
    that raised them.
    """

    kind: AnalysisErrorKind = AnalysisErrorKind.UNKNOWN


class NoConnectionError(AnalysisError):
    """
    Network unreachable according to the connectivity probe.

    Raised before any request is attempted.
    """

    kind = AnalysisErrorKind.NO_CONNECTION


class InvalidInputError(AnalysisError):
    """
    Request cannot be analyzed.

    Raised when:
    - Name is empty (after trimming) and no image is attached
    - Attached image bytes cannot be decoded

    Example:
        >>> raise InvalidInputError("Provide a food name or an image")
    """

    kind = AnalysisErrorKind.INVALID_INPUT


class RateLimitExceededError(AnalysisError):
    """Remote service kept answering 429 until the attempt budget ran out."""

    kind = AnalysisErrorKind.RATE_LIMIT_EXCEEDED


class ApiError(AnalysisError):
    """
    Remote service answered with a non-200, non-429 status.

    Attributes:
        status_code: HTTP status returned by the service
        message: Error message from the body (structured or raw)

    Example:
        >>> raise ApiError(401, "Incorrect API key provided")
    """

    kind = AnalysisErrorKind.API_ERROR

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message}")


class InvalidResponseError(AnalysisError):
    """Response body is not a decodable completion envelope."""

    kind = AnalysisErrorKind.INVALID_RESPONSE


class NoContentError(AnalysisError):
    """Envelope decoded but carries no message content."""

    kind = AnalysisErrorKind.NO_CONTENT


class InvalidJSONError(AnalysisError):
    """
    Message content is not valid nutrition JSON.

    Raised when:
    - Content is not JSON after fence stripping
    - A required key is missing
    - A macro value is not a non-negative integer
    """

    kind = AnalysisErrorKind.INVALID_JSON


class MaxRetriesExceededError(AnalysisError):
    """
    Transport failures exhausted the attempt budget.

    Attributes:
        last_error: Transport exception of the final attempt
    """

    kind = AnalysisErrorKind.MAX_RETRIES_EXCEEDED

    def __init__(self, message: str, last_error: Optional[BaseException] = None) -> None:
        self.last_error = last_error
        super().__init__(message)


class UnknownAnalysisError(AnalysisError):
    """Fallback when a failure fits no other kind."""

    kind = AnalysisErrorKind.UNKNOWN
