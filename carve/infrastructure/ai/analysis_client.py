"""
Chat-completion client for food nutrition analysis.

Throttled, retrying aiohttp client. Implements IFoodAnalysisClient port.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Tuple

import aiohttp
import structlog

from carve.domain.meal.analysis.models import (
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
)
from carve.domain.meal.analysis.parser import parse_completion, parse_error_message
from carve.domain.meal.analysis.ports import IConnectivityProbe
from carve.domain.meal.analysis.prompts import build_messages
from carve.domain.shared.errors import (
    AnalysisError,
    ApiError,
    ConfigurationError,
    ExternalServiceError,
    InvalidInputError,
    MaxRetriesExceededError,
    NoConnectionError,
    RateLimitExceededError,
    UnknownAnalysisError,
)
from carve.infrastructure.ai.throttle import RequestThrottle
from carve.infrastructure.config import (
    get_analysis_model,
    get_completions_url,
    get_openai_api_key,
)
from carve.infrastructure.image.optimizer import JpegOptimizer, OptimizedImage
from carve.infrastructure.network.connectivity import NetworkMonitor

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = 3
RATE_LIMIT_BACKOFF_BASE = 5.0
TRANSPORT_RETRY_DELAY = 2.0
REQUEST_TIMEOUT_SECONDS = 30
TEMPERATURE = 0.7
MAX_TOKENS = 500

TRANSPORT_ERRORS = (asyncio.TimeoutError, aiohttp.ClientError, OSError)


def rate_limit_backoff(attempt: int) -> float:
    """Wait after the ``attempt``-th 429 (exponential)."""
    return RATE_LIMIT_BACKOFF_BASE * 2**attempt


def transport_retry_delay(attempt: int) -> float:
    """Wait after the ``attempt``-th transport failure (linear)."""
    return attempt * TRANSPORT_RETRY_DELAY


class FoodAnalysisClient:
    """
    Nutrition analysis over a multimodal chat-completion endpoint.

    One analyze() call:
    1. Checks connectivity and input (no network on failure)
    2. Compresses the photo to 1 MiB, if any
    3. Sends up to 3 throttled attempts; 429 backs off exponentially,
       transport errors linearly, other statuses fail at once
    4. Parses the fenced JSON answer into AnalysisResult

    Collaborators are injected; defaults are built from configuration.

    Example:
        >>> async with FoodAnalysisClient(api_key="sk-...") as client:
        ...     request = AnalysisRequest(name="banana", amount_grams=120)
        ...     result = await client.analyze(request)
        ...     print(result.calories)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        probe: Optional[IConnectivityProbe] = None,
        optimizer: Optional[JpegOptimizer] = None,
        throttle: Optional[RequestThrottle] = None,
        session: Optional[aiohttp.ClientSession] = None,
        max_attempts: int = MAX_ATTEMPTS,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize client.

        Args:
            api_key: Bearer token (reads OPENAI_API_KEY if None)
            model: Model name (reads CARVE_ANALYSIS_MODEL if None)
            url: Completions endpoint (reads CARVE_COMPLETIONS_URL if None)
            probe: Connectivity probe
            optimizer: Image optimizer
            throttle: Shared request throttle
            session: Pre-configured aiohttp session (caller keeps ownership)
            max_attempts: Attempt budget per call
            timeout_seconds: Per-attempt network timeout

        Raises:
            ConfigurationError: If no API key is available
        """
        resolved_key = api_key or get_openai_api_key()
        if not resolved_key:
            raise ConfigurationError(
                "OPENAI_API_KEY not found in environment. "
                "Set it in .env file or pass as parameter."
            )
        self.api_key = resolved_key
        self.model = model or get_analysis_model()
        self.url = url or get_completions_url()
        self.probe = probe or NetworkMonitor()
        self.optimizer = optimizer or JpegOptimizer()
        self.throttle = throttle or RequestThrottle()
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> FoodAnalysisClient:
        """Async context manager entry."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze a food description or photo.

        Args:
            request: Food name and/or image with portion size

        Returns:
            Parsed nutrition estimate

        Raises:
            AnalysisError: Typed failure, see AnalysisErrorKind
        """
        outcome = await self.analyze_detailed(request)
        return outcome.result

    async def analyze_detailed(self, request: AnalysisRequest) -> AnalysisOutcome:
        """analyze() plus the image payload and attempt count."""
        if not await self._check_connectivity():
            raise NoConnectionError("No network connection")
        if not request.has_content():
            raise InvalidInputError("Provide a food name or an image")

        log = logger.bind(has_image=request.has_image, amount_grams=request.amount_grams)
        log.info("Starting food analysis")

        image_base64: Optional[str] = None
        if request.image is not None:
            optimized = await self._optimize_image(request.image)
            image_base64 = optimized.to_base64()
            log.info(
                "Image prepared",
                size_bytes=optimized.size_bytes,
                quality=optimized.quality,
            )

        payload = self.build_payload(request, image_base64)
        result, attempts = await self._send_with_retries(payload)

        log.info(
            "Food analysis completed",
            attempts=attempts,
            calories=result.calories,
            details=result.details,
        )
        return AnalysisOutcome(result=result, image_base64=image_base64, attempts=attempts)

    def build_payload(
        self, request: AnalysisRequest, image_base64: Optional[str] = None
    ) -> Dict[str, Any]:
        """Request body for the completions endpoint."""
        return {
            "model": self.model,
            "messages": build_messages(
                request.amount_grams,
                name=request.name,
                image_base64=image_base64,
            ),
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def _check_connectivity(self) -> bool:
        # Probe may block on a socket connect: run it in the default executor
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.probe.is_connected)

    async def _optimize_image(self, image: bytes) -> OptimizedImage:
        # Pillow encoding runs in the default executor
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self.optimizer.optimize, image)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error("Image preparation failed", error=repr(e))
            raise UnknownAnalysisError(f"Image preparation failed: {e}") from e

    async def _send_with_retries(self, payload: Dict[str, Any]) -> Tuple[AnalysisResult, int]:
        if self._session is None:
            raise ExternalServiceError("Client not initialized, use async with")

        attempt = 0
        dispatched = 0
        last_error: Optional[BaseException] = None

        while attempt < self.max_attempts:
            await self.throttle.wait()
            dispatched += 1

            try:
                status, body = await self._post(payload)
            except TRANSPORT_ERRORS as e:
                last_error = e
                attempt += 1
                if attempt >= self.max_attempts:
                    break
                wait = transport_retry_delay(attempt)
                logger.warning(
                    f"Transport error, retrying in {wait}s",
                    attempt=attempt,
                    error=repr(e),
                )
                await asyncio.sleep(wait)
                continue
            except Exception as e:
                logger.error("Unexpected analysis failure", error=repr(e))
                raise UnknownAnalysisError(f"Unexpected failure: {e}") from e

            if status == 429:
                attempt += 1
                if attempt >= self.max_attempts:
                    logger.error("Rate limit exceeded", attempts=attempt)
                    raise RateLimitExceededError(
                        f"Rate limited by completion API after {attempt} attempts"
                    )
                wait = rate_limit_backoff(attempt)
                logger.warning(
                    f"Rate limited, retrying in {wait}s",
                    attempt=attempt,
                )
                await asyncio.sleep(wait)
                continue

            if status != 200:
                message = parse_error_message(body)
                logger.error("Completion API error", status=status, message=message)
                raise ApiError(status, message)

            return parse_completion(body), dispatched

        logger.error("Max retries exceeded", attempts=attempt, error=repr(last_error))
        raise MaxRetriesExceededError(
            f"Completion request failed after {attempt} attempts: {last_error!r}",
            last_error=last_error,
        ) from last_error

    async def _post(self, payload: Dict[str, Any]) -> Tuple[int, str]:
        if self._session is None:
            raise ExternalServiceError("Client not initialized, use async with")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with self._session.post(
            self.url,
            json=payload,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as response:
            raw = await response.read()
            return response.status, raw.decode("utf-8", errors="replace")
