"""
Shared fixtures for unit tests.

Fakes for the HTTP session and the clock, plus sample images and
completion bodies. Clients receive fakes through their constructors.
"""

import io
import json
import random
from typing import Any, Callable, Dict, Iterator, List, Optional, Union
from unittest.mock import patch

import pytest
from PIL import Image

from carve.domain.meal.analysis.models import AnalysisRequest, AnalysisResult
from carve.infrastructure.ai.analysis_client import FoodAnalysisClient
from carve.infrastructure.ai.throttle import RequestThrottle
from carve.infrastructure.network.connectivity import StaticConnectivityProbe
from carve.infrastructure.persistence.in_memory import InMemoryFoodEntryRepository


# ═══════════════════════════════════════════════════════════
# FAKE CLOCK
# ═══════════════════════════════════════════════════════════


class FakeClock:
    """Monotonic clock advanced only by fake sleeps."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float, *args: Any, **kwargs: Any) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def patched_sleep(fake_clock: FakeClock) -> Iterator[FakeClock]:
    """Route asyncio.sleep through the fake clock."""
    with patch("asyncio.sleep", new=fake_clock.sleep):
        yield fake_clock


# ═══════════════════════════════════════════════════════════
# FAKE HTTP SESSION
# ═══════════════════════════════════════════════════════════


class FakeResponse:
    """Minimal aiohttp response: status + read()."""

    def __init__(self, status: int, body: Union[str, bytes]) -> None:
        self.status = status
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body


class _RequestContext:
    def __init__(self, item: Union[FakeResponse, BaseException, Callable[[], Any]]) -> None:
        self._item = item

    async def __aenter__(self) -> FakeResponse:
        item = self._item
        if callable(item) and not isinstance(item, FakeResponse):
            item = await item()
        if isinstance(item, BaseException):
            raise item
        return item

    async def __aexit__(self, *args: object) -> None:
        return None


class FakeSession:
    """
    Scripted stand-in for aiohttp.ClientSession.post.

    Each call consumes the next scripted item: a FakeResponse, an
    exception to raise, or an async callable producing either.
    The last item repeats once the script is exhausted.
    """

    def __init__(
        self,
        script: List[Any],
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.script = list(script)
        self.clock = clock
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> _RequestContext:
        self.calls.append(
            {
                "url": url,
                "json": kwargs.get("json"),
                "headers": kwargs.get("headers"),
                "timeout": kwargs.get("timeout"),
                "at": self.clock() if self.clock else None,
            }
        )
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        return _RequestContext(item)

    async def close(self) -> None:
        self.closed = True


def completion_body(content: str) -> str:
    """Wrap message content in a chat-completion envelope."""
    return json.dumps(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }
    )


FENCED_CONTENT = (
    "```json\n"
    '{"calories":450,"protein":30,"carbs":40,"fat":15,"details":"grilled chicken salad"}'
    "\n```"
)


@pytest.fixture
def success_response() -> FakeResponse:
    """200 response with fenced nutrition JSON."""
    return FakeResponse(200, completion_body(FENCED_CONTENT))


@pytest.fixture
def expected_result() -> AnalysisResult:
    return AnalysisResult(
        calories=450,
        protein=30,
        carbs=40,
        fat=15,
        details="grilled chicken salad",
    )


@pytest.fixture
def make_session(fake_clock: FakeClock) -> Callable[..., FakeSession]:
    """Factory: make_session(item, item, ...) with dispatch times from fake clock."""

    def _make(*script: Any) -> FakeSession:
        return FakeSession(list(script), clock=fake_clock)

    return _make


@pytest.fixture
def make_client(fake_clock: FakeClock) -> Callable[..., FoodAnalysisClient]:
    """Factory for a client wired to fakes (online, fake-clock throttle)."""

    def _make(
        session: FakeSession,
        connected: bool = True,
        throttle: Optional[RequestThrottle] = None,
        probe: Optional[Any] = None,
        **kwargs: Any,
    ) -> FoodAnalysisClient:
        return FoodAnalysisClient(
            api_key="test-key",
            model="gpt-4o-mini-2024-07-18",
            url="https://api.example.test/v1/chat/completions",
            probe=probe or StaticConnectivityProbe(connected),
            throttle=throttle or RequestThrottle(clock=fake_clock),
            session=session,  # type: ignore[arg-type]
            **kwargs,
        )

    return _make


# ═══════════════════════════════════════════════════════════
# IMAGES
# ═══════════════════════════════════════════════════════════


def noise_jpeg(width: int, height: int, quality: int = 95, seed: int = 42) -> bytes:
    """JPEG of random noise (compresses poorly, so sizes are large)."""
    rng = random.Random(seed)
    raw = rng.randbytes(width * height * 3)
    img = Image.frombytes("RGB", (width, height), raw)
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def small_jpeg() -> bytes:
    """Roughly 200KB photo-like payload."""
    return noise_jpeg(320, 320)


@pytest.fixture(scope="session")
def large_jpeg() -> bytes:
    """Noise image whose quality-1.0 encoding is well above 1 MiB."""
    return noise_jpeg(1000, 1000)


@pytest.fixture
def png_with_alpha() -> bytes:
    img = Image.new("RGBA", (64, 48), (255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


# ═══════════════════════════════════════════════════════════
# DOMAIN FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def text_request() -> AnalysisRequest:
    return AnalysisRequest(name="grilled chicken salad", amount_grams=250)


@pytest.fixture
def repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def make_response() -> Callable[[int, Union[str, bytes]], FakeResponse]:
    """Factory: make_response(status, body)."""
    return FakeResponse


@pytest.fixture
def make_completion() -> Callable[[str], FakeResponse]:
    """Factory: 200 response carrying the given message content."""

    def _make(content: str) -> FakeResponse:
        return FakeResponse(200, completion_body(content))

    return _make
