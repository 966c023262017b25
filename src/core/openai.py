"""OpenAI chat client with retry on transient errors and call metrics."""

import logging
import time
from functools import lru_cache
from typing import Any

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
MIN_WAIT_SECONDS = 1
MAX_WAIT_SECONDS = 10

SLOW_CALL_THRESHOLD_MS = 2000

TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError)


class OpenAIMetrics:
    """Counts assistant calls, failures and latency."""

    def __init__(self, max_samples: int = 200):
        self._latencies: list[float] = []
        self._max_samples = max_samples
        self.total_calls = 0
        self.total_errors = 0

    def record_call(self, latency_ms: float, error: str | None = None) -> None:
        """Record one completed or failed call."""
        self.total_calls += 1
        if error:
            self.total_errors += 1
        self._latencies.append(round(latency_ms, 2))
        if len(self._latencies) > self._max_samples:
            self._latencies = self._latencies[-self._max_samples:]

    def get_stats(self) -> dict:
        """Get aggregated stats."""
        count = len(self._latencies)
        return {
            "total_calls": self.total_calls,
            "total_errors": self.total_errors,
            "avg_latency_ms": round(sum(self._latencies) / count, 2) if count else 0,
        }


_openai_metrics: OpenAIMetrics | None = None


def get_openai_metrics() -> OpenAIMetrics:
    """Get or create the global OpenAI metrics instance."""
    global _openai_metrics
    if _openai_metrics is None:
        _openai_metrics = OpenAIMetrics()
    return _openai_metrics


class TimedChatClient:
    """Async chat completion wrapper.

    Adds:
    - Automatic retry with exponential backoff for transient errors
    - Latency logging for every call
    - Metrics collection for the readiness endpoint
    """

    def __init__(self, client: AsyncOpenAI, model: str):
        self._client = client
        self.model = model
        self._metrics = get_openai_metrics()

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=MIN_WAIT_SECONDS, max=MAX_WAIT_SECONDS),
        reraise=True,
    )
    async def _create_with_retry(self, **kwargs: Any) -> Any:
        return await self._client.chat.completions.create(**kwargs)

    async def complete(self, messages: list[dict[str, str]], **kwargs: Any) -> str | None:
        """Run one chat completion and return the reply text.

        Args:
            messages: Role-tagged messages, system prompt first.
            **kwargs: Extra arguments for the completions API.

        Returns:
            str | None: The first choice's content, None when it is empty.

        Raises:
            Exception: Whatever the OpenAI SDK raises once retries are spent.
        """
        start_time = time.perf_counter()
        error_msg = None

        try:
            response = await self._create_with_retry(model=self.model, messages=messages, **kwargs)
            if not response.choices:
                return None
            return response.choices[0].message.content
        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            raise
        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            self._metrics.record_call(latency_ms, error=error_msg)

            log_msg = f"OpenAI chat completion: model={self.model}, latency={latency_ms:.2f}ms"
            if error_msg:
                logger.error(f"{log_msg}, error={error_msg}")
            elif latency_ms > SLOW_CALL_THRESHOLD_MS:
                logger.warning(f"SLOW OpenAI call: {log_msg}")
            else:
                logger.info(log_msg)


@lru_cache
def get_openai_client() -> TimedChatClient:
    """Get cached chat client singleton.

    Returns:
        TimedChatClient: Client bound to the configured model.
    """
    settings = get_settings()
    return TimedChatClient(AsyncOpenAI(api_key=settings.openai_api_key), settings.openai_model)
