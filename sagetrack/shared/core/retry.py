"""
Retry Logic with Exponential Backoff

Bounded, classification-aware retries for idempotent SageMaker list queries.
Only failures the error classifier marks as transient are retried; authentication
and permanent failures are raised on the spot.
"""
import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

import structlog
import tenacity

from sagetrack.shared.core.error_governance import ErrorClassifier, ErrorClassifierProtocol
from sagetrack.shared.core.exceptions import ErrorKind, RetryExhaustedError

logger = structlog.get_logger()
T = TypeVar("T")

JITTER_FACTOR = 0.25
MIN_DELAY_SECONDS = 0.001


@dataclass(frozen=True)
class RetryConfig:
    """Immutable retry policy."""

    max_attempts: int = 3
    initial_backoff: float = 0.5
    max_backoff: float = 10.0
    backoff_multiplier: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_backoff < 0:
            raise ValueError("initial_backoff must be >= 0")
        if self.max_backoff < self.initial_backoff:
            raise ValueError("max_backoff must be >= initial_backoff")
        if self.backoff_multiplier <= 1:
            raise ValueError("backoff_multiplier must be > 1")

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryConfig":
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_backoff=settings.RETRY_INITIAL_BACKOFF_SECONDS,
            max_backoff=settings.RETRY_MAX_BACKOFF_SECONDS,
            backoff_multiplier=settings.RETRY_BACKOFF_MULTIPLIER,
            jitter=settings.RETRY_JITTER,
        )

    def backoff_for(self, attempt: int) -> float:
        """Deterministic delay after the given (1-based) failed attempt."""
        delay = self.initial_backoff * (self.backoff_multiplier ** (attempt - 1))
        return min(delay, self.max_backoff)


DEFAULT_RETRY_CONFIG = RetryConfig()


class Retrier:
    """
    Runs an idempotent coroutine factory with exponential backoff.

    Cancellation (task cancel or an enclosing deadline) is never retried and
    interrupts both the in-flight call and the backoff sleep.
    """

    def __init__(
        self,
        config: RetryConfig = DEFAULT_RETRY_CONFIG,
        classifier: Optional[ErrorClassifierProtocol] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.classifier = classifier or ErrorClassifier()
        self._sleep = sleep

    def _calculate_backoff(self, attempt: int) -> float:
        delay = self.config.backoff_for(attempt)
        if not self.config.jitter or delay <= 0:
            return delay
        # ±25% jitter to spread out concurrent retries, never above max_backoff
        jitter = delay * JITTER_FACTOR * (random.random() * 2 - 1)
        return min(self.config.max_backoff, max(MIN_DELAY_SECONDS, delay + jitter))

    def _wait(self, retry_state: tenacity.RetryCallState) -> float:
        return self._calculate_backoff(retry_state.attempt_number)

    def _should_retry(self, exc: BaseException) -> bool:
        if not isinstance(exc, Exception):
            return False
        return self.classifier.classify(exc).kind is ErrorKind.TRANSIENT

    async def run(self, operation: Callable[[], Awaitable[T]], operation_name: str = "aws_call") -> T:
        """Execute `operation` under the retry policy, raising ClassifiedError on failure."""

        def _before_sleep(retry_state: tenacity.RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            wait = retry_state.next_action.sleep if retry_state.next_action else None
            logger.warning(
                "aws_call_retrying",
                operation=operation_name,
                attempt=retry_state.attempt_number,
                max_attempts=self.config.max_attempts,
                wait_seconds=round(wait, 3) if wait is not None else None,
                error=str(exc) if exc else None,
            )

        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.config.max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception(self._should_retry),
            before_sleep=_before_sleep,
            sleep=self._sleep,
            reraise=False,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result = await operation()
                    if attempt.retry_state.attempt_number > 1:
                        logger.info(
                            "aws_call_succeeded_after_retry",
                            operation=operation_name,
                            attempt=attempt.retry_state.attempt_number,
                        )
                    return result
        except tenacity.RetryError as exc:
            last_attempt = exc.last_attempt
            raw = last_attempt.exception()
            if raw is None:
                raise
            classified = self.classifier.classify(raw)
            logger.error(
                "aws_call_retries_exhausted",
                operation=operation_name,
                total_attempts=last_attempt.attempt_number,
                code=classified.code,
                error=classified.message,
            )
            raise RetryExhaustedError(classified, attempts=last_attempt.attempt_number) from raw
        except Exception as exc:
            classified = self.classifier.classify(exc)
            logger.warning(
                "aws_call_failed",
                operation=operation_name,
                kind=classified.kind.value,
                code=classified.code,
                error=classified.message,
            )
            if classified is exc:
                raise
            raise classified from exc

        raise RuntimeError("Unexpected state in Retrier.run")


def build_retrier(settings: Any = None, classifier: Optional[ErrorClassifierProtocol] = None) -> Retrier:
    """Retrier configured from settings, or the shared default policy."""
    config = RetryConfig.from_settings(settings) if settings is not None else DEFAULT_RETRY_CONFIG
    return Retrier(config, classifier=classifier)
