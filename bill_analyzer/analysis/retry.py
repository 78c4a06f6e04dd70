"""Bounded exponential-backoff retry for AI provider calls."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from bill_analyzer.analysis.exceptions import (
    FailureKind,
    ProviderCallError,
    RetryCancelledError,
    RetryExhaustedError,
)
from bill_analyzer.logging.logger import Log

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt limit and backoff schedule. Delays are in seconds."""

    max_attempts: int = 3
    initial_delay_seconds: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay_seconds < 0:
            raise ValueError("initial_delay_seconds must not be negative")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be at least 1.0")

    def delay_for(self, attempt: int) -> float:
        """Wait before the attempt following failed attempt number ``attempt`` (1-based)."""
        return self.initial_delay_seconds * self.multiplier ** (attempt - 1)


class RetryExecutor:
    """Runs an operation, retrying only failures tagged TRANSIENT.

    The backoff wait is done on ``cancel_event``; setting the event aborts
    any loop that is currently waiting.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._policy = policy
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def execute(self, operation: Callable[[], T]) -> T:
        """Call ``operation`` until it succeeds or retrying stops.

        Raises:
            ProviderCallError: PERMANENT or UNKNOWN failure, not retried.
            RetryExhaustedError: every attempt failed with a TRANSIENT error.
            RetryCancelledError: cancelled while waiting between attempts.
        """
        attempt = 1
        while True:
            if attempt > 1:
                Log.warning(
                    f"Retrying AI provider call, attempt {attempt}/{self._policy.max_attempts}"
                )
            try:
                return operation()
            except ProviderCallError as exc:
                if exc.kind is not FailureKind.TRANSIENT:
                    raise
                if attempt >= self._policy.max_attempts:
                    raise RetryExhaustedError(attempt, exc) from exc
                delay = self._policy.delay_for(attempt)
                Log.warning(
                    f"Transient AI provider failure on attempt {attempt}: {exc}. "
                    f"Waiting {delay:.2f}s"
                )
                if self._cancel_event.wait(delay):
                    raise RetryCancelledError(
                        f"Retry cancelled after attempt {attempt}"
                    ) from exc
            attempt += 1
