from enum import Enum


class BillAnalysisErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    PROMPT_TOO_LARGE = "PROMPT_TOO_LARGE"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class BillAnalysisError(Exception):
    """Raised when bill analysis fails. The message is safe to show to clients."""

    def __init__(self, code: BillAnalysisErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class FailureKind(str, Enum):
    """Retry classification assigned at the provider-call boundary."""

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class ProviderCallError(Exception):
    """Raised by client adapters when the AI provider call fails.

    The message may contain provider internals and must only be logged.
    """

    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class RetryExhaustedError(Exception):
    """Raised when every allowed attempt failed transiently."""

    def __init__(self, attempts: int, last_error: ProviderCallError) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class RetryCancelledError(Exception):
    """Raised when a shutdown signal interrupts the backoff wait."""
