"""
Error Tracker

Keeps repeated identical failures (sustained throttling, a missing role) from
flooding user-facing output: the first occurrence of a signature is surfaced,
immediate repeats are suppressed until a different signature arrives.
Affects presentation only, never the return values of the adapter.
"""

from functools import lru_cache
from threading import Lock
from typing import Optional

import structlog

from sagetrack.shared.core.constants import AUTH_ERROR_BANNER
from sagetrack.shared.core.error_governance import ErrorClassifier, ErrorClassifierProtocol
from sagetrack.shared.core.exceptions import AuthenticationError, ClassifiedError, ErrorKind

logger = structlog.get_logger()


def error_signature(classified: ClassifiedError) -> str:
    """Deduplication key: the normalized message text."""
    return classified.message.strip()


def decorate_error(exc: BaseException, classified: ClassifiedError) -> BaseException:
    """Wrap authentication failures in the remediation banner; pass others through."""
    if classified.kind is not ErrorKind.AUTHENTICATION:
        return exc

    lines = [f"{AUTH_ERROR_BANNER}: {classified.hint}" if classified.hint else AUTH_ERROR_BANNER]
    lines.append(classified.message)
    decorated = AuthenticationError(
        "\n".join(lines),
        code=classified.code,
        hint=classified.hint,
        details=dict(classified.details),
    )
    decorated.__cause__ = exc
    return decorated


class ErrorTracker:
    """
    Report-once/suppress-repeats filter for surfaced errors.

    Thread-safe; one instance is normally shared for the process lifetime
    (see get_error_tracker), tests construct isolated instances.
    """

    def __init__(self, classifier: Optional[ErrorClassifierProtocol] = None):
        self.classifier = classifier or ErrorClassifier()
        self._lock = Lock()
        self.last_signature: Optional[str] = None
        self.suppressed = 0

    def track(self, exc: BaseException) -> Optional[BaseException]:
        """Return the error to surface, or None when it repeats the last one."""
        classified = self.classifier.classify(exc)
        signature = error_signature(classified)

        with self._lock:
            if signature != self.last_signature:
                self.last_signature = signature
                self.suppressed = 0
                surface = True
            else:
                self.suppressed += 1
                surface = False
            suppressed = self.suppressed

        if not surface:
            logger.debug("error_suppressed", code=classified.code, repeats=suppressed)
            return None
        return decorate_error(exc, classified)

    def reset(self) -> None:
        with self._lock:
            self.last_signature = None
            self.suppressed = 0


@lru_cache
def get_error_tracker() -> ErrorTracker:
    """Process-wide tracker used by the CLI."""
    return ErrorTracker()
