"""
Error Governance

Classifies raw SageMaker/botocore failures into the ErrorKind taxonomy
(authentication, transient, permanent). The retry policy consults it to decide
retryability; the error tracker consults it to decorate what reaches the user.
"""

from typing import Any, Protocol
import structlog
from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)

from sagetrack.shared.core.constants import (
    AUTH_ERROR_CODES,
    HINT_INVALID_CREDENTIALS,
    HINT_NO_CREDENTIALS,
    HINT_NO_ROLE,
    IMDS_ROLE_ERROR_PATTERNS,
    TRANSIENT_ERROR_CODES,
)
from sagetrack.shared.core.exceptions import (
    AuthenticationError,
    ClassifiedError,
    PermanentError,
    TransientError,
)

logger = structlog.get_logger()

_TRANSIENT_TRANSPORT_ERRORS = (
    ConnectTimeoutError,
    ReadTimeoutError,
    EndpointConnectionError,
    ConnectionClosedError,
    ConnectionError,
)


class ErrorClassifierProtocol(Protocol):
    def classify(self, exc: BaseException) -> ClassifiedError: ...


def client_error_details(exc: ClientError) -> tuple[str, str, int | None]:
    """Return (code, message, http_status) from a botocore ClientError."""
    response: dict[str, Any] = getattr(exc, "response", None) or {}
    error = response.get("Error", {}) or {}
    code = str(error.get("Code") or "")
    message = str(error.get("Message") or "")
    status = (response.get("ResponseMetadata", {}) or {}).get("HTTPStatusCode")
    return code, message, status if isinstance(status, int) else None


def _matches_imds_role_failure(text: str) -> bool:
    lowered = text.lower()
    return any(pattern in lowered for pattern in IMDS_ROLE_ERROR_PATTERNS)


class ErrorClassifier:
    """Pure mapping from an exception to a ClassifiedError."""

    def classify(self, exc: BaseException) -> ClassifiedError:
        if isinstance(exc, ClassifiedError):
            return exc

        text = str(exc)
        details: dict[str, Any] = {"error_type": type(exc).__name__}

        if isinstance(exc, ClientError):
            code, provider_message, status = client_error_details(exc)
            details.update(provider_code=code, http_status=status, provider_message=provider_message)

            if code in AUTH_ERROR_CODES:
                return self._log(AuthenticationError(
                    text, code=code, hint=HINT_INVALID_CREDENTIALS, details=details
                ))
            if _matches_imds_role_failure(text):
                return self._log(AuthenticationError(text, code=code, hint=HINT_NO_ROLE, details=details))
            if code in TRANSIENT_ERROR_CODES or (status is not None and status >= 500):
                return self._log(TransientError(text, code=code, details=details))
            return self._log(PermanentError(text, code=code or "permanent_error", details=details))

        if _matches_imds_role_failure(text):
            return self._log(AuthenticationError(text, code="imds_role_missing", hint=HINT_NO_ROLE, details=details))

        if isinstance(exc, (NoCredentialsError, PartialCredentialsError)):
            return self._log(AuthenticationError(
                text, code="credentials_missing", hint=HINT_NO_CREDENTIALS, details=details
            ))

        if isinstance(exc, _TRANSIENT_TRANSPORT_ERRORS):
            return self._log(TransientError(text, code="connection_error", details=details))

        return self._log(PermanentError(text, details=details))

    @staticmethod
    def _log(classified: ClassifiedError) -> ClassifiedError:
        logger.debug(
            "aws_error_classified",
            kind=classified.kind.value,
            code=classified.code,
            error=classified.message,
        )
        return classified


default_classifier = ErrorClassifier()


def classify_error(exc: BaseException) -> ClassifiedError:
    """Classify with the shared stateless classifier."""
    return default_classifier.classify(exc)
