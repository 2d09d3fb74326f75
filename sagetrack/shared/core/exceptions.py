from enum import Enum
from typing import Optional, Dict, Any


class SagetrackException(Exception):
    """Base exception for all sagetrack errors."""
    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SagetrackException):
    """Raised when configuration is invalid or an AWS client cannot be built."""
    def __init__(self, message: str, code: str = "config_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class AdapterError(SagetrackException):
    """Raised when the SageMaker adapter fails."""
    def __init__(self, message: str, code: str = "adapter_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class ErrorKind(str, Enum):
    """Failure taxonomy used to decide retryability and presentation."""

    AUTHENTICATION = "authentication"
    TRANSIENT = "transient"
    PERMANENT = "permanent"


class ClassifiedError(AdapterError):
    """
    A remote failure sorted into the ErrorKind taxonomy.

    `message` keeps the provider text; `code` is the provider error code when one
    was exposed. Instances are created once per failing call and not mutated.
    """
    kind: ErrorKind = ErrorKind.PERMANENT

    def __init__(
        self,
        message: str,
        code: str = "adapter_error",
        hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)
        self.hint = hint

    @property
    def is_retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT


class AuthenticationError(ClassifiedError):
    """Credentials or permissions are unusable. Never retried."""
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str, code: str = "auth_error", hint: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, hint=hint, details=details)


class TransientError(ClassifiedError):
    """Throttling or a temporary fault; eligible for retry."""
    kind = ErrorKind.TRANSIENT

    def __init__(self, message: str, code: str = "transient_error", hint: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, hint=hint, details=details)


class PermanentError(ClassifiedError):
    """Any other failure; surfaced immediately."""
    kind = ErrorKind.PERMANENT

    def __init__(self, message: str, code: str = "permanent_error", hint: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, hint=hint, details=details)


class RetryExhaustedError(TransientError):
    """A transient failure persisted through every allowed attempt."""

    def __init__(self, last_error: ClassifiedError, attempts: int):
        super().__init__(
            f"{last_error.message} (gave up after {attempts} attempts)",
            code="retries_exhausted",
            hint=last_error.hint,
            details={**last_error.details, "attempts": attempts, "provider_code": last_error.code},
        )
        self.last_error = last_error
        self.attempts = attempts
