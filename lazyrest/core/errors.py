"""Error Hierarchy - typed, categorized exceptions for registration and request failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Registration errors (contract, prefix) never reach HTTP: they are raised to the caller
    - Request errors carry http_status and a public plain-text body
    - Decode and encode failures never expose internal detail in the public body

Design Decisions:
    - Single hierarchy with LazyRestError base: one handler renders all request errors
    - Business services raise ServiceError subclasses (or any Exception); the
      dispatcher wraps whatever they raise in BusinessError
"""

from enum import Enum
from http import HTTPStatus


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories, one per failure class."""
    CONTRACT = "contract"
    REGISTRATION = "registration"
    CLIENT_INPUT = "client_input"
    BUSINESS = "business"
    ENCODING = "encoding"
    INTERNAL = "internal"


class LazyRestError(Exception):
    """Base exception for all lazyrest errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        public_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self._public_message = public_message

    @property
    def public_message(self) -> str:
        """Plain-text body sent to the client."""
        if self._public_message is not None:
            return self._public_message
        return HTTPStatus(self.http_status).phrase

    def to_log_extra(self) -> dict:
        """Structured fields for logger.*(extra=...)."""
        return {
            "error_code": self.code,
            "status_code": self.http_status,
        }


# ─── Registration Errors ────────────────────────────────────────

class ContractViolationError(LazyRestError):
    """Service does not satisfy the operation contract."""
    def __init__(self, operation: str, position: str, detail: str):
        super().__init__(
            f"{operation}: {position}: {detail}",
            "CONTRACT_VIOLATION", ErrorCategory.CONTRACT,
            ErrorSeverity.ERROR, 500,
        )
        self.operation = operation
        self.position = position
        self.detail = detail


class RegistrationError(LazyRestError):
    """Prefix cannot be mounted (empty or already taken)."""
    def __init__(self, prefix: str, detail: str):
        super().__init__(
            f"Cannot register prefix '{prefix}': {detail}",
            "REGISTRATION_FAILED", ErrorCategory.REGISTRATION,
            ErrorSeverity.ERROR, 500,
        )
        self.prefix = prefix


# ─── Request Errors (client input) ──────────────────────────────

class InvalidIdError(LazyRestError):
    """Path id is not a non-negative integer within range."""
    def __init__(self, raw: str):
        super().__init__(
            f"Invalid ID '{raw}'",
            "INVALID_ID", ErrorCategory.CLIENT_INPUT,
            ErrorSeverity.INFO, 400, public_message="Invalid ID",
        )
        self.raw = raw


class BodyDecodeError(LazyRestError):
    """Request body could not be decoded into the payload type."""
    def __init__(self, operation: str, detail: str, http_status: int = 500):
        super().__init__(
            f"Decode error in {operation}: {detail}",
            "BODY_DECODE_ERROR", ErrorCategory.CLIENT_INPUT,
            ErrorSeverity.ERROR, http_status,
        )
        self.operation = operation


# ─── Request Errors (server side) ───────────────────────────────

class BusinessError(LazyRestError):
    """Business method raised; its message is returned as plain text."""
    def __init__(self, operation: str, cause: Exception):
        message = str(cause) or type(cause).__name__
        super().__init__(
            message, "BUSINESS_ERROR", ErrorCategory.BUSINESS,
            ErrorSeverity.WARNING, 500, public_message=message,
        )
        self.operation = operation
        self.cause = cause


class EnvelopeEncodingError(LazyRestError):
    """Success value has no JSON representation."""
    def __init__(self, detail: str):
        super().__init__(
            f"Marshal error: {detail}",
            "ENCODING_ERROR", ErrorCategory.ENCODING,
            ErrorSeverity.CRITICAL, 500,
        )


# ─── Errors raised by business services ─────────────────────────

class ServiceError(Exception):
    """Base class for failures raised by resource services."""


class RecordNotFoundError(ServiceError):
    """Requested record id does not exist."""
    def __init__(self, record_id: int):
        super().__init__(f"ID {record_id} does not exist")
        self.record_id = record_id
