"""
Domain error taxonomy for the client.

WHAT: One exception type whose `kind` is drawn from a closed set
WHY: Callers match on a single discriminant and never see raw transport errors
HOW: ErrorKind enum plus DomainError with per-kind constructors
"""

import enum
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    """Closed set of failure kinds surfaced by the client."""
    AUTH_FAILURE = "AuthFailure"
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    RATE_LIMITED = "RateLimited"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    VALIDATION_FAILURE = "ValidationFailure"
    TIMEOUT = "Timeout"
    NETWORK_FAILURE = "NetworkFailure"
    UNKNOWN_SERVER_ERROR = "UnknownServerError"
    CLIENT_UNEXPECTED = "ClientUnexpected"


class DomainError(Exception):
    """
    Normalized failure raised by every client operation.

    Attributes:
        kind: Taxonomy key (serialized as `code`)
        message: Human-readable message
        status: Correlated HTTP status, if any
        recoverable: Whether the retry policy may try again
        retry_after: Suggested wait in seconds, if any
        suggestion: Remediation text meant for direct display
        details: Structured extra data (server body, violations, ...)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status: Optional[int] = None,
        recoverable: bool = False,
        retry_after: Optional[float] = None,
        suggestion: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.status = status
        self.recoverable = recoverable
        self.retry_after = retry_after
        self.suggestion = suggestion
        self.details = dict(details) if details else {}

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire field names."""
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "recoverable": self.recoverable,
            "retryAfter": self.retry_after,
            "suggestion": self.suggestion,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"DomainError(kind={self.code}, status={self.status}, message={self.message!r})"

    # ========== Constructors per kind ==========

    @classmethod
    def auth_failure(cls, message: str = "Authentication failed", status: int = 401,
                     details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.AUTH_FAILURE,
            message,
            status=status,
            recoverable=False,
            suggestion="Invalid or expired API key. Regenerate it in Settings → API Keys.",
            details=details,
        )

    @classmethod
    def resource_not_found(cls, resource: str = "resource", slug: Optional[str] = None,
                           status: Optional[int] = 404,
                           details: Optional[Dict[str, Any]] = None) -> "DomainError":
        message = f"{resource} not found" + (f" ({slug})" if slug else "")
        return cls(
            ErrorKind.RESOURCE_NOT_FOUND,
            message,
            status=status,
            recoverable=False,
            suggestion=f"The {resource} no longer exists or was renamed.",
            details={"resource": resource, **(details or {})},
        )

    @classmethod
    def rate_limited(cls, message: str = "Rate limit exceeded",
                     retry_after: Optional[float] = None,
                     details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.RATE_LIMITED,
            message,
            status=429,
            recoverable=True,
            retry_after=retry_after,
            suggestion="You are sending requests too quickly.",
            details=details,
        )

    @classmethod
    def service_unavailable(cls, message: str = "Embedder service unavailable", status: int = 502,
                            details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.SERVICE_UNAVAILABLE,
            message,
            status=status,
            recoverable=True,
            retry_after=30,
            suggestion="Document processing is temporarily down. Retrying automatically...",
            details=details,
        )

    @classmethod
    def validation_failure(cls, message: str = "Validation failed", status: Optional[int] = 400,
                           details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.VALIDATION_FAILURE,
            message,
            status=status,
            recoverable=False,
            suggestion="Request data is invalid.",
            details=details,
        )

    @classmethod
    def timeout(cls, message: str = "Request timed out",
                details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.TIMEOUT,
            message,
            recoverable=True,
            retry_after=30,
            suggestion="Request timed out. Retrying...",
            details=details,
        )

    @classmethod
    def network_failure(cls, message: str = "Network error",
                        details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.NETWORK_FAILURE,
            message,
            recoverable=True,
            retry_after=10,
            suggestion="Network issue. Retrying...",
            details=details,
        )

    @classmethod
    def unknown_server_error(cls, message: str, status: Optional[int],
                             details: Optional[Dict[str, Any]] = None) -> "DomainError":
        server_side = status is not None and status >= 500
        return cls(
            ErrorKind.UNKNOWN_SERVER_ERROR,
            message,
            status=status,
            recoverable=server_side,
            retry_after=30 if server_side else None,
            suggestion="Server issue detected. Retrying..." if server_side else "Unexpected error occurred.",
            details=details,
        )

    @classmethod
    def client_unexpected(cls, message: str,
                          details: Optional[Dict[str, Any]] = None) -> "DomainError":
        return cls(
            ErrorKind.CLIENT_UNEXPECTED,
            message,
            recoverable=False,
            suggestion="Unexpected client error.",
            details=details,
        )
