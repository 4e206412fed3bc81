"""Domain exceptions for the PropDesk application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class PropDeskException(Exception):
    """Base exception for all PropDesk application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PropDeskException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PropDeskException):
    """Raised when no authenticated user is attached to the request."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(PropDeskException):
    """Raised when the user's role or ownership does not allow the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'ticket', 'invoice').
            action: Optional action that was attempted (e.g. 'create', 'delete').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action and message == "Permission denied":
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(PropDeskException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'ticket', 'property').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RateLimitExceededException(PropDeskException):
    """Raised when a subject exceeded the request budget for an action."""

    def __init__(self, action: str, limit: int, reset_at: int, retry_after: int) -> None:
        """Initialize with the limit state rendered into the 429 response.

        Args:
            action: Rate-limited action name (e.g. 'createTicket').
            limit: Maximum requests per window.
            reset_at: Epoch milliseconds when the window is expected to reset.
            retry_after: Seconds the client should wait before retrying.
        """
        super().__init__(
            "Too many requests. Please try again later.",
            "RATE_LIMIT_EXCEEDED",
            {
                "action": action,
                "limit": limit,
                "remaining": 0,
                "reset_at": reset_at,
                "retry_after": retry_after,
            },
        )
        self.limit = limit
        self.reset_at = reset_at
        self.retry_after = retry_after


class PersistenceNotConfiguredException(PropDeskException):
    """Raised when an operation needs the relational store but no repositories were wired."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a data store that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
