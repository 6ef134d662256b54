"""Domain exceptions for the community administration service.

Defines domain-level exceptions that represent rule violations and
upstream failures. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception
handlers.
"""

from typing import Any


class CommunityAdminException(Exception):
    """Base exception for all application errors.

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
        """Return the JSON error body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CommunityAdminException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CommunityAdminException):
    """Raised when authentication fails (e.g. invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CommunityAdminException):
    """Raised when the actor's role may not use the operation at all."""

    def __init__(
        self,
        role: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional role, action, and message.

        Args:
            role: Role of the rejected actor.
            action: Operation that was attempted (e.g. "analytics:read").
            message: Description of the denial.
        """
        details: dict[str, Any] = {}
        if role:
            details["role"] = role
        if action:
            details["action"] = action
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ScopeViolationException(CommunityAdminException):
    """Raised when a request falls outside the actor's jurisdiction.

    Covers leaders with no bound location at their level and explicit
    location filters that point outside the actor's subtree.
    """

    def __init__(self, message: str, role: str | None = None, location_id: str | None = None) -> None:
        details: dict[str, Any] = {}
        if role:
            details["role"] = role
        if location_id:
            details["location_id"] = location_id
        super().__init__(message, "SCOPE_VIOLATION", details)


class ResourceNotFoundException(CommunityAdminException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Kind of resource (e.g. "location", "user").
            resource_id: Identifier that was not found.
        """
        super().__init__(
            f"{resource_type.capitalize()} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UpstreamFailureException(CommunityAdminException):
    """Raised when the entity store or hierarchy provider fails a read."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Data store failure during {operation}",
            "UPSTREAM_FAILURE",
            {"operation": operation, "reason": reason},
        )


class UpstreamTimeoutException(CommunityAdminException):
    """Raised when a concurrent fan-out does not finish within its budget."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(
            f"{operation} did not complete within {timeout_seconds:g}s",
            "UPSTREAM_TIMEOUT",
            {"operation": operation, "timeout_seconds": timeout_seconds},
        )
