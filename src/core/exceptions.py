"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    CONFLICT = "CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INVITE_CODE_EXHAUSTED = "INVITE_CODE_EXHAUSTED"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ValidationError(AppException):
    """Bad or missing input, including self-referential operations."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field},
        )


class NotFoundError(AppException):
    """A referenced entity does not exist."""

    def __init__(self, resource: str, identifier: str = "") -> None:
        self.resource = resource
        self.identifier = identifier
        message = f"{resource.replace('_', ' ').capitalize()} not found"
        if identifier:
            message = f"{message}: {identifier}"
        super().__init__(
            error_code=ErrorCode.NOT_FOUND,
            message=message,
            status_code=404,
            details={"resource": resource, "identifier": identifier},
        )


class ConflictError(AppException):
    """The operation violates a state invariant."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: Any,
        message: str | None = None,
    ) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(
            error_code=ErrorCode.CONFLICT,
            message=message or f"Conflict on {resource}.{field}: {value}",
            status_code=409,
            details={"resource": resource, "field": field, "value": str(value)},
        )


class InvalidStateTransitionError(ConflictError):
    """An entity was asked for a transition its current state does not allow."""

    def __init__(self, resource: str, current: str, action: str) -> None:
        super().__init__(
            resource=resource,
            field="status",
            value=current,
            message=f"Cannot {action} {resource} with status {current}",
        )


class UnauthorizedError(AppException):
    """The caller lacks the standing required for the operation."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class InternalError(AppException):
    """Unclassified failure, usually wrapping a repository exception."""

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=500,
            details=details,
        )


class InviteCodeGenerationError(InternalError):
    """Every candidate invite code collided with an existing invite."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            message=f"Failed to generate a unique invite code after {attempts} attempts",
            error_code=ErrorCode.INVITE_CODE_EXHAUSTED,
            details={"attempts": attempts},
        )
