"""
Custom exceptions for the Seance Tracker API.

This module defines a hierarchy of exceptions that provide clear error
handling throughout the application. Each exception includes:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Session errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

    # Goal errors
    GOAL_NOT_FOUND = "GOAL_NOT_FOUND"
    GOAL_ALREADY_ACTIVE = "GOAL_ALREADY_ACTIVE"

    # Account errors
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Data/Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class SeanceTrackerError(Exception):
    """
    Base exception for all Seance Tracker errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "success": False,
            "error": {
                "code": self.code.value,
                "message": self.message,
            },
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(SeanceTrackerError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )
        self.field = field


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a well-formed UUID."""

    def __init__(
        self,
        value: Any,
        field: Optional[str] = None,
        message: str = "One or both session IDs are invalid",
    ) -> None:
        super().__init__(
            message=message,
            field=field,
            details={"value": str(value)},
        )
        self.code = ErrorCode.INVALID_ID


# ============================================================================
# Authentication / Authorization Errors (401, 403)
# ============================================================================

class UnauthorizedError(SeanceTrackerError):
    """Raised when a credential is missing, invalid or expired."""

    def __init__(
        self,
        message: str = "Not authenticated",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.UNAUTHORIZED,
            status_code=401,
            details=details,
        )


class InvalidCredentialsError(UnauthorizedError):
    """Raised when login fails."""

    def __init__(self) -> None:
        super().__init__(message="Invalid email or password")
        self.code = ErrorCode.INVALID_CREDENTIALS


class ForbiddenError(SeanceTrackerError):
    """Raised when the caller is authenticated but does not own the resource."""

    def __init__(
        self,
        message: str = "You don't have permission to access this resource",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.FORBIDDEN,
            status_code=403,
            details=details,
        )


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(SeanceTrackerError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> None:
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message or f"{resource_type} with ID '{resource_id}' not found",
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class SessionNotFoundError(NotFoundError):
    """Raised when a session is not found."""

    def __init__(
        self,
        session_id: str,
        details: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            resource_type="Session",
            resource_id=session_id,
            details=details,
            message=message,
        )
        self.code = ErrorCode.SESSION_NOT_FOUND


class GoalNotFoundError(NotFoundError):
    """Raised when a user has no active goal."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            resource_type="Goal",
            resource_id="active",
            details={"user_id": user_id},
            message="No active goal found",
        )
        self.code = ErrorCode.GOAL_NOT_FOUND


# ============================================================================
# Conflict Errors (409)
# ============================================================================

class ConflictError(SeanceTrackerError):
    """Raised when there's a resource conflict."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.CONFLICT,
            status_code=409,
            details=details,
        )


class ActiveGoalExistsError(ConflictError):
    """Raised when creating a goal while another one is still active."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            message=(
                "You already have an active goal. "
                "Delete your current goal before creating a new one."
            ),
            details={"user_id": user_id},
        )
        self.code = ErrorCode.GOAL_ALREADY_ACTIVE


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self) -> None:
        super().__init__(message="User already exists")
        self.code = ErrorCode.EMAIL_ALREADY_REGISTERED
        self.status_code = 400


# ============================================================================
# Database Errors (500)
# ============================================================================

class DatabaseError(SeanceTrackerError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=error_details,
        )
