"""Custom application exceptions."""

from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        """Initialize exception with message, status code and optional details."""
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ValidationException(AppException):
    """Validation error exception."""

    def __init__(self, message: str = "Validation error", errors: list[dict] | None = None):
        """Initialize with 422 status code and the list of violated constraints."""
        self.errors = errors or []
        super().__init__(message, status_code=422, details=self.errors)


class UnknownRoleException(BadRequestException):
    """Role is not part of the staff role registry."""

    def __init__(self, role: str):
        """Initialize with the offending role name."""
        self.role = role
        super().__init__(f"Unknown staff role '{role}'")


class DuplicateEmailException(ConflictException):
    """Email address is already registered."""

    def __init__(self, email: str | None = None):
        """Initialize with the conflicting email."""
        self.email = email
        super().__init__("Email address already exists")


class DuplicateUsernameException(ConflictException):
    """Username is already taken."""

    def __init__(self, username: str | None = None):
        """Initialize with the conflicting username."""
        self.username = username
        super().__init__("Username already exists")
