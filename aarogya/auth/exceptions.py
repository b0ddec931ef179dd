"""
Authentication-specific exceptions.

Each exception carries an ``error`` kind that the global handler exposes to
clients next to the human-readable message.
"""
from typing import Iterable, Union

from fastapi import HTTPException, status

from .models import UserRole


class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    error = "error"

    def __init__(self, status_code: int, detail: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationException(AuthException):
    """Exception raised when input is missing or malformed."""
    error = "validation_error"

    def __init__(self, detail: str = "Missing required fields"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictException(AuthException):
    """Exception raised when a unique value is taken or a state change is not allowed."""
    error = "conflict"

    def __init__(self, detail: str = "User with this email or phone already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ResourceNotFoundException(AuthException):
    """Exception raised when a requested account or profile does not exist."""
    error = "not_found"

    def __init__(self, detail: str = "Resource not found", status_code: int = status.HTTP_404_NOT_FOUND):
        super().__init__(status_code=status_code, detail=detail)


class AccountNotFoundException(ResourceNotFoundException):
    """Exception raised when no account matches a (phone, role) login pair."""

    def __init__(self, detail: str = "No user found with this phone number and role"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)


class PendingApprovalException(AuthException):
    """Exception raised when a doctor/lab account still awaits admin approval."""
    error = "pending_approval"

    def __init__(self, detail: str = "Your account is pending approval. Please wait for admin approval."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AccountRejectedException(AuthException):
    """Exception raised when a doctor/lab account was rejected by an admin."""
    error = "rejected"

    def __init__(self, detail: str = "Your account has been rejected. Please contact admin."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    error = "invalid_credentials"

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidTokenException(AuthException):
    """Exception raised when a bearer token is missing, malformed or forged."""
    error = "invalid_token"

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenExpiredException(InvalidTokenException):
    """Exception raised when token has expired."""

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail=detail)


class PermissionDeniedException(AuthException):
    """Exception raised when an authenticated user may not perform an operation."""
    error = "forbidden"

    def __init__(self, detail: str = "Unauthorized access"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class RoleDeniedException(PermissionDeniedException):
    """Exception raised when user doesn't have required role."""

    def __init__(self, required_roles: Iterable[Union[UserRole, str]], user_role: Union[UserRole, str]):
        allowed = [getattr(role, "value", role) for role in required_roles]
        detail = f"Access denied. Required roles: {allowed}. Your role: {getattr(user_role, 'value', user_role)}"
        super().__init__(detail=detail)
