"""
FastAPI dependencies for authentication and authorization.

Every protected route first authenticates the bearer token, then authorizes
the token's role against the route's allowed roles.
"""
from typing import Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.security import TokenIdentity, decode_access_token
from .exceptions import InvalidTokenException, RoleDeniedException
from .models import UserRole

# Bearer scheme; missing credentials are reported by ``authenticate``
bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(token: Optional[str]) -> TokenIdentity:
    """
    Authenticate a request from its bearer token.

    Raises:
        InvalidTokenException: If no token was sent or it fails verification
    """
    if not token:
        raise InvalidTokenException("No token provided")
    return decode_access_token(token)


def authorize(identity: TokenIdentity, allowed_roles: Iterable[UserRole]) -> TokenIdentity:
    """
    Authorize an authenticated identity against a set of roles.

    Raises:
        RoleDeniedException: If the identity's role is not allowed
    """
    allowed_roles = tuple(allowed_roles)
    if identity.role not in allowed_roles:
        raise RoleDeniedException(allowed_roles, identity.role)
    return identity


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenIdentity:
    """
    Get the identity of the current request from its JWT.

    Returns:
        TokenIdentity: id and role of the caller

    Raises:
        InvalidTokenException: If the token is missing, invalid or expired
    """
    return authenticate(credentials.credentials if credentials else None)


def require_roles(*allowed_roles: UserRole):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: Roles that are allowed access

    Returns:
        Function that checks if the caller has a required role
    """
    def role_checker(identity: TokenIdentity = Depends(get_current_identity)) -> TokenIdentity:
        return authorize(identity, allowed_roles)
    return role_checker


# Convenience dependencies for specific roles
require_admin = require_roles(UserRole.ADMIN)
require_doctor = require_roles(UserRole.DOCTOR)
require_doctor_or_patient = require_roles(UserRole.DOCTOR, UserRole.PATIENT)
