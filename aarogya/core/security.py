"""
Core security utilities for password hashing and bearer tokens.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from ..config import settings
from ..auth.exceptions import InvalidTokenException, TokenExpiredException
from ..auth.models import UserRole

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    A fresh random salt is embedded in every digest, so hashing the same
    password twice yields two different strings.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    The comparison is delegated to passlib, which recomputes the digest with the
    embedded salt and compares in constant time.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        logger.warning("Password verification against an unrecognized hash format")
        return False


@dataclass(frozen=True)
class TokenIdentity:
    """Identity carried by a verified bearer token."""
    id: str
    role: UserRole


def create_access_token(
    user_id: str,
    role: Union[UserRole, str],
    expires_delta: Optional[timedelta] = None,
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        user_id: Identifier of the account
        role: Role of the account
        expires_delta: Token lifetime (defaults to the configured window)
        issued_at: Issue time (defaults to now)

    Returns:
        str: Encoded JWT token
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = {
        "id": user_id,
        "role": UserRole(role).value,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenIdentity:
    """
    Verify and decode a JWT access token.

    Verification is stateless: the account's current approval status is not
    consulted.

    Args:
        token: JWT token string

    Returns:
        TokenIdentity: id and role from the token

    Raises:
        TokenExpiredException: If the token has expired
        InvalidTokenException: If the token is malformed or the signature is invalid
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise InvalidTokenException()

    user_id = payload.get("id")
    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise InvalidTokenException("Invalid token payload")
    if not user_id or "exp" not in payload:
        raise InvalidTokenException("Invalid token payload")

    return TokenIdentity(id=user_id, role=role)
