"""Security utilities for JWT and password handling."""

import hmac
from datetime import UTC, datetime, timedelta
from typing import Any, NamedTuple
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from cafe_backend.config import settings

# Password hashing (explicit work factor)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# "$2b$12$" + 22 salt characters + 31 checksum characters
_BCRYPT_SALT_SLICE = slice(7, 29)


class HashedPassword(NamedTuple):
    """Salt and modular-crypt hash produced for one password."""

    salt: str
    hash: str


def extract_salt(hashed_password: str) -> str:
    """Return the salt embedded in a bcrypt hash."""
    return hashed_password[_BCRYPT_SALT_SLICE]


def hash_password(password: str) -> HashedPassword:
    """Hash a password with a fresh random salt."""
    hashed = pwd_context.hash(password)
    return HashedPassword(salt=extract_salt(hashed), hash=hashed)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return hash_password(password).hash


def verify_password(plain_password: str, hashed_password: str, salt: str | None = None) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Candidate password
        hashed_password: Stored bcrypt hash
        salt: Optional salt that must match the one embedded in the hash

    Returns:
        True if the password matches
    """
    if salt is not None and not hmac.compare_digest(salt, extract_salt(hashed_password)):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update(
        {
            "exp": expire,
            "iat": datetime.now(UTC),
            "jti": uuid4().hex,
            "type": "access",
        }
    )

    encoded_jwt = jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded payload or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        # Verify token type
        if payload.get("type") != "access":
            return None

        return payload
    except JWTError:
        return None
