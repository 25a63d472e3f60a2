"""
Institute Credential Utilities

Admin password hashing with Argon2id, admin email normalization and
access token generation.
"""

import secrets
from typing import Optional

from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter, ValidationError
from structlog import get_logger

logger = get_logger()

# Password hashing context with Argon2id (recommended by OWASP)
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=65536,  # 64 MB
    argon2__time_cost=3,  # 3 iterations
    argon2__parallelism=4,  # 4 parallel threads
)

API_KEY_MIN_SUFFIX = 1000
API_KEY_MAX_SUFFIX = 9999


def get_password_hash(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Stored password hash

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        # Malformed or unrecognized stored hash
        logger.error("password_verification_error", error=str(e))
        return False


def generate_api_key(prefix: str) -> str:
    """
    Generate an institute access token.

    Format: ``{prefix}_{n}`` where n is drawn uniformly from [1000, 9999].
    Example: ID_4821

    Args:
        prefix: Fixed literal prefix

    Returns:
        Access token
    """
    suffix = API_KEY_MIN_SUFFIX + secrets.randbelow(API_KEY_MAX_SUFFIX - API_KEY_MIN_SUFFIX + 1)
    return f"{prefix}_{suffix}"


_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize an admin email the way ``EmailStr`` fields store it.

    The domain is lowercased; the local part is kept as given.

    Args:
        email: Email as typed by the user

    Returns:
        Normalized email, or None if it is missing or malformed
    """
    if not email:
        return None
    try:
        return _email_adapter.validate_python(email)
    except ValidationError:
        return None
