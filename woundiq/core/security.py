"""
Core security utilities for password hashing and strength checks.
"""
from enum import Enum
from passlib.context import CryptContext
import logging

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100

# Password hashing context. bcrypt_sha256 digests the whole password before
# bcrypt, which alone only reads the first 72 bytes. Plain bcrypt hashes still
# verify and are flagged deprecated.
pwd_context = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    deprecated="auto",
    bcrypt_sha256__rounds=settings.bcrypt_rounds,
    bcrypt__rounds=settings.bcrypt_rounds
)

class PasswordStrength(str, Enum):
    """
    Outcome of the password length pre-check.
    """
    OK = "ok"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"

def hash_password(password: str) -> str:
    """
    Hash a password using SHA-256 prehashed bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Self-contained salted hash
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    A mismatch is a normal False. A stored hash passlib cannot parse is
    also reported as False rather than raised.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification against unreadable hash: {str(e)}")
        return False

def check_password_strength(password: str) -> PasswordStrength:
    """
    Check a password against the length policy.

    Args:
        password: Password to validate

    Returns:
        PasswordStrength: OK, TOO_SHORT or TOO_LONG
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordStrength.TOO_SHORT
    if len(password) > MAX_PASSWORD_LENGTH:
        return PasswordStrength.TOO_LONG
    return PasswordStrength.OK
