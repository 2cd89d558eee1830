"""
Password hashing.

Secrets are bcrypt hashes: salted, deliberately slow, and carrying their own
cost factor and salt, so verification needs nothing stored out of band.
"""

import base64
import hashlib
import logging
from typing import Optional

import bcrypt

from jobapp.core.settings import settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _prepare(password: str) -> bytes:
    """
    Encode a password for bcrypt.

    Inputs longer than bcrypt's limit are reduced to a base64 SHA-256 digest
    so that long passwords are neither truncated nor rejected.
    """
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raw = base64.b64encode(hashlib.sha256(raw).digest())
    return raw


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plain text password.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (default: settings.bcrypt_rounds)

    Returns:
        bcrypt hash string (algorithm, cost and salt embedded)
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_prepare(password), salt).decode("ascii")


def verify_password(password_hash: str, password: str) -> bool:
    """
    Verify a password against a stored hash.

    Returns False, never raises, for a wrong password and for a malformed or
    foreign-format hash, so a corrupted record cannot authenticate anyone.
    """
    if not isinstance(password_hash, str) or not isinstance(password, str):
        return False
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_prepare(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError, UnicodeEncodeError):
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# Verified against when the email is unknown, so both paths cost one bcrypt check
_DUMMY_HASH: Optional[str] = None


def dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("not-a-real-password")
    return _DUMMY_HASH
