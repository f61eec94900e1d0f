"""Cryptographic utilities for the Aegis platform.

Provides encryption, decryption, and hashing functions so that monitored
asset values are never stored in plaintext, and bcrypt hashing for account
passwords.
"""

import hashlib
import logging

import bcrypt
from cryptography.fernet import Fernet, InvalidToken

from ..config.settings import settings

logger = logging.getLogger(__name__)

# Initialize the Fernet symmetric encryption module using the configured secret key.
# The key must be a URL-safe base64-encoded 32-byte key.
_fernet = Fernet(settings.ENCRYPTION_KEY.encode())

# bcrypt rejects longer inputs outright
MAX_PASSWORD_BYTES = 72


def normalize_value(value: str) -> str:
    """Return the canonical form of an asset value used for hashing and lookups."""
    return value.lower().strip()


def encrypt_value(value: str) -> str:
    """Encrypt an asset value using symmetric cryptography.

    Args:
        value: The plaintext value (email, username, phone or domain).

    Returns:
        The URL-safe base64-encoded encrypted payload as a string.
    """
    encrypted_bytes: bytes = _fernet.encrypt(value.strip().encode("utf-8"))

    logger.debug("Asset value encrypted successfully")
    return encrypted_bytes.decode("utf-8")


def decrypt_value(encrypted_value: str) -> str:
    """Decrypt an encrypted asset value back to its plaintext form.

    Args:
        encrypted_value: The base64-encoded encrypted payload.

    Returns:
        The decoded plaintext value.

    Raises:
        ValueError: If decryption fails due to an invalid or tampered token.
    """
    try:
        decrypted_bytes: bytes = _fernet.decrypt(encrypted_value.encode("utf-8"))
        return decrypted_bytes.decode("utf-8")
    except InvalidToken:
        logger.error("Failed to decrypt asset record. Token is invalid or tampered.")
        raise ValueError("Decryption failed: invalid token")


def hash_value(value: str) -> str:
    """Generate a deterministic SHA-256 hash of a normalized asset value.

    The hash is the lookup key for duplicate detection, since encrypted
    blobs cannot be compared directly.

    Args:
        value: The plaintext value.

    Returns:
        The hexadecimal string representation of the hash.
    """
    hash_obj = hashlib.sha256(normalize_value(value).encode("utf-8"))
    return hash_obj.hexdigest()


def mask_email(email: str) -> str:
    """Mask the local part of an email address for safe display.

    Keeps the first and last character and replaces up to five characters
    in between (e.g. 'jonathan@gmail.com' -> 'j*****n@gmail.com').
    """
    if "@" not in email:
        return email

    local, domain = email.split("@", 1)
    if not local:
        return email
    if len(local) > 2:
        masked_local = local[0] + "*" * min(len(local) - 2, 5) + local[-1]
    else:
        masked_local = local[0] + "*"

    return f"{masked_local}@{domain}"


def hash_password(password: str) -> str:
    """Return a bcrypt hash of a plaintext account password."""
    salt: bytes = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
