"""
Password hashing utilities.

Passwords are hashed with bcrypt. Hashing is an explicit call made by the
registration service; models never hash implicitly.

Usage:
    password_hash = hash_password("secret123")
    verify_password("secret123", password_hash)  # True
"""

import bcrypt


# bcrypt only considers the first 72 bytes of the input
BCRYPT_MAX_BYTES = 72
DEFAULT_ROUNDS = 12


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a plaintext password.

    Args:
        password: Plaintext password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash as a UTF-8 string

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Returns False for empty input or a malformed hash.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
