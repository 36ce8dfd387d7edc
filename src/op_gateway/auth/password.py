"""Password hashing utilities using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0).
Existing ``$2a$10$...`` hashes verify as-is.
"""

import bcrypt

_ROUNDS = 10


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=_ROUNDS))
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
