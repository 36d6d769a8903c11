"""Password hashing for local accounts."""

import hashlib
import hmac
import secrets

_ITERATIONS = 120_000


def hash_password(password: str, *, salt: str | None = None) -> str:
    """Return ``salt$hexdigest`` using PBKDF2-SHA256."""
    salt = secrets.token_hex(8) if salt is None else salt
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt=salt), stored)
