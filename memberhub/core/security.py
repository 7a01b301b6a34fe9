"""Security helpers (verification code generation, hashing and verification)."""

from __future__ import annotations

import secrets
import string

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"
CODE_ALPHABET = string.ascii_lowercase + string.digits
CODE_LENGTH = 8


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def hash_code(code: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(code)
    return f"{_PREFIX}{hashed}"


def verify_code(code: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not code or not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, code)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
