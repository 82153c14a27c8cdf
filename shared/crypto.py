"""
Cryptographic helpers — answer hashing and token hashing.

Security answers are hashed with argon2 (via argon2-cffi) and only ever
written; verification tokens are hashed with SHA-256 so they can be looked up.
"""

from __future__ import annotations

import hashlib

from argon2 import PasswordHasher

_password_hasher = PasswordHasher()


def hash_secret(plain_value: str) -> str:
    """Hash *plain_value* (e.g. a security answer) with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _password_hasher.hash(plain_value)


def hash_token(token: str) -> str:
    """Return the hex-encoded SHA-256 digest of *token*.

    Verification tokens are stored hashed so a database read never yields a
    redeemable claim link.

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
