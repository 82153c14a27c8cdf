"""
Random code and token generators — pure, side-effect-free functions.

All generators use the ``secrets`` module.
"""

from __future__ import annotations

import secrets

OTP_LENGTH = 6


def format_otp(value: int, length: int = OTP_LENGTH) -> str:
    """Render a numeric OTP value as a fixed-width, zero-padded string.

    ``format_otp(483)`` returns ``"000483"``; leading zeros are never dropped.

    Raises:
        ValueError: if *value* is negative or needs more than *length* digits.
    """
    if value < 0 or value >= 10**length:
        raise ValueError(f"OTP value {value} does not fit in {length} digits")
    return str(value).zfill(length)


def generate_otp_code(length: int = OTP_LENGTH) -> str:
    """Generate a numeric OTP, uniform over every *length*-digit string.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of exactly *length* decimal digits, zero-padded.
    """
    return format_otp(secrets.randbelow(10**length), length)


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure URL-safe random token.

    Args:
        length: Number of random bytes before base64 encoding (default 32).
            The resulting string will be longer than *length* characters.

    Returns:
        URL-safe base64-encoded token string.
    """
    return secrets.token_urlsafe(length)


def generate_session_id() -> str:
    """Generate an opaque identifier for a recovery session."""
    return secrets.token_urlsafe(16)
