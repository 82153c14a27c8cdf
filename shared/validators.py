"""
Input validators for the recovery steps — framework-agnostic, pure functions.

Each validator returns a bool; the step controller turns a False into a
ValidationError before any remote call is made.
"""

from __future__ import annotations

import re

import validators as _validators

MIN_DESTINATION_LENGTH = 10
MIN_PASSWORD_LENGTH = 8
OTP_LENGTH = 6


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address."""
    return bool(email) and bool(_validators.email(email))


def validate_destination(number: str) -> bool:
    """Return True if *number* is long enough to be a WhatsApp number."""
    return len(number or "") >= MIN_DESTINATION_LENGTH


def validate_otp_format(code: str) -> bool:
    """Return True if *code* has exactly six characters.

    Only the length is checked here; digits are compared as-is by the OTP
    service so a non-numeric code simply fails to match.
    """
    return len(code or "") == OTP_LENGTH


def validate_new_password(password: str) -> bool:
    """Return True if *password* meets the minimum length."""
    return len(password or "") >= MIN_PASSWORD_LENGTH


def normalize_phone_number(number: str) -> str:
    """Strip every non-digit character from a phone number."""
    return re.sub(r"\D", "", number or "")
