"""
Verification token document model.

Maps to the `verification_tokens` MongoDB collection.

`token` stores SHA-256(claim token) — the plain token only ever travels in the
emailed claim link. used_at is None until the token is redeemed; rows are
never deleted so the collection doubles as an audit trail.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel
from shared.datetime_utils import as_utc


class VerificationTokenDoc(MongoBaseModel):
    """Document model for the `verification_tokens` collection."""

    email: str
    token: str
    created_at: datetime
    expires_at: datetime
    used_at: Optional[datetime] = None

    def is_redeemable(self, now: datetime) -> bool:
        return self.used_at is None and as_utc(now) < as_utc(self.expires_at)
