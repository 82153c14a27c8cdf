"""
Repository for the `verification_tokens` collection.

Redemption is a single find_one_and_update guarded on `used_at` and
`expires_at`, so two concurrent redemptions of the same token cannot both
succeed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from errors import ProviderError
from schemas.models.token import VerificationTokenDoc
from shared.logging import get_logger

log = get_logger(__name__)

COLLECTION = "verification_tokens"


class VerificationTokenRepository:
    def __init__(self, db) -> None:
        self._col = db[COLLECTION]

    async def insert(self, doc: VerificationTokenDoc) -> ObjectId:
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except PyMongoError as e:
            log.error("token_insert_failed", error=str(e), error_type=type(e).__name__)
            raise ProviderError(str(e)) from e
        return result.inserted_id

    async def redeem(
        self, email: str, token_digest: str, now: datetime
    ) -> Optional[VerificationTokenDoc]:
        """Mark the matching redeemable row as used and return it, else None."""
        try:
            raw = await self._col.find_one_and_update(
                {
                    "email": email,
                    "token": token_digest,
                    "used_at": None,
                    "expires_at": {"$gt": now},
                },
                {"$set": {"used_at": now}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            log.error("token_redeem_failed", error=str(e), error_type=type(e).__name__)
            raise ProviderError(str(e)) from e
        return VerificationTokenDoc.from_mongo(raw)

    async def void(self, token_id: ObjectId, now: datetime) -> None:
        """Expire a token immediately without deleting its audit row."""
        try:
            await self._col.update_one(
                {"_id": token_id, "used_at": None},
                {"$set": {"expires_at": now}},
            )
        except PyMongoError as e:
            log.error("token_void_failed", row_id=str(token_id), error=str(e))
            raise ProviderError(str(e)) from e

