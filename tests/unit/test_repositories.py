"""Unit tests for the MongoDB repositories (collections mocked with AsyncMock)."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from errors import ProviderError
from repositories.indexes import ensure_indexes
from repositories.security_question_repository import (
    ANSWERS_COLLECTION,
    QUESTIONS_COLLECTION,
    SecurityQuestionRepository,
)
from repositories.verification_token_repository import (
    COLLECTION,
    VerificationTokenRepository,
)
from schemas.models.security_question import SecurityAnswerDoc
from schemas.models.token import VerificationTokenDoc

NOW = datetime(2024, 10, 1, 8, 0, tzinfo=timezone.utc)


def _db(*names: str) -> tuple[MagicMock, dict[str, AsyncMock]]:
    cols = {name: AsyncMock() for name in names}
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: cols[name]
    return db, cols


# ── VerificationTokenRepository ───────────────────────────────────────────────


class TestVerificationTokenRepository:
    async def test_insert_returns_id(self):
        db, cols = _db(COLLECTION)
        oid = ObjectId()
        cols[COLLECTION].insert_one.return_value = MagicMock(inserted_id=oid)
        doc = VerificationTokenDoc(
            email="a@b.io",
            token="f" * 64,
            created_at=NOW,
            expires_at=NOW + timedelta(hours=24),
        )

        assert await VerificationTokenRepository(db).insert(doc) == oid
        inserted = cols[COLLECTION].insert_one.call_args.args[0]
        assert "_id" not in inserted
        assert inserted["used_at"] is None

    async def test_redeem_filters_on_unused_and_unexpired(self):
        db, cols = _db(COLLECTION)
        cols[COLLECTION].find_one_and_update.return_value = {
            "_id": ObjectId(),
            "email": "a@b.io",
            "token": "f" * 64,
            "created_at": NOW,
            "expires_at": NOW + timedelta(hours=24),
            "used_at": NOW,
        }

        doc = await VerificationTokenRepository(db).redeem("a@b.io", "f" * 64, NOW)

        assert doc.used_at == NOW
        call = cols[COLLECTION].find_one_and_update.call_args
        query, update = call.args
        assert query == {
            "email": "a@b.io",
            "token": "f" * 64,
            "used_at": None,
            "expires_at": {"$gt": NOW},
        }
        assert update == {"$set": {"used_at": NOW}}
        assert call.kwargs["return_document"] is ReturnDocument.AFTER

    async def test_redeem_no_match(self):
        db, cols = _db(COLLECTION)
        cols[COLLECTION].find_one_and_update.return_value = None
        assert await VerificationTokenRepository(db).redeem("a@b.io", "x", NOW) is None

    async def test_void_expires_in_place(self):
        db, cols = _db(COLLECTION)
        oid = ObjectId()
        await VerificationTokenRepository(db).void(oid, NOW)
        cols[COLLECTION].update_one.assert_awaited_once_with(
            {"_id": oid, "used_at": None}, {"$set": {"expires_at": NOW}}
        )
        cols[COLLECTION].delete_one.assert_not_called()

    async def test_driver_error_becomes_provider_error(self):
        db, cols = _db(COLLECTION)
        cols[COLLECTION].find_one_and_update.side_effect = PyMongoError("down")
        with pytest.raises(ProviderError, match="down"):
            await VerificationTokenRepository(db).redeem("a@b.io", "x", NOW)


# ── SecurityQuestionRepository ────────────────────────────────────────────────


class TestSecurityQuestionRepository:
    async def test_find_question(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        cols[QUESTIONS_COLLECTION].find_one.return_value = {
            "_id": "1",
            "question": "What is your mother's maiden name?",
        }
        doc = await SecurityQuestionRepository(db).find_question("1")
        assert doc.id == "1"
        cols[QUESTIONS_COLLECTION].find_one.assert_awaited_once_with({"_id": "1"})

    async def test_find_question_missing(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        cols[QUESTIONS_COLLECTION].find_one.return_value = None
        assert await SecurityQuestionRepository(db).find_question("9") is None

    async def test_insert_questions_assigns_string_ids(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        docs = await SecurityQuestionRepository(db).insert_questions(
            ["First car?", "First school?"]
        )
        assert [d.question for d in docs] == ["First car?", "First school?"]
        assert all(isinstance(d.id, str) and ObjectId.is_valid(d.id) for d in docs)
        rows = cols[QUESTIONS_COLLECTION].insert_many.call_args.args[0]
        assert [r["_id"] for r in rows] == [d.id for d in docs]

    async def test_insert_questions_empty(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        assert await SecurityQuestionRepository(db).insert_questions([]) == []
        cols[QUESTIONS_COLLECTION].insert_many.assert_not_called()

    async def test_seed_catalog_never_overwrites(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        await SecurityQuestionRepository(db).seed_catalog([("1", "Q1"), ("2", "Q2")])
        calls = cols[QUESTIONS_COLLECTION].update_one.call_args_list
        assert len(calls) == 2
        assert calls[0].args == ({"_id": "1"}, {"$setOnInsert": {"question": "Q1"}})
        assert calls[0].kwargs == {"upsert": True}

    async def test_insert_answer(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        oid = ObjectId()
        cols[ANSWERS_COLLECTION].insert_one.return_value = MagicMock(inserted_id=oid)
        answer_id = await SecurityQuestionRepository(db).insert_answer(
            SecurityAnswerDoc(question_id="1", answer="hash", created_at=NOW)
        )
        assert answer_id == str(oid)

    async def test_answer_insert_failure(self):
        db, cols = _db(QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        cols[ANSWERS_COLLECTION].insert_one.side_effect = PyMongoError("write failed")
        with pytest.raises(ProviderError, match="write failed"):
            await SecurityQuestionRepository(db).insert_answer(
                SecurityAnswerDoc(question_id="1", answer="hash")
            )


# ── ensure_indexes ────────────────────────────────────────────────────────────


class TestEnsureIndexes:
    async def test_creates_indexes_and_seeds(self):
        db, cols = _db(COLLECTION, QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        await ensure_indexes(
            db, seed_questions=[("1", "First pet?"), ("2", "Born where?")]
        )

        token_indexes = cols[COLLECTION].create_index.call_args_list
        assert token_indexes[0].kwargs == {"unique": True}
        cols[ANSWERS_COLLECTION].create_index.assert_awaited_once()
        assert cols[QUESTIONS_COLLECTION].update_one.await_count == 2
        first = cols[QUESTIONS_COLLECTION].update_one.call_args_list[0]
        assert first.args == ({"_id": "1"}, {"$setOnInsert": {"question": "First pet?"}})

    async def test_no_seed_by_default(self):
        db, cols = _db(COLLECTION, QUESTIONS_COLLECTION, ANSWERS_COLLECTION)
        await ensure_indexes(db)
        cols[QUESTIONS_COLLECTION].update_one.assert_not_called()
