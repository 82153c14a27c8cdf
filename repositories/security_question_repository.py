"""
Repository for the security question catalog and user answers.

Collections:
- `security_questions`     — shared catalog, string `_id`
- `user_security_answers`  — one row per saved answer

Catalog insert and answer insert are separate writes; a failed answer insert
leaves the freshly inserted catalog row in place.
"""

from __future__ import annotations

from typing import Iterable, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from errors import ProviderError
from schemas.models.security_question import SecurityAnswerDoc, SecurityQuestionDoc
from shared.logging import get_logger

log = get_logger(__name__)

QUESTIONS_COLLECTION = "security_questions"
ANSWERS_COLLECTION = "user_security_answers"


class SecurityQuestionRepository:
    def __init__(self, db) -> None:
        self._questions = db[QUESTIONS_COLLECTION]
        self._answers = db[ANSWERS_COLLECTION]

    async def find_question(self, question_id: str) -> Optional[SecurityQuestionDoc]:
        try:
            raw = await self._questions.find_one({"_id": question_id})
        except PyMongoError as e:
            log.error("question_lookup_failed", question_id=question_id, error=str(e))
            raise ProviderError(str(e)) from e
        return SecurityQuestionDoc.from_mongo(raw)

    async def insert_questions(self, texts: Iterable[str]) -> list[SecurityQuestionDoc]:
        docs = [
            SecurityQuestionDoc(id=str(ObjectId()), question=text) for text in texts
        ]
        if not docs:
            return []
        try:
            await self._questions.insert_many([doc.to_mongo() for doc in docs])
        except PyMongoError as e:
            log.error("question_insert_failed", count=len(docs), error=str(e))
            raise ProviderError(str(e)) from e
        return docs

    async def insert_question(self, text: str) -> SecurityQuestionDoc:
        (doc,) = await self.insert_questions([text])
        return doc

    async def seed_catalog(self, catalog: Iterable[tuple[str, str]]) -> None:
        """Upsert fixed-id catalog rows without overwriting existing text."""
        try:
            for question_id, text in catalog:
                await self._questions.update_one(
                    {"_id": question_id},
                    {"$setOnInsert": {"question": text}},
                    upsert=True,
                )
        except PyMongoError as e:
            log.error("question_seed_failed", error=str(e))
            raise ProviderError(str(e)) from e

    async def insert_answer(self, doc: SecurityAnswerDoc) -> str:
        try:
            result = await self._answers.insert_one(doc.to_mongo())
        except PyMongoError as e:
            log.error(
                "answer_insert_failed", question_id=doc.question_id, error=str(e)
            )
            raise ProviderError(str(e)) from e
        return str(result.inserted_id)
