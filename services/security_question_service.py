"""
Security question service.

Resolves the question the user picked in step 4 to a catalog row and stores
the answer against it. Catalog ids come from a fixed list shown in the form;
when the catalog table has drifted and a listed id is missing, the question
is re-inserted from the fixed list rather than failing the step.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from errors import CatalogReferenceMissingError, ValidationError
from repositories.security_question_repository import SecurityQuestionRepository
from schemas.models.security_question import SecurityAnswerDoc, SecurityQuestionDoc
from shared.crypto import hash_secret
from shared.datetime_utils import utc_now
from shared.logging import get_logger

log = get_logger(__name__)

CUSTOM_QUESTION_ID = "custom"


@dataclass(frozen=True)
class CatalogQuestion:
    id: str
    question: str


FALLBACK_QUESTIONS: tuple[CatalogQuestion, ...] = (
    CatalogQuestion("1", "What is your mother's maiden name?"),
    CatalogQuestion("2", "What was the name of your first pet?"),
    CatalogQuestion("3", "In which city were you born?"),
    CatalogQuestion("4", "What was your childhood nickname?"),
    CatalogQuestion("5", "What is the name of your favorite childhood teacher?"),
)

FORM_CHOICES: tuple[CatalogQuestion, ...] = FALLBACK_QUESTIONS + (
    CatalogQuestion(CUSTOM_QUESTION_ID, "Custom question"),
)


def fallback_question(question_id: str) -> Optional[CatalogQuestion]:
    return next((q for q in FALLBACK_QUESTIONS if q.id == question_id), None)


@dataclass(frozen=True)
class SavedAnswer:
    question_id: str
    answer_id: str


class SecurityQuestionService:
    def __init__(
        self,
        repository: SecurityQuestionRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repository
        self._clock = clock

    async def resolve_question_id(
        self, question_id: Optional[str], custom_question: Optional[str] = None
    ) -> str:
        if question_id == CUSTOM_QUESTION_ID:
            if not custom_question:
                raise ValidationError(
                    "Please provide a custom question", field="custom_question"
                )
            doc = await self._repo.insert_question(custom_question)
            log.info("custom_question_created", question_id=doc.id)
            return doc.id

        if not question_id:
            raise ValidationError("Invalid question selection", field="question_id")

        existing = await self._repo.find_question(question_id)
        if existing is not None:
            return existing.id

        fallback = fallback_question(question_id)
        if fallback is None:
            log.warning("question_reference_missing", question_id=question_id)
            raise CatalogReferenceMissingError(
                "Invalid question selected", field="question_id"
            )

        doc = await self._repo.insert_question(fallback.question)
        log.warning(
            "catalog_drift_recovered",
            requested_id=question_id,
            question_id=doc.id,
        )
        return doc.id

    async def save_answer(
        self,
        question_id: Optional[str],
        answer: str,
        user_id: Optional[str],
        custom_question: Optional[str] = None,
    ) -> SavedAnswer:
        resolved_id = await self.resolve_question_id(question_id, custom_question)
        answer_id = await self._repo.insert_answer(
            SecurityAnswerDoc(
                question_id=resolved_id,
                answer=hash_secret(answer),
                user_id=user_id,
                created_at=self._clock(),
            )
        )
        log.info("security_answer_saved", question_id=resolved_id, user_id=user_id)
        return SavedAnswer(question_id=resolved_id, answer_id=answer_id)

    async def create_questions(self, texts: Iterable[str]) -> list[SecurityQuestionDoc]:
        docs = await self._repo.insert_questions(texts)
        log.info("security_questions_created", count=len(docs))
        return docs
