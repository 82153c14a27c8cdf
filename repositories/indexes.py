"""Index creation and catalog seeding, run once from the app lifespan."""

from __future__ import annotations

from typing import Iterable

from pymongo import ASCENDING

from repositories.security_question_repository import (
    ANSWERS_COLLECTION,
    SecurityQuestionRepository,
)
from repositories.verification_token_repository import COLLECTION as TOKENS_COLLECTION
from shared.logging import get_logger

log = get_logger(__name__)


async def ensure_indexes(
    db, seed_questions: Iterable[tuple[str, str]] = ()
) -> None:
    """Create indexes and upsert *seed_questions* as (id, text) catalog rows."""
    tokens = db[TOKENS_COLLECTION]
    await tokens.create_index([("token", ASCENDING)], unique=True)
    await tokens.create_index([("email", ASCENDING), ("token", ASCENDING)])

    answers = db[ANSWERS_COLLECTION]
    await answers.create_index([("user_id", ASCENDING)])

    seed = list(seed_questions)
    if seed:
        await SecurityQuestionRepository(db).seed_catalog(seed)

    log.info("indexes_ensured", seeded_questions=len(seed))
