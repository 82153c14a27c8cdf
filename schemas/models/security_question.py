"""
Security question catalog and answer document models.

SecurityQuestionDoc      — `security_questions` collection (string `_id`)
SecurityAnswerDoc        — `user_security_answers` collection

An answer row must reference a catalog row that already exists; custom
questions are inserted into the catalog first and then referenced.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.models.base import MongoBaseModel

ANSWER_STATUS_ANSWERED = "answered"


class SecurityQuestionDoc(MongoBaseModel):
    """Document model for the `security_questions` collection."""

    id: Optional[str] = Field(default=None, alias="_id")
    question: str


class SecurityAnswerDoc(MongoBaseModel):
    """Document model for the `user_security_answers` collection.

    `answer` holds an argon2 hash of the user's answer.
    """

    question_id: str
    answer: str
    user_id: Optional[str] = None
    status: str = ANSWER_STATUS_ANSWERED
    created_at: Optional[datetime] = None
