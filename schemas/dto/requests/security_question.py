"""
Request DTO for the security question management endpoint.

The operation is a closed tag. Today only ``create`` exists; adding an
operation means adding a member to SecurityQuestionOperation and a branch in
the route, never dispatching on a free-form method name.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SecurityQuestionOperation(str, Enum):
    CREATE = "create"


class QuestionInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)


class ManageSecurityQuestionsRequest(BaseModel):
    """Request body for POST /security-questions."""

    model_config = ConfigDict(populate_by_name=True)

    operation: SecurityQuestionOperation
    questions: list[QuestionInput] = Field(min_length=1)
