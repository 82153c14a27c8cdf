"""
Security question catalog endpoints.

GET  /security-questions/catalog — choices offered in step 4
POST /security-questions         — tagged management operation (create)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_security_question_service
from errors import ValidationError
from schemas.dto.requests.security_question import (
    ManageSecurityQuestionsRequest,
    SecurityQuestionOperation,
)
from schemas.dto.responses.common import ERROR_RESPONSES
from schemas.dto.responses.recovery import (
    CatalogQuestionResponse,
    CreatedQuestionsResponse,
)
from services.security_question_service import FORM_CHOICES, SecurityQuestionService

router = APIRouter(tags=["security-questions"], responses=ERROR_RESPONSES)


@router.get("/security-questions/catalog")
async def list_catalog() -> list[CatalogQuestionResponse]:
    return [CatalogQuestionResponse(id=q.id, question=q.question) for q in FORM_CHOICES]


@router.post("/security-questions")
async def manage_security_questions(
    body: ManageSecurityQuestionsRequest,
    service: SecurityQuestionService = Depends(get_security_question_service),
) -> CreatedQuestionsResponse:
    if body.operation is SecurityQuestionOperation.CREATE:
        docs = await service.create_questions(q.question for q in body.questions)
        return CreatedQuestionsResponse(
            data=[CatalogQuestionResponse(id=d.id, question=d.question) for d in docs]
        )
    raise ValidationError("Invalid operation", field="operation")
