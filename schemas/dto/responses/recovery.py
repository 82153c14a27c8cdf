"""
Response DTOs for the recovery wizard and security question endpoints.

SessionStateResponse        — POST /recovery/sessions, GET /recovery/sessions/{id}
StepResponse                — every step submit, GET /verify
CatalogQuestionResponse     — GET /security-questions/catalog
CreatedQuestionsResponse    — POST /security-questions
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from services.recovery_controller import STEP_TITLES, RecoveryController, StepResult


class SessionStateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str
    step: int
    step_title: str
    email: Optional[str] = None

    @classmethod
    def from_controller(cls, controller: RecoveryController) -> "SessionStateResponse":
        session = controller.session
        return cls(
            session_id=session.session_id,
            step=int(session.current_step),
            step_title=STEP_TITLES[session.current_step],
            email=session.email,
        )


class StepResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str
    step: int
    step_title: str
    notice: str
    ignored: bool = False
    email: Optional[str] = None

    @classmethod
    def from_result(
        cls, controller: RecoveryController, result: StepResult
    ) -> "StepResponse":
        return cls(
            session_id=controller.session.session_id,
            step=int(result.step),
            step_title=result.step_title,
            notice=result.notice,
            ignored=result.ignored,
            email=controller.session.email,
        )


class CatalogQuestionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    question: str


class CreatedQuestionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: list[CatalogQuestionResponse]
