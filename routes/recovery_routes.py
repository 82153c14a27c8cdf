"""
Recovery wizard endpoints.

POST /recovery/sessions                            — start a wizard (step 1)
GET  /recovery/sessions/{id}                       — current step
DELETE /recovery/sessions/{id}                     — abandon the wizard
POST /recovery/sessions/{id}/email                 — step 1
POST /recovery/sessions/{id}/channel               — step 2
POST /recovery/sessions/{id}/otp                   — step 3
POST /recovery/sessions/{id}/security-question     — step 4
POST /recovery/sessions/{id}/password              — step 5
GET  /verify                                       — claim link, jumps to step 2

Step failures surface through the AppError handler; the session stays on
the step that failed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from dependencies import get_session_store
from schemas.dto.requests.recovery import (
    SubmitChannelRequest,
    SubmitEmailRequest,
    SubmitOtpRequest,
    SubmitPasswordRequest,
    SubmitSecurityQuestionRequest,
)
from schemas.dto.responses.common import ERROR_RESPONSES
from schemas.dto.responses.recovery import SessionStateResponse, StepResponse
from services.session_store import RecoverySessionStore
from shared.ip_utils import get_client_ip

router = APIRouter(tags=["recovery"], responses=ERROR_RESPONSES)


@router.post("/recovery/sessions", status_code=201)
async def create_session(
    store: RecoverySessionStore = Depends(get_session_store),
) -> SessionStateResponse:
    return SessionStateResponse.from_controller(store.create())


@router.get("/recovery/sessions/{session_id}")
async def get_session(
    session_id: str,
    store: RecoverySessionStore = Depends(get_session_store),
) -> SessionStateResponse:
    return SessionStateResponse.from_controller(store.get(session_id))


@router.delete("/recovery/sessions/{session_id}", status_code=204)
async def discard_session(
    session_id: str,
    store: RecoverySessionStore = Depends(get_session_store),
) -> Response:
    store.discard(session_id)
    return Response(status_code=204)


@router.post("/recovery/sessions/{session_id}/email")
async def submit_email(
    session_id: str,
    body: SubmitEmailRequest,
    request: Request,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    controller = store.get(session_id)
    result = await controller.submit_email(
        body.email, body.captcha_token, get_client_ip(request) or None
    )
    return StepResponse.from_result(controller, result)


@router.post("/recovery/sessions/{session_id}/channel")
async def submit_channel(
    session_id: str,
    body: SubmitChannelRequest,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    controller = store.get(session_id)
    result = await controller.submit_destination(body.whatsapp)
    return StepResponse.from_result(controller, result)


@router.post("/recovery/sessions/{session_id}/otp")
async def submit_otp(
    session_id: str,
    body: SubmitOtpRequest,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    controller = store.get(session_id)
    result = await controller.submit_otp(body.otp)
    return StepResponse.from_result(controller, result)


@router.post("/recovery/sessions/{session_id}/security-question")
async def submit_security_question(
    session_id: str,
    body: SubmitSecurityQuestionRequest,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    controller = store.get(session_id)
    result = await controller.submit_security_question(
        body.question_id, body.answer, custom_question=body.custom_question
    )
    return StepResponse.from_result(controller, result)


@router.post("/recovery/sessions/{session_id}/password")
async def submit_password(
    session_id: str,
    body: SubmitPasswordRequest,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    controller = store.get(session_id)
    result = await controller.submit_password(body.password, body.confirm_password)
    return StepResponse.from_result(controller, result)


@router.get("/verify")
async def verify_link(
    email: str = "",
    token: str = "",
    step: int = 0,
    store: RecoverySessionStore = Depends(get_session_store),
) -> StepResponse:
    """Redeem an emailed claim link into a fresh session on step 2."""
    controller = store.create()
    try:
        result = await controller.resume_from_verification(email, token, step)
    except Exception:
        store.discard(controller.session.session_id)
        raise
    return StepResponse.from_result(controller, result)
