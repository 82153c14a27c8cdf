"""
Request DTOs for the recovery wizard endpoints.

SubmitEmailRequest             — POST /recovery/sessions/{id}/email
SubmitChannelRequest           — POST /recovery/sessions/{id}/channel
SubmitOtpRequest               — POST /recovery/sessions/{id}/otp
SubmitSecurityQuestionRequest  — POST /recovery/sessions/{id}/security-question
SubmitPasswordRequest          — POST /recovery/sessions/{id}/password

Field constraints are enforced by the step controller, not here, so a
malformed value produces the same validation_error shape as every other
step failure.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SubmitEmailRequest(BaseModel):
    """Request body for step 1."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    captcha_token: Optional[str] = Field(default=None, alias="captchaToken")


class SubmitChannelRequest(BaseModel):
    """Request body for step 2. ``whatsapp`` is the destination phone number."""

    model_config = ConfigDict(populate_by_name=True)

    whatsapp: str


class SubmitOtpRequest(BaseModel):
    """Request body for step 3."""

    model_config = ConfigDict(populate_by_name=True)

    otp: str


class SubmitSecurityQuestionRequest(BaseModel):
    """Request body for step 4.

    ``question_id`` is a catalog id or ``"custom"``; ``custom_question`` is
    required only for the latter.
    """

    model_config = ConfigDict(populate_by_name=True)

    question_id: Optional[str] = Field(default=None, alias="questionId")
    custom_question: Optional[str] = Field(default=None, alias="customQuestion")
    answer: str = ""


class SubmitPasswordRequest(BaseModel):
    """Request body for step 5."""

    model_config = ConfigDict(populate_by_name=True)

    password: str
    confirm_password: str = Field(alias="confirmPassword")
