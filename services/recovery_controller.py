"""
Recovery step controller — the five-step account recovery wizard.

    1 Email  →  2 Channel  →  3 OTP  →  4 Security question  →  5 Password  →  1

Each RecoveryController owns exactly one RecoverySession. Every submit
operation checks that the session is on its step, validates its input before
any remote call, runs its call chain, and only then advances. An error from
any collaborator propagates with the session left on the same step.

A busy flag guards each submit. A submit that arrives while another is in
flight is ignored (no side effects, ``StepResult.ignored``), not queued.

The only non-linear transition is resume_from_verification(), which redeems
an emailed claim link, registers the claimed email with the credential store
and jumps straight to step 2.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Awaitable, Callable, Optional

from errors import ValidationError
from infrastructure.credentials.protocol import CredentialStore
from services.identity_service import IdentityService
from services.otp_service import OtpChannelService, OtpRecord
from services.security_question_service import SecurityQuestionService
from services.verification_token_service import CLAIM_STEP, VerificationTokenService
from shared.datetime_utils import utc_now
from shared.logging import get_logger, log_with_context
from shared.validators import (
    validate_destination,
    validate_email,
    validate_new_password,
    validate_otp_format,
)


class RecoveryStep(IntEnum):
    EMAIL = 1
    CHANNEL = 2
    OTP = 3
    SECURITY_QUESTION = 4
    PASSWORD = 5


STEP_TITLES = {
    RecoveryStep.EMAIL: "Email Verification",
    RecoveryStep.CHANNEL: "WhatsApp Verification",
    RecoveryStep.OTP: "OTP Verification",
    RecoveryStep.SECURITY_QUESTION: "Security Question",
    RecoveryStep.PASSWORD: "Reset Password",
}


@dataclass
class RecoverySession:
    session_id: str
    current_step: RecoveryStep = RecoveryStep.EMAIL
    email: Optional[str] = None
    user_id: Optional[str] = None
    pending_otp: Optional[OtpRecord] = None
    created_at: datetime = field(default_factory=utc_now)
    last_activity_at: datetime = field(default_factory=utc_now)

    def reset(self) -> None:
        self.current_step = RecoveryStep.EMAIL
        self.email = None
        self.user_id = None
        self.pending_otp = None


@dataclass(frozen=True)
class StepResult:
    step: RecoveryStep
    notice: str
    ignored: bool = False

    @property
    def step_title(self) -> str:
        return STEP_TITLES[self.step]


@dataclass
class RecoveryServices:
    """The collaborators one controller drives, shared across sessions."""

    identity: IdentityService
    tokens: VerificationTokenService
    otp: OtpChannelService
    questions: SecurityQuestionService
    credentials: CredentialStore


class RecoveryController:
    def __init__(
        self,
        session: RecoverySession,
        services: RecoveryServices,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session = session
        self._services = services
        self._clock = clock
        self._busy = False
        self._log = log_with_context(
            get_logger(__name__), session_id=session.session_id
        )

    @property
    def busy(self) -> bool:
        return self._busy

    async def _run(
        self,
        step: RecoveryStep,
        action: Callable[[], Awaitable[StepResult]],
    ) -> StepResult:
        if self._busy:
            self._log.info("submit_ignored", step=int(self.session.current_step))
            return StepResult(
                self.session.current_step,
                "A request is already in progress.",
                ignored=True,
            )
        if self.session.current_step != step:
            raise ValidationError(
                f"Session is on step {int(self.session.current_step)}, "
                f"not step {int(step)}",
                field="step",
            )

        self._busy = True
        self.session.last_activity_at = self._clock()
        try:
            result = await action()
        except Exception as e:
            self._log.warning(
                "step_failed",
                step=int(step),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            self._busy = False

        self._log.info(
            "step_completed", step=int(step), next_step=int(result.step)
        )
        return result

    def _advance(self, step: RecoveryStep, notice: str) -> StepResult:
        self.session.current_step = step
        return StepResult(step, notice)

    # ── Step 1 ───────────────────────────────────────────────────────────────

    async def submit_email(
        self,
        email: str,
        captcha_token: Optional[str] = None,
        remote_ip: Optional[str] = None,
    ) -> StepResult:
        async def action() -> StepResult:
            normalized = (email or "").strip()
            if not validate_email(normalized):
                raise ValidationError(
                    "Please enter a valid email address", field="email"
                )

            check = await self._services.identity.check_exists(
                normalized, captcha_token, remote_ip
            )
            if not check.exists:
                await self._services.tokens.issue(normalized)
                return StepResult(
                    RecoveryStep.EMAIL,
                    "Please check your email to verify your address and "
                    "continue with the recovery process.",
                )

            await self._services.credentials.send_password_reset(normalized)
            self.session.email = normalized
            self.session.user_id = check.user_id
            return self._advance(
                RecoveryStep.CHANNEL,
                "Please check your email for the password reset link.",
            )

        return await self._run(RecoveryStep.EMAIL, action)

    async def resume_from_verification(
        self, email: str, token: str, step: int
    ) -> StepResult:
        """Enter the wizard from a claim link; the token is always redeemed."""

        async def action() -> StepResult:
            if not email or not token or step != CLAIM_STEP:
                raise ValidationError("Invalid verification link")
            if self.session.email is not None and self.session.email != email:
                raise ValidationError(
                    "Session already belongs to another email address",
                    field="email",
                )

            await self._services.tokens.redeem(email, token)
            credentials = self._services.credentials
            user_id = await credentials.find_user_id(email)
            if user_id is None:
                user_id = await credentials.create_user(email)
            self.session.email = email
            self.session.user_id = user_id
            return self._advance(
                RecoveryStep.CHANNEL,
                "Your email has been verified. You can now continue with the "
                "account recovery process.",
            )

        return await self._run(RecoveryStep.EMAIL, action)

    # ── Step 2 ───────────────────────────────────────────────────────────────

    async def submit_destination(self, whatsapp: str) -> StepResult:
        async def action() -> StepResult:
            if not validate_destination(whatsapp):
                raise ValidationError(
                    "Please enter a valid WhatsApp number", field="whatsapp"
                )
            # Replaces any code still outstanding for this session
            self.session.pending_otp = await self._services.otp.issue(whatsapp)
            return self._advance(
                RecoveryStep.OTP, "Please check your WhatsApp for the OTP."
            )

        return await self._run(RecoveryStep.CHANNEL, action)

    # ── Step 3 ───────────────────────────────────────────────────────────────

    async def submit_otp(self, otp: str) -> StepResult:
        async def action() -> StepResult:
            if not validate_otp_format(otp):
                raise ValidationError("Please enter a valid 6-digit OTP", field="otp")

            # Consumed on first compare, whether or not it matches
            expected, self.session.pending_otp = self.session.pending_otp, None
            self._services.otp.verify(otp, expected)
            return self._advance(
                RecoveryStep.SECURITY_QUESTION, "OTP verification successful."
            )

        return await self._run(RecoveryStep.OTP, action)

    # ── Step 4 ───────────────────────────────────────────────────────────────

    async def submit_security_question(
        self,
        question_id: Optional[str],
        answer: str,
        custom_question: Optional[str] = None,
    ) -> StepResult:
        async def action() -> StepResult:
            if not answer:
                raise ValidationError("Please provide an answer", field="answer")

            await self._services.questions.save_answer(
                question_id,
                answer,
                self.session.user_id,
                custom_question=custom_question,
            )
            return self._advance(
                RecoveryStep.PASSWORD,
                "Your security question has been saved successfully.",
            )

        return await self._run(RecoveryStep.SECURITY_QUESTION, action)

    # ── Step 5 ───────────────────────────────────────────────────────────────

    async def submit_password(
        self, password: str, confirm_password: str
    ) -> StepResult:
        async def action() -> StepResult:
            if not validate_new_password(password):
                raise ValidationError(
                    "Password must be at least 8 characters", field="password"
                )
            if password != confirm_password:
                raise ValidationError(
                    "Passwords don't match", field="confirm_password"
                )

            await self._services.credentials.update_password(
                self.session.email, password
            )
            self.session.reset()
            return StepResult(
                RecoveryStep.EMAIL,
                "Your password has been updated successfully.",
            )

        return await self._run(RecoveryStep.PASSWORD, action)
