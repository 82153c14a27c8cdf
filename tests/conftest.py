"""
Shared fakes for the recovery service tests.

Every collaborator behind the step controller has an in-memory stand-in
here, so controller and route tests never touch MongoDB or the network.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from bson import ObjectId

from errors import ProviderError
from schemas.models.security_question import SecurityAnswerDoc, SecurityQuestionDoc
from schemas.models.token import VerificationTokenDoc
from services.identity_service import IdentityService
from services.otp_service import OtpChannelService
from services.recovery_controller import (
    RecoveryController,
    RecoveryServices,
    RecoverySession,
)
from services.security_question_service import SecurityQuestionService
from services.session_store import RecoverySessionStore
from services.verification_token_service import VerificationTokenService


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 10, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTokenRepository:
    def __init__(self) -> None:
        self.rows: dict[ObjectId, VerificationTokenDoc] = {}

    async def insert(self, doc: VerificationTokenDoc) -> ObjectId:
        row_id = ObjectId()
        self.rows[row_id] = doc.model_copy(update={"id": row_id})
        return row_id

    async def redeem(self, email, token_digest, now):
        for doc in self.rows.values():
            if (
                doc.email == email
                and doc.token == token_digest
                and doc.is_redeemable(now)
            ):
                doc.used_at = now
                return doc
        return None

    async def void(self, token_id, now) -> None:
        doc = self.rows[token_id]
        if doc.used_at is None:
            doc.expires_at = now

    def for_email(self, email: str) -> list[VerificationTokenDoc]:
        return [doc for doc in self.rows.values() if doc.email == email]


class FakeQuestionRepository:
    def __init__(self, catalog: Optional[dict[str, str]] = None) -> None:
        self.questions: dict[str, str] = dict(catalog or {})
        self.answers: list[SecurityAnswerDoc] = []
        self.fail_answer_insert = False
        self._next_id = 100

    async def find_question(self, question_id):
        text = self.questions.get(question_id)
        if text is None:
            return None
        return SecurityQuestionDoc(id=question_id, question=text)

    async def insert_questions(self, texts):
        docs = []
        for text in texts:
            self._next_id += 1
            question_id = str(self._next_id)
            self.questions[question_id] = text
            docs.append(SecurityQuestionDoc(id=question_id, question=text))
        return docs

    async def insert_question(self, text):
        (doc,) = await self.insert_questions([text])
        return doc

    async def insert_answer(self, doc: SecurityAnswerDoc) -> str:
        if self.fail_answer_insert:
            raise ProviderError("insert into user_security_answers failed")
        self.answers.append(doc)
        return f"answer-{len(self.answers)}"


class FakeCredentialStore:
    def __init__(self, users: Optional[dict[str, str]] = None) -> None:
        self.users = dict(users or {})
        self.reset_requests: list[str] = []
        self.password_updates: list[tuple[Optional[str], str]] = []
        self.update_error: Optional[str] = None

    async def find_user_id(self, email):
        return self.users.get(email)

    async def create_user(self, email):
        user_id = f"user-{len(self.users) + 1}"
        self.users[email] = user_id
        return user_id

    async def send_password_reset(self, email):
        self.reset_requests.append(email)

    async def update_password(self, email, new_password):
        if self.update_error:
            raise ProviderError(self.update_error)
        if email not in self.users:
            raise ProviderError("User not found")
        self.password_updates.append((email, new_password))


class FakeCaptcha:
    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.tokens: list[str] = []

    async def verify(self, token, remote_ip=None):
        self.tokens.append(token)
        return self.accept


class FakeEmailProvider:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.error: Optional[str] = None

    async def send_verification_email(self, email, verification_link):
        if self.error:
            raise ProviderError(self.error)
        self.sent.append((email, verification_link))
        return f"msg-{len(self.sent)}"


class FakeWhatsApp:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.error: Optional[str] = None

    async def send_message(self, number, message):
        if self.error:
            raise ProviderError(self.error)
        self.messages.append((number, message))
        return True


class OtpSequence:
    """Deterministic OTP generator returning the queued codes in order."""

    def __init__(self, *codes: str) -> None:
        self.codes = list(codes) or ["123456"]

    def __call__(self) -> str:
        if len(self.codes) > 1:
            return self.codes.pop(0)
        return self.codes[0]


class Collaborators:
    """Bundle of fakes plus the RecoveryServices built on top of them."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.token_repo = FakeTokenRepository()
        self.question_repo = FakeQuestionRepository({"1": "What is your mother's maiden name?"})
        self.credentials = FakeCredentialStore({"known@example.com": "user-1"})
        self.captcha = FakeCaptcha()
        self.email = FakeEmailProvider()
        self.whatsapp = FakeWhatsApp()
        self.otp_codes = OtpSequence("042017")

        self.services = RecoveryServices(
            identity=IdentityService(self.captcha, self.credentials),
            tokens=VerificationTokenService(
                self.token_repo,
                self.email,
                app_url="https://recovery.example.com",
                clock=clock,
            ),
            otp=OtpChannelService(self.whatsapp, generator=self.otp_codes, clock=clock),
            questions=SecurityQuestionService(self.question_repo, clock=clock),
            credentials=self.credentials,
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fakes(clock) -> Collaborators:
    return Collaborators(clock)


@pytest.fixture
def controller(fakes) -> RecoveryController:
    return RecoveryController(
        RecoverySession(session_id="sess-1"), fakes.services, clock=fakes.clock
    )


@pytest.fixture
def session_store(fakes) -> RecoverySessionStore:
    return RecoverySessionStore(fakes.services, ttl_seconds=1800, clock=fakes.clock)
