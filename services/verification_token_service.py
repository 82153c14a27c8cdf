"""
Verification token service: proves control of an email address that the
credential store does not know yet.

issue()  — persist a single-use token valid for 24 hours and email a claim
           link that lands the user on step 2.
redeem() — consume the token exactly once.

If the email cannot be rendered or sent, the persisted token is voided
(expired in place) and the failure propagates, so no redeemable token exists
that the user was never told about.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
from urllib.parse import urlencode

from errors import InvalidOrExpiredTokenError
from infrastructure.email.protocol import EmailProvider
from repositories.verification_token_repository import VerificationTokenRepository
from schemas.models.token import VerificationTokenDoc
from shared.crypto import hash_token
from shared.datetime_utils import utc_now
from shared.generators import generate_secure_token
from shared.logging import get_logger

log = get_logger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=24)
CLAIM_STEP = 2


@dataclass(frozen=True)
class IssuedToken:
    token: str
    link: str
    expires_at: datetime
    message_id: str


class VerificationTokenService:
    def __init__(
        self,
        repository: VerificationTokenRepository,
        email_provider: EmailProvider,
        app_url: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repository
        self._email = email_provider
        self._app_url = app_url.rstrip("/")
        self._ttl = ttl
        self._clock = clock

    def build_link(self, email: str, token: str, step: int = CLAIM_STEP) -> str:
        query = urlencode({"email": email, "token": token, "step": step})
        return f"{self._app_url}/verify?{query}"

    async def issue(self, email: str) -> IssuedToken:
        token = generate_secure_token()
        now = self._clock()
        expires_at = now + self._ttl
        doc = VerificationTokenDoc(
            email=email,
            token=hash_token(token),
            created_at=now,
            expires_at=expires_at,
        )
        row_id = await self._repo.insert(doc)
        link = self.build_link(email, token)

        try:
            message_id = await self._email.send_verification_email(email, link)
        except Exception as e:
            log.warning(
                "verification_token_voided",
                email=email,
                row_id=str(row_id),
                error_type=type(e).__name__,
            )
            await self._repo.void(row_id, self._clock())
            raise

        log.info(
            "verification_token_issued",
            email=email,
            row_id=str(row_id),
            message_id=message_id,
        )
        return IssuedToken(
            token=token, link=link, expires_at=expires_at, message_id=message_id
        )

    async def redeem(self, email: str, token: str) -> VerificationTokenDoc:
        doc = await self._repo.redeem(email, hash_token(token), self._clock())
        if doc is None:
            log.warning("verification_token_rejected", email=email)
            raise InvalidOrExpiredTokenError("Invalid or expired verification token")
        log.info("verification_token_redeemed", email=email)
        return doc
