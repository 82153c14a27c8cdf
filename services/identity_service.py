"""
Identity-exists check for step 1.

The captcha challenge is verified before the credential store is consulted,
so the endpoint cannot be used to enumerate accounts without a browser
challenge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from errors import ChallengeFailedError
from infrastructure.captcha.protocol import CaptchaProvider
from infrastructure.credentials.protocol import CredentialStore
from shared.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class IdentityCheck:
    exists: bool
    user_id: Optional[str] = None


class IdentityService:
    def __init__(
        self,
        captcha: CaptchaProvider,
        credentials: CredentialStore,
        captcha_required: bool = True,
    ) -> None:
        self._captcha = captcha
        self._credentials = credentials
        self._captcha_required = captcha_required

    async def check_exists(
        self, email: str, captcha_token: Optional[str], remote_ip: Optional[str] = None
    ) -> IdentityCheck:
        if self._captcha_required:
            if not await self._captcha.verify(captcha_token or "", remote_ip):
                log.warning("identity_check_rejected", reason="invalid_captcha")
                raise ChallengeFailedError("Invalid captcha", field="captcha_token")

        user_id = await self._credentials.find_user_id(email)
        log.info("identity_checked", exists=user_id is not None)
        return IdentityCheck(exists=user_id is not None, user_id=user_id)
