"""
OTP channel service: issue a 6-digit code over WhatsApp and compare it.

The issued record is handed back to the caller; the recovery controller keeps
it on its own session, so no code is ever held in shared storage. There is
no expiry window and no attempt counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from errors import OtpMismatchError
from infrastructure.whatsapp.protocol import WhatsAppProvider
from shared.datetime_utils import utc_now
from shared.generators import generate_otp_code
from shared.logging import get_logger

log = get_logger(__name__)

OTP_MESSAGE_TEMPLATE = "Your MTI verification code is: {code}"


@dataclass(frozen=True)
class OtpRecord:
    code: str
    destination: str
    issued_at: datetime


class OtpChannelService:
    def __init__(
        self,
        whatsapp: WhatsAppProvider,
        generator: Callable[[], str] = generate_otp_code,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._whatsapp = whatsapp
        self._generate = generator
        self._clock = clock

    async def issue(self, destination: str) -> OtpRecord:
        code = self._generate()
        await self._whatsapp.send_message(
            destination, OTP_MESSAGE_TEMPLATE.format(code=code)
        )
        log.info("otp_issued", destination=destination)
        return OtpRecord(code=code, destination=destination, issued_at=self._clock())

    @staticmethod
    def verify(code: str, expected: Optional[OtpRecord]) -> None:
        """Raise OtpMismatchError unless *code* equals the expected code exactly."""
        if expected is None or code != expected.code:
            log.warning("otp_mismatch", outstanding=expected is not None)
            raise OtpMismatchError("Invalid OTP. Please try again.", field="otp")
        log.info("otp_verified")
