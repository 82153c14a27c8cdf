"""CaptchaProvider protocol — the bot-verification challenge behind step 1."""

from typing import Optional, Protocol


class CaptchaProvider(Protocol):
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """Return True only when the provider positively accepts *token*."""
        ...
