"""WhatsAppProvider protocol — the out-of-band channel for OTP delivery."""

from typing import Protocol


class WhatsAppProvider(Protocol):
    async def send_message(self, number: str, message: str) -> bool:
        """Deliver *message* to *number*; True on success, ProviderError otherwise."""
        ...
