"""EmailProvider protocol — services depend on this, not the concrete implementation."""

from typing import Protocol


class EmailProvider(Protocol):
    async def send_verification_email(self, email: str, verification_link: str) -> str:
        """Send the claim link to *email* and return the provider's message id.

        Raises ProviderError when the message could not be handed over.
        """
        ...
