"""CredentialStore protocol — the hosted identity provider behind the wizard."""

from typing import Optional, Protocol


class CredentialStore(Protocol):
    async def find_user_id(self, email: str) -> Optional[str]:
        """Return the identity id registered for *email*, or None."""
        ...

    async def create_user(self, email: str) -> str:
        """Register a confirmed identity for *email* and return its id."""
        ...

    async def send_password_reset(self, email: str) -> None:
        """Ask the provider to send its own password-reset message to *email*."""
        ...

    async def update_password(self, email: str, new_password: str) -> None:
        """Set a new credential for the identity registered for *email*."""
        ...
