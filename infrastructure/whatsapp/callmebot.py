"""CallMeBot implementation of WhatsAppProvider.

The phone number is reduced to its digits before it is sent. When the
CallMeBot endpoint cannot be reached at all, delivery fails with
ProviderError unless ``simulate_on_unreachable`` is enabled, in which case
the send is logged and reported as successful. AppSettings refuses that
switch in production.
"""

import httpx

from errors import ProviderError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger
from shared.validators import normalize_phone_number

log = get_logger(__name__)

_CALLMEBOT_API_URL = "https://api.callmebot.com/whatsapp.php"


class CallMeBotWhatsAppProvider:
    def __init__(
        self,
        api_key: str,
        http_client: HttpClient,
        simulate_on_unreachable: bool = False,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._simulate_on_unreachable = simulate_on_unreachable

    async def send_message(self, number: str, message: str) -> bool:
        phone = normalize_phone_number(number)
        if not self._api_key:
            log.error("whatsapp_send_failed", reason="api_key_not_configured")
            raise ProviderError("WhatsApp delivery is not configured")

        params = {"phone": phone, "text": message, "apikey": self._api_key}
        try:
            response = await self._http.get(_CALLMEBOT_API_URL, params=params)
        except httpx.TransportError as e:
            if self._simulate_on_unreachable:
                log.warning(
                    "whatsapp_delivery_simulated",
                    phone=phone,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return True
            log.error(
                "whatsapp_provider_unreachable",
                phone=phone,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderError(
                f"Failed to send WhatsApp message: {str(e) or type(e).__name__}"
            ) from e

        if response.status_code >= 400:
            log.error(
                "whatsapp_send_failed",
                phone=phone,
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise ProviderError(f"Failed to send WhatsApp message: {response.text}")

        log.info("whatsapp_message_sent", phone=phone)
        return True
