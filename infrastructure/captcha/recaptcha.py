"""Google reCAPTCHA implementation of CaptchaProvider.

The identity-exists check refuses to answer unless the browser's reCAPTCHA
response verifies against the server-side secret. Any transport or API
failure counts as a rejected challenge.
"""

from typing import Optional

from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaProvider:
    def __init__(self, secret: str, http_client: HttpClient) -> None:
        self._secret = secret
        self._http = http_client

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        if not self._secret:
            log.warning("recaptcha_secret_not_configured")
            return False
        if not token:
            log.warning("recaptcha_token_missing")
            return False

        form = {"secret": self._secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            response = await self._http.post(_RECAPTCHA_VERIFY_URL, data=form)
            if response.status_code == 200:
                data = response.json()
                success = data.get("success", False)
                if not success:
                    log.warning(
                        "recaptcha_verification_failed",
                        error_codes=data.get("error-codes", []),
                    )
                return bool(success)
            log.error(
                "recaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return False
        except Exception as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            return False
