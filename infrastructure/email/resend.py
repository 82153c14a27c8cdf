"""Resend implementation of EmailProvider.

Renders the verification email with Jinja2 and posts it to the Resend API.
Unlike a fire-and-forget notification, a failed send raises ProviderError so
the verification token service can void the token it just persisted.
"""

import os

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from config import EmailSettings
from errors import ProviderError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class ResendEmailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self, to_email: str, subject: str, html_body: str, text_body: str
    ) -> str:
        if not self._settings.resend_api_key:
            log.error("resend_send_failed", reason="api_key_not_configured")
            raise ProviderError("Email delivery is not configured")

        payload = {
            "from": f"{self._settings.resend_from_name} <{self._settings.resend_from_email}>",
            "to": [to_email],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }
        headers = {
            "Authorization": f"Bearer {self._settings.resend_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(
                _RESEND_API_URL, json=payload, headers=headers
            )
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderError(str(e) or type(e).__name__) from e

        if response.status_code in (200, 201, 202):
            message_id = response.json().get("id", "")
            log.info(
                "email_sent_success",
                to_email=to_email,
                subject=subject,
                message_id=message_id,
            )
            return message_id

        log.error(
            "email_sent_failed",
            to_email=to_email,
            subject=subject,
            status_code=response.status_code,
            response=response.text[:200],
        )
        raise ProviderError(_provider_message(response))

    async def send_verification_email(self, email: str, verification_link: str) -> str:
        subject = "Verify Your Email - MTI Account Recovery"
        try:
            template = self._jinja.get_template("verification.html")
            html_body = template.render(verification_link=verification_link)
        except TemplateError as e:
            log.error(
                "email_render_failed",
                template="verification.html",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderError(f"Could not render verification email: {e}") from e
        text_body = (
            "Email Verification - MTI Account Recovery\n\n"
            "Open the link below to verify your email address and continue "
            "with the account recovery process:\n\n"
            f"{verification_link}\n\n"
            "If you didn't request this verification, please ignore this email.\n\n"
            "PT Merdeka Tsingshan Indonesia Team"
        )
        return await self._send(email, subject, html_body, text_body)


def _provider_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Email provider returned {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or f"Email provider returned {response.status_code}"
