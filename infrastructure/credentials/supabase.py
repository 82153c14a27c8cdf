"""Supabase Auth (GoTrue) implementation of CredentialStore.

Talks to the GoTrue REST API with the service-role key:

- ``GET  /auth/v1/admin/users``       paginated identity listing
- ``POST /auth/v1/admin/users``       identity creation for claimed emails
- ``POST /auth/v1/recover``           provider-sent password-reset message
- ``PUT  /auth/v1/admin/users/{id}``  credential update

Provider error messages are passed through verbatim in ProviderError.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from config import SupabaseSettings
from errors import ProviderError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_PAGE_SIZE = 1000


class SupabaseCredentialStore:
    def __init__(
        self,
        settings: SupabaseSettings,
        http_client: HttpClient,
        redirect_url: Optional[str] = None,
    ) -> None:
        self._base_url = settings.supabase_url.rstrip("/")
        self._service_key = settings.supabase_service_role_key
        self._http = http_client
        self._redirect_url = redirect_url

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        if not self._base_url or not self._service_key:
            raise ProviderError("Credential store is not configured")
        return f"{self._base_url}/auth/v1{path}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = self._url(path)
        try:
            if method == "GET":
                response = await self._http.get(url, headers=self._headers, **kwargs)
            elif method == "PUT":
                response = await self._http.put(url, headers=self._headers, **kwargs)
            else:
                response = await self._http.post(url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            log.error(
                "credential_store_request_failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            message = _error_message(response)
            log.error(
                "credential_store_error",
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise ProviderError(message)
        return response

    async def find_user_id(self, email: str) -> Optional[str]:
        wanted = email.strip().lower()
        page = 1
        while True:
            response = await self._request(
                "GET",
                "/admin/users",
                params={"page": page, "per_page": _PAGE_SIZE},
            )
            users = response.json().get("users", [])
            for user in users:
                if (user.get("email") or "").lower() == wanted:
                    return user.get("id")
            if len(users) < _PAGE_SIZE:
                return None
            page += 1

    async def create_user(self, email: str) -> str:
        response = await self._request(
            "POST",
            "/admin/users",
            json={"email": email, "email_confirm": True},
        )
        user_id = response.json().get("id")
        if not user_id:
            raise ProviderError("Credential store returned no user id")
        log.info("user_created", user_id=user_id)
        return user_id

    async def send_password_reset(self, email: str) -> None:
        body: dict[str, Any] = {"email": email}
        params = {"redirect_to": self._redirect_url} if self._redirect_url else None
        await self._request("POST", "/recover", json=body, params=params)
        log.info("password_reset_requested", email=email)

    async def update_password(self, email: str, new_password: str) -> None:
        user_id = await self.find_user_id(email)
        if user_id is None:
            raise ProviderError("User not found")
        await self._request(
            "PUT", f"/admin/users/{user_id}", json={"password": new_password}
        )
        log.info("password_updated", user_id=user_id)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Credential store returned {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return response.text or f"Credential store returned {response.status_code}"
