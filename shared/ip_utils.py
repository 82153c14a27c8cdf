"""
Client IP resolution for FastAPI requests.

The address is forwarded to reCAPTCHA as ``remoteip`` when step 1 is
submitted, so proxy headers are honoured ahead of the socket peer.
"""

from __future__ import annotations

from fastapi import Request

_PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(request: Request) -> str:
    """Extract the real client IP from a FastAPI ``Request``.

    Proxy headers are checked in order (Cloudflare, Akamai, the standard
    ``X-Forwarded-For`` list, nginx) before falling back to the direct
    connection address.

    Returns:
        The resolved client IP string, or ``""`` if none can be found.
    """
    for header in _PROXY_HEADERS:
        ip_value: str | None = request.headers.get(header)
        if ip_value:
            client_ip = ip_value.split(",")[0].strip()
            if client_ip:
                return client_ip

    return request.client.host if request.client else ""
