"""
Response shapes shared by every router.

ErrorResponse is what AppError.to_dict() produces; routers list it under
``responses=`` so the OpenAPI schema documents step failures.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Body of GET /health: overall status plus one entry per check."""

    status: str
    checks: dict[str, str]


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Step input rejected"},
    404: {"model": ErrorResponse, "description": "Unknown recovery session"},
    502: {"model": ErrorResponse, "description": "Provider failure"},
}
