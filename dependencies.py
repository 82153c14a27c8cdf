"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. The objects themselves are built once in the
app lifespan and stored on app.state.
"""

from __future__ import annotations

from fastapi import Request

from config import AppSettings
from services.security_question_service import SecurityQuestionService
from services.session_store import RecoverySessionStore


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_session_store(request: Request) -> RecoverySessionStore:
    """Return the process-wide recovery session registry."""
    return request.app.state.session_store


def get_security_question_service(request: Request) -> SecurityQuestionService:
    return request.app.state.security_questions
