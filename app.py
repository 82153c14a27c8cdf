"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.recaptcha import RecaptchaProvider
from infrastructure.credentials.supabase import SupabaseCredentialStore
from infrastructure.email.resend import ResendEmailProvider
from infrastructure.http_client import HttpClient
from infrastructure.whatsapp.callmebot import CallMeBotWhatsAppProvider
from repositories.indexes import ensure_indexes
from repositories.security_question_repository import SecurityQuestionRepository
from repositories.verification_token_repository import VerificationTokenRepository
from routes.health_routes import router as health_router
from routes.recovery_routes import router as recovery_router
from routes.security_question_routes import router as security_question_router
from services.identity_service import IdentityService
from services.otp_service import OtpChannelService
from services.recovery_controller import RecoveryServices
from services.security_question_service import (
    FALLBACK_QUESTIONS,
    SecurityQuestionService,
)
from services.session_store import RecoverySessionStore
from services.verification_token_service import VerificationTokenService
from shared.logging import get_logger
from shared.logging_config import setup_logging

log = get_logger(__name__)


def build_recovery_services(
    settings: AppSettings, db, http_clients: dict[str, HttpClient]
) -> RecoveryServices:
    """Wire the concrete providers and repositories behind the step controller."""
    credentials = SupabaseCredentialStore(
        settings.supabase, http_clients["supabase"], redirect_url=settings.app_url
    )
    identity = IdentityService(
        RecaptchaProvider(settings.captcha.recaptcha_secret, http_clients["captcha"]),
        credentials,
        captcha_required=settings.captcha.captcha_required,
    )
    tokens = VerificationTokenService(
        VerificationTokenRepository(db),
        ResendEmailProvider(settings.email, http_clients["email"]),
        app_url=settings.app_url,
        ttl=timedelta(hours=settings.recovery.verification_token_ttl_hours),
    )
    otp = OtpChannelService(
        CallMeBotWhatsAppProvider(
            settings.whatsapp.callmebot_api_key,
            http_clients["whatsapp"],
            simulate_on_unreachable=settings.whatsapp.whatsapp_simulate_on_unreachable,
        )
    )
    questions = SecurityQuestionService(SecurityQuestionRepository(db))
    return RecoveryServices(
        identity=identity,
        tokens=tokens,
        otp=otp,
        questions=questions,
        credentials=credentials,
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings

        http_clients = {
            "supabase": HttpClient(timeout=10.0),
            "captcha": HttpClient(),
            "email": HttpClient(timeout=10.0),
            "whatsapp": HttpClient(timeout=10.0),
        }
        services = build_recovery_services(settings, app.state.db, http_clients)
        app.state.session_store = RecoverySessionStore(
            services, ttl_seconds=settings.recovery.session_ttl_seconds
        )
        app.state.security_questions = services.questions

        seed = (
            [(q.id, q.question) for q in FALLBACK_QUESTIONS]
            if settings.recovery.seed_security_questions
            else []
        )
        await ensure_indexes(app.state.db, seed_questions=seed)
        if settings.whatsapp.whatsapp_simulate_on_unreachable:
            log.warning("whatsapp_simulation_enabled", env=settings.env)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        for client in http_clients.values():
            await client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(recovery_router)
    app.include_router(security_question_router)

    return app
