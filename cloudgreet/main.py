"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cloudgreet.api.middleware import RequestContextMiddleware
from cloudgreet.api.routes import api_router
from cloudgreet.core.webhook_signature import TelnyxSignatureVerifier
from cloudgreet.infrastructure.conversation_client import ConversationClient
from cloudgreet.infrastructure.notification_client import NotificationClient
from cloudgreet.infrastructure.redis import RedisClient
from cloudgreet.infrastructure.telephony.telnyx_call_control import TelnyxCallControlClient
from cloudgreet.logging_config import setup_logging
from cloudgreet.persistence.database import Database
from cloudgreet.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


def build_signature_verifier() -> TelnyxSignatureVerifier | None:
    """Return a verifier unless running in development or without a key."""
    if settings.environment == "development" or not settings.telnyx_public_key:
        logger.warning("Telnyx webhook signature verification disabled")
        return None
    return TelnyxSignatureVerifier(settings.telnyx_public_key, settings.webhook_tolerance_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    app.state.database = Database(settings.async_database_url)
    app.state.redis = RedisClient(settings.redis_url, enabled=settings.redis_enabled)
    await app.state.redis.connect()
    app.state.call_control = TelnyxCallControlClient(
        settings.telnyx_api_key,
        api_base=settings.telnyx_api_base,
        timeout=settings.http_timeout_seconds,
    )
    app.state.notification_client = NotificationClient(
        settings.resolved_notification_endpoint_url,
        timeout=settings.http_timeout_seconds,
    )
    app.state.conversation_client = ConversationClient(
        settings.resolved_conversation_endpoint_url,
        timeout=settings.http_timeout_seconds,
    )
    app.state.signature_verifier = build_signature_verifier()
    yield
    # Shutdown
    await app.state.redis.disconnect()
    await app.state.database.dispose()


# Create FastAPI app
app = FastAPI(
    title="CloudGreet Voice API",
    description="AI receptionist voice webhooks for Telnyx call control",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CloudGreet Voice API",
        "version": "0.1.0",
        "docs": "/docs",
    }
