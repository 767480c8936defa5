"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cloudgreet.infrastructure.best_effort import BestEffortResult
from cloudgreet.infrastructure.conversation_client import ConversationReply
from cloudgreet.persistence.database import Base, get_db
from cloudgreet.persistence.models import *  # noqa: F401, F403
from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.models.phone_number import PhoneNumberAssignment, PhoneNumberStatus

BUSINESS_NUMBER = "+18005550100"
CALLER_NUMBER = "+15125550199"


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def business(db_session):
    """A business with an assigned Telnyx number."""
    business = Business(
        business_name="Acme Heating",
        business_type="HVAC",
        phone_number="+15125550100",
        address="100 Main St, Austin TX",
        services=["Furnace repair", "AC installation"],
        service_areas=["Austin"],
        status="active",
    )
    db_session.add(business)
    await db_session.flush()

    db_session.add(
        PhoneNumberAssignment(
            number=BUSINESS_NUMBER,
            business_id=business.id,
            status=PhoneNumberStatus.ASSIGNED,
        )
    )
    await db_session.commit()
    await db_session.refresh(business)
    return business


@pytest.fixture
async def agent(db_session, business):
    """Active AI agent for the business."""
    agent = AIAgent(
        business_id=business.id,
        agent_name="Sarah",
        greeting_message="Thanks for calling Acme Heating, this is Sarah. How can I help?",
        configuration={"voice": "onyx", "personality": "friendly", "tone": "professional"},
        is_active=True,
    )
    db_session.add(agent)
    await db_session.commit()
    await db_session.refresh(agent)
    return agent


@pytest.fixture
def call_control():
    """Telnyx call control client that always stops recordings."""
    client = MagicMock()
    client.stop_recording = AsyncMock(return_value=BestEffortResult(operation="record_stop", ok=True))
    return client


@pytest.fixture
def notifier():
    """Notification client that always succeeds."""
    client = MagicMock()
    client.send = AsyncMock(return_value=BestEffortResult(operation="send_notification", ok=True))
    return client


@pytest.fixture
def conversation_client():
    """Conversation endpoint client with a canned reply."""
    client = MagicMock()
    client.generate_reply = AsyncMock(
        return_value=ConversationReply(success=True, response="Sure, what day works for you?")
    )
    return client


@pytest.fixture
def llm_client():
    """LLM client with a canned reply."""
    client = MagicMock()
    client.model_name = "gpt-test"
    client.generate = AsyncMock(return_value="Happy to help! What seems to be the problem?")
    return client


@pytest.fixture
def client(db_session, call_control, notifier, conversation_client, llm_client):
    """Create a test FastAPI client."""
    from fastapi.testclient import TestClient

    from cloudgreet.api import deps
    from cloudgreet.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[deps.get_call_control_client] = lambda: call_control
    app.dependency_overrides[deps.get_notification_client] = lambda: notifier
    app.dependency_overrides[deps.get_conversation_client] = lambda: conversation_client
    app.dependency_overrides[deps.get_redis] = lambda: None
    app.dependency_overrides[deps.get_signature_verifier] = lambda: None
    app.dependency_overrides[deps.get_llm] = lambda: llm_client

    yield TestClient(app)

    app.dependency_overrides.clear()
